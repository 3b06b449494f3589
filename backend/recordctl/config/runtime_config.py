"""
运行期配置 - 读取 recordctl.yaml

职责：
- 加载服务地址/超时/输出格式/日志等运行参数
- 提供环境变量覆盖机制（RECORDCTL_SERVICE__BASE_URL 等）
- 类型安全的配置访问
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_CONFIG_PATH = Path("recordctl.yaml")
CONFIG_PATH_ENV = "RECORDCTL_CONFIG"


class ServiceConfig(BaseModel):
    """记录服务连接配置"""

    base_url: str = "http://127.0.0.1:8084/api/v1"
    timeout_sec: float = 10.0
    verify_tls: bool = True


class OutputConfig(BaseModel):
    """输出配置"""

    records_format: bool = False  # 默认以 records.config 行格式输出


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "WARNING"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "RECORDCTL_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # 环境变量优先于构造参数（YAML），按字段逐项合并
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置，文件不存在时使用默认值"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        # 以普通字典传入，便于与环境变量逐字段合并
        sections = {
            key: cls._extract(runtime_opts, key)
            for key in ("service", "output", "logging")
        }
        return cls(**{k: v for k, v in sections.items() if v})

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result


# 全局配置实例
_config: RuntimeConfig | None = None


def _default_path() -> Path:
    return Path(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(_default_path())
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or _default_path()
    _config = RuntimeConfig.from_yaml(path)
    return _config
