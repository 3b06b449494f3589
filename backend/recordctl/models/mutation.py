"""
修改结果与配置状态模型

- MutationResult: 一次 set 成功后的结果（恰好一个 ActionRequired）
- ConfigStatus: 多条状态记录汇总出的配置状态
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ActionRequired


class MutationResult(BaseModel):
    """修改结果"""
    name: str
    action: ActionRequired = ActionRequired.NONE

    model_config = {"frozen": True}

    @property
    def restart_required(self) -> bool:
        return self.action.restart_required


class RestartRequired(BaseModel):
    """待重启的子系统"""
    proxy: bool = False
    manager: bool = False
    supervisor: bool = False

    model_config = {"frozen": True}

    def pending(self) -> list[str]:
        """需要重启的子系统名（按 proxy/manager/supervisor 顺序）"""
        return [k for k in ("proxy", "manager", "supervisor") if getattr(self, k)]


class ConfigStatus(BaseModel):
    """配置状态汇总（各记录各自的读取时刻，不保证跨记录一致）"""
    version: str
    start_time: datetime
    last_reconfigure_time: datetime
    reconfigure_required: bool = False
    restart_required: RestartRequired = Field(default_factory=RestartRequired)

    model_config = {"frozen": True}
