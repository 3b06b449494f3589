"""
HTTP 记录服务 - 通过 JSON/HTTP 访问运行中服务的管理接口

职责：
- 把 IRecordService 的五个操作映射为 HTTP 请求
- 把 HTTP 状态码映射为记录层异常
- 校验响应格式，格式错误统一视为通信错误

接口约定：
    GET  /records/{name}            -> {"name", "type", "value"}
    GET  /records?match=<pattern>   -> {"records": [...]}
    GET  /records/{name}/describe   -> 描述字段
    PUT  /records/{name}  {"value"} -> {"action"}
    POST /reload

依赖：
- 服务地址/超时由运行期配置指定（config.service）

测试要点：
- test_fetch_one_success: 正常读取
- test_status_mapping: 404/403/422 映射
- test_malformed_response: 响应格式错误
- test_connection_error: 服务不可达
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from ..config import get_config
from ..interfaces import (
    AccessDeniedError,
    CommunicationError,
    IRecordService,
    RecordLookupError,
    RecordValidationError,
)
from ..models import ActionRequired, RawRecord

logger = logging.getLogger(__name__)

_STATUS_ERRORS = {
    400: RecordValidationError,
    403: AccessDeniedError,
    404: RecordLookupError,
    422: RecordValidationError,
}


class HttpRecordService(IRecordService):
    """管理接口 HTTP 客户端"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        verify_tls: bool | None = None,
        session: requests.Session | None = None,
    ):
        config = get_config()
        self.base_url = (base_url or config.service.base_url).rstrip("/")
        self.timeout = config.service.timeout_sec if timeout is None else timeout
        self.verify_tls = config.service.verify_tls if verify_tls is None else verify_tls
        self.session = session or requests.Session()

    def fetch_one(self, name: str) -> RawRecord:
        data = self._request("GET", f"/records/{quote(name, safe='')}", target=name)
        return self._raw_record(data, target=name)

    def fetch_matching(self, pattern: str) -> list[RawRecord]:
        data = self._request("GET", "/records", target=pattern, params={"match": pattern})
        records = data.get("records") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise CommunicationError(f"匹配响应格式错误: {pattern}", target=pattern)
        # 先整体校验，避免消费到一半才发现格式错误
        return [self._raw_record(item, target=pattern) for item in records]

    def describe(self, name: str) -> dict[str, Any]:
        data = self._request("GET", f"/records/{quote(name, safe='')}/describe", target=name)
        if not isinstance(data, dict):
            raise CommunicationError(f"描述响应格式错误: {name}", target=name)
        return data

    def set_record(self, name: str, value_text: str) -> ActionRequired:
        data = self._request(
            "PUT",
            f"/records/{quote(name, safe='')}",
            target=name,
            json={"value": value_text},
        )
        if not isinstance(data, dict) or "action" not in data:
            raise CommunicationError(f"修改响应格式错误: {name}", target=name)
        return ActionRequired.from_wire(data["action"])

    def reload(self) -> None:
        self._request("POST", "/reload", target=None)

    def _request(self, method: str, path: str, target: str | None, **kwargs: Any) -> Any:
        """发送请求并解码JSON，错误映射为记录层异常"""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                timeout=self.timeout,
                verify=self.verify_tls,
                **kwargs,
            )
        except requests.RequestException as e:
            raise CommunicationError(f"服务不可达: {url}: {e}", target=target) from e

        error_cls = _STATUS_ERRORS.get(response.status_code)
        if error_cls is not None:
            raise error_cls(self._detail(response), target=target)
        if not response.ok:
            raise CommunicationError(
                f"服务返回错误 {response.status_code}: {self._detail(response)}",
                target=target,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise CommunicationError(f"响应不是合法JSON: {url}", target=target) from e

    @staticmethod
    def _detail(response: requests.Response) -> str:
        """提取错误详情（优先取JSON的error字段）"""
        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason or ""
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return response.text

    @staticmethod
    def _raw_record(data: Any, target: str) -> RawRecord:
        if not isinstance(data, dict):
            raise CommunicationError(f"记录响应格式错误: {target}", target=target)
        try:
            return RawRecord(**data)
        except ValidationError as e:
            raise CommunicationError(f"记录响应格式错误: {target}: {e}", target=target) from e
