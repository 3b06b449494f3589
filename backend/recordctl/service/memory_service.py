"""
内存记录服务 - 在本进程内模拟运行中服务的记录存储

职责：
1. 按名称/正则读取记录（匹配顺序为登记顺序）
2. 在服务端一侧执行访问控制、类型解析与校验规则
3. 按记录的更新方式返回后续动作，并登记待重启/待重载状态
4. reload 时刷新重载时间

用于单元测试与离线演示，不做持久化。
"""

from __future__ import annotations

import ipaddress
import logging
import re
import time
from collections.abc import Callable, Iterable
from typing import Any

from ..interfaces import (
    AccessDeniedError,
    IRecordService,
    RecordLookupError,
    RecordValidationError,
)
from ..models import (
    AccessLevel,
    ActionRequired,
    CheckType,
    RawRecord,
    RecordDescriptor,
    RecordType,
    TypedValue,
    UpdateTier,
    ValidationRule,
)

logger = logging.getLogger(__name__)

RECONFIGURE_TIME = "proxy.node.config.reconfigure_time"
RECONFIGURE_REQUIRED = "proxy.node.config.reconfigure_required"
RESTART_REQUIRED_PROXY = "proxy.node.config.restart_required.proxy"
RESTART_REQUIRED_MANAGER = "proxy.node.config.restart_required.manager"
RESTART_REQUIRED_COP = "proxy.node.config.restart_required.cop"

_TIER_ACTIONS = {
    UpdateTier.DYNAMIC: ActionRequired.DYNAMIC,
    UpdateTier.RESTART_SERVICE: ActionRequired.RESTART_PROXY,
    UpdateTier.RESTART_MANAGER: ActionRequired.RESTART_MANAGER,
    UpdateTier.RESTART_FULL: ActionRequired.FULL_SHUTDOWN,
    UpdateTier.NONE: ActionRequired.NONE,
}

# 修改后需要置位的状态记录
_PENDING_FLAGS = {
    ActionRequired.DYNAMIC: [RECONFIGURE_REQUIRED],
    ActionRequired.RESTART_PROXY: [RESTART_REQUIRED_PROXY],
    ActionRequired.RESTART_MANAGER: [RESTART_REQUIRED_MANAGER],
    ActionRequired.FULL_SHUTDOWN: [
        RESTART_REQUIRED_PROXY,
        RESTART_REQUIRED_MANAGER,
        RESTART_REQUIRED_COP,
    ],
}

_RANGE_RE = re.compile(r"^\[\s*(-?\d+)\s*-\s*(-?\d+)\s*\]$")


class InMemoryRecordService(IRecordService):
    """内存记录服务"""

    def __init__(
        self,
        records: Iterable[RecordDescriptor] = (),
        clock: Callable[[], float] = time.time,
    ):
        self._records: dict[str, RecordDescriptor] = {}
        self._clock = clock
        for desc in records:
            self.add(desc)

    @classmethod
    def from_wire(cls, items: Iterable[dict[str, Any]], **kwargs: Any) -> InMemoryRecordService:
        """从描述字段列表构造（YAML/JSON 种子数据）"""
        return cls((RecordDescriptor.from_wire(item) for item in items), **kwargs)

    def add(self, desc: RecordDescriptor) -> None:
        """登记（或替换）一条记录"""
        self._records[desc.name] = desc

    def __contains__(self, name: str) -> bool:
        return name in self._records

    # === IRecordService ===

    def fetch_one(self, name: str) -> RawRecord:
        desc = self._get(name)
        return RawRecord(name=desc.name, type=desc.type, value=desc.current_value.raw)

    def fetch_matching(self, pattern: str) -> list[RawRecord]:
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise RecordLookupError(f"无效的正则: {pattern}: {e}", target=pattern) from e

        return [
            RawRecord(name=desc.name, type=desc.type, value=desc.current_value.raw)
            for desc in self._records.values()
            if regex.search(desc.name)
        ]

    def describe(self, name: str) -> dict[str, Any]:
        return self._get(name).to_wire()

    def set_record(self, name: str, value_text: str) -> ActionRequired:
        desc = self._get(name)

        if desc.access in (AccessLevel.NO_ACCESS, AccessLevel.READ_ONLY):
            raise AccessDeniedError(f"记录不可修改（{desc.access.label()}）: {name}", target=name)

        value = self._parse(desc, value_text)
        self._check(desc.validation, value_text, name)

        self._records[name] = desc.model_copy(
            update={
                "current_value": TypedValue(type=desc.type, raw=value),
                "version": desc.version + 1,
            }
        )

        action = _TIER_ACTIONS.get(desc.update_tier, ActionRequired.NONE)
        for flag in _PENDING_FLAGS.get(action, []):
            self._poke(flag, 1)

        logger.info(f"set {name} = {value_text!r} ({action.value})")
        return action

    def reload(self) -> None:
        self._poke(RECONFIGURE_TIME, int(self._clock()))
        self._poke(RECONFIGURE_REQUIRED, 0)
        logger.info("配置已重载")

    # === 内部 ===

    def _get(self, name: str) -> RecordDescriptor:
        desc = self._records.get(name)
        if desc is None:
            raise RecordLookupError(f"记录不存在: {name}", target=name)
        return desc

    def _poke(self, name: str, value: Any) -> None:
        """直接写入状态记录（不做访问控制），记录不存在时忽略"""
        desc = self._records.get(name)
        if desc is not None:
            self._records[name] = desc.model_copy(
                update={"current_value": TypedValue(type=desc.type, raw=value)}
            )

    @staticmethod
    def _parse(desc: RecordDescriptor, text: str) -> Any:
        """按记录声明的类型解析值文本"""
        try:
            if desc.type in (RecordType.INT, RecordType.COUNTER):
                return int(text.strip())
            if desc.type is RecordType.FLOAT:
                return float(text.strip())
        except ValueError as e:
            raise RecordValidationError(
                f"值类型不符（{desc.type.label()}）: {desc.name} = {text!r}",
                target=desc.name,
            ) from e

        if desc.type is RecordType.STRING:
            return text
        raise RecordValidationError(f"记录类型未定义: {desc.name}", target=desc.name)

    @staticmethod
    def _check(rule: ValidationRule, text: str, name: str) -> None:
        """执行校验规则"""
        if rule.kind is CheckType.NONE:
            return

        ok = False
        if rule.kind is CheckType.STRING:
            try:
                # 不锚定匹配，与记录名正则查询一致
                ok = rule.expression is None or re.search(rule.expression, text) is not None
            except re.error:
                ok = False
        elif rule.kind is CheckType.INTEGER:
            match = _RANGE_RE.match(rule.expression or "")
            if match:
                lo, hi = int(match.group(1)), int(match.group(2))
                try:
                    ok = lo <= int(text.strip()) <= hi
                except ValueError:
                    ok = False
        elif rule.kind is CheckType.IP:
            try:
                ipaddress.ip_address(text.strip())
                ok = True
            except ValueError:
                ok = False

        if not ok:
            raise RecordValidationError(f"值未通过校验（{rule.render()}）: {name} = {text!r}", target=name)
