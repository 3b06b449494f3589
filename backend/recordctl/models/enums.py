"""
记录枚举 - 数据类型/记录类别/访问控制/更新方式/校验类型/后续动作

每个枚举提供：
- label(): 人类可读名称（查表，带显式默认分支）
- from_wire(): 兼容管理API整数编码与字符串值，未知值落到 undefined/none
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

E = TypeVar("E", bound=Enum)


def _from_wire(enum_cls: type[E], codes: dict[int, E], value: Any, default: E) -> E:
    """解析线上编码（枚举成员/字符串值/管理API整数编码）"""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return codes.get(value, default)
    if isinstance(value, str):
        text = value.strip().lower()
        if text.lstrip("-").isdigit():
            return codes.get(int(text), default)
        try:
            return enum_cls(text)
        except ValueError:
            return default
    return default


class RecordType(str, Enum):
    """记录数据类型"""
    INT = "int"
    COUNTER = "counter"
    FLOAT = "float"
    STRING = "string"
    UNDEFINED = "undefined"

    def label(self) -> str:
        return _TYPE_LABELS.get(self, "UNDEFINED")

    @classmethod
    def from_wire(cls, value: Any) -> RecordType:
        return _from_wire(cls, _TYPE_CODES, value, cls.UNDEFINED)


class RecordClass(str, Enum):
    """记录类别（配置 or 指标）"""
    CONFIG = "config"
    LOCAL = "local"
    PROCESS = "process"
    NODE = "node"
    CLUSTER = "cluster"
    PLUGIN = "plugin"
    UNDEFINED = "undefined"

    def label(self) -> str:
        return _CLASS_LABELS.get(self, "undefined")

    @property
    def is_config(self) -> bool:
        return self in (RecordClass.CONFIG, RecordClass.LOCAL)

    @classmethod
    def from_wire(cls, value: Any) -> RecordClass:
        return _from_wire(cls, _CLASS_CODES, value, cls.UNDEFINED)


class AccessLevel(str, Enum):
    """访问控制（由服务端强制执行）"""
    NO_ACCESS = "no_access"
    READ_ONLY = "read_only"
    DEFAULT = "default"

    def label(self) -> str:
        return _ACCESS_LABELS.get(self, "default")

    @classmethod
    def from_wire(cls, value: Any) -> AccessLevel:
        return _from_wire(cls, _ACCESS_CODES, value, cls.DEFAULT)


class UpdateTier(str, Enum):
    """更新方式 - 修改后需要的下游动作"""
    DYNAMIC = "dynamic"
    RESTART_SERVICE = "restart_service"
    RESTART_MANAGER = "restart_manager"
    RESTART_FULL = "restart_full"
    NONE = "none"

    def label(self) -> str:
        return _UPDATE_LABELS.get(self, "none")

    @classmethod
    def from_wire(cls, value: Any) -> UpdateTier:
        return _from_wire(cls, _UPDATE_CODES, value, cls.NONE)


class CheckType(str, Enum):
    """校验规则类型"""
    STRING = "string"
    INTEGER = "integer"
    IP = "ip"
    NONE = "none"

    def label(self) -> str:
        return _CHECK_LABELS.get(self, "none")

    @classmethod
    def from_wire(cls, value: Any) -> CheckType:
        return _from_wire(cls, _CHECK_CODES, value, cls.NONE)


class ActionRequired(str, Enum):
    """修改成功后的后续动作，每次修改恰好产生一个（互斥，非叠加标志）"""
    NONE = "none"
    DYNAMIC = "dynamic"
    RESTART_PROXY = "restart_proxy"
    RESTART_MANAGER = "restart_manager"
    FULL_SHUTDOWN = "full_shutdown"

    @property
    def restart_required(self) -> bool:
        return self in (
            ActionRequired.RESTART_PROXY,
            ActionRequired.RESTART_MANAGER,
            ActionRequired.FULL_SHUTDOWN,
        )

    @classmethod
    def from_wire(cls, value: Any) -> ActionRequired:
        return _from_wire(cls, _ACTION_CODES, value, cls.NONE)


# ============================================================================
# 名称表（进程级只读常量）
# ============================================================================

_TYPE_LABELS = {
    RecordType.INT: "INT",
    RecordType.COUNTER: "COUNTER",
    RecordType.FLOAT: "FLOAT",
    RecordType.STRING: "STRING",
}

_CLASS_LABELS = {
    RecordClass.CONFIG: "standard config",
    RecordClass.LOCAL: "local config",
    RecordClass.PROCESS: "process metric",
    RecordClass.NODE: "node metric",
    RecordClass.CLUSTER: "cluster metric",
    RecordClass.PLUGIN: "plugin metric",
}

_ACCESS_LABELS = {
    AccessLevel.NO_ACCESS: "no access",
    AccessLevel.READ_ONLY: "read only",
}

_UPDATE_LABELS = {
    UpdateTier.DYNAMIC: "dynamic, no restart",
    UpdateTier.RESTART_SERVICE: "static, restart traffic_server",
    UpdateTier.RESTART_MANAGER: "static, restart traffic_manager",
    UpdateTier.RESTART_FULL: "static, full restart",
}

_CHECK_LABELS = {
    CheckType.STRING: "string matching a regular expression",
    CheckType.INTEGER: "integer with a specified range",
    CheckType.IP: "IP address",
}

# 管理API整数编码
_TYPE_CODES = {
    0: RecordType.INT,
    1: RecordType.COUNTER,
    2: RecordType.FLOAT,
    3: RecordType.STRING,
    4: RecordType.UNDEFINED,
}

_CLASS_CODES = {
    0x01: RecordClass.CONFIG,
    0x02: RecordClass.PROCESS,
    0x04: RecordClass.NODE,
    0x08: RecordClass.CLUSTER,
    0x10: RecordClass.LOCAL,
    0x20: RecordClass.PLUGIN,
}

_ACCESS_CODES = {
    0: AccessLevel.DEFAULT,
    1: AccessLevel.NO_ACCESS,
    2: AccessLevel.READ_ONLY,
}

_UPDATE_CODES = {
    0: UpdateTier.NONE,
    1: UpdateTier.DYNAMIC,
    2: UpdateTier.RESTART_SERVICE,
    3: UpdateTier.RESTART_MANAGER,
    4: UpdateTier.RESTART_FULL,
}

_CHECK_CODES = {
    0: CheckType.NONE,
    1: CheckType.STRING,
    2: CheckType.INTEGER,
    3: CheckType.IP,
}

_ACTION_CODES = {
    0: ActionRequired.FULL_SHUTDOWN,
    1: ActionRequired.RESTART_MANAGER,
    2: ActionRequired.DYNAMIC,   # reconfigure: 重新读取配置即可
    3: ActionRequired.NONE,      # 修改已在调用中生效
}
