"""
数据模型层 - 定义记录访问层的核心数据结构

所有模块通过这些模型交互，实现解耦：
- TypedValue: 类型化记录值（统一显示/比较）
- RecordHandle / RecordMatchSet: 单条记录与正则匹配结果
- RecordDescriptor / ValidationRule: 记录元数据快照
- MutationResult / ConfigStatus: 修改结果与状态汇总
"""

from .descriptor import RecordDescriptor, ValidationRule
from .enums import (
    AccessLevel,
    ActionRequired,
    CheckType,
    RecordClass,
    RecordType,
    UpdateTier,
)
from .mutation import ConfigStatus, MutationResult, RestartRequired
from .record import RawRecord, RecordHandle, RecordMatchSet
from .value import UNDEFINED_VALUE, TypedValue, render_value

__all__ = [
    "RecordType",
    "RecordClass",
    "AccessLevel",
    "UpdateTier",
    "CheckType",
    "ActionRequired",
    "TypedValue",
    "render_value",
    "UNDEFINED_VALUE",
    "RawRecord",
    "RecordHandle",
    "RecordMatchSet",
    "RecordDescriptor",
    "ValidationRule",
    "MutationResult",
    "RestartRequired",
    "ConfigStatus",
]
