"""
模块接口契约 - 记录服务边界与异常定义

设计原则：
1. 客户端只通过 IRecordService 访问运行中的服务，不直接依赖传输实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from recordctl.interfaces import IRecordService

    class MyRecordService(IRecordService):
        def fetch_one(self, name: str) -> RawRecord:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .models import ActionRequired, RawRecord


# ============================================================================
# 记录服务接口
# ============================================================================

class IRecordService(ABC):
    """记录服务接口 - 读取/描述/修改/重载运行中服务的记录"""

    @abstractmethod
    def fetch_one(self, name: str) -> RawRecord:
        """
        读取单条记录

        Args:
            name: 记录名

        Returns:
            原始记录（名称、类型、原始值）

        Raises:
            RecordLookupError: 记录不存在
            CommunicationError: 服务不可达或响应格式错误
        """
        ...

    @abstractmethod
    def fetch_matching(self, pattern: str) -> Iterable[RawRecord]:
        """
        按正则匹配记录名（不锚定，由服务端求值）

        Args:
            pattern: 正则表达式

        Returns:
            服务端顺序的原始记录序列
        """
        ...

    @abstractmethod
    def describe(self, name: str) -> dict[str, Any]:
        """
        读取记录的完整元数据

        Returns:
            描述字段字典（见 RecordDescriptor.from_wire）
        """
        ...

    @abstractmethod
    def set_record(self, name: str, value_text: str) -> ActionRequired:
        """
        修改记录值，值文本原样交给服务端解析

        Returns:
            本次修改需要的后续动作（恰好一个）

        Raises:
            RecordLookupError: 记录不存在
            RecordValidationError: 值未通过记录的校验规则
            AccessDeniedError: 访问级别禁止修改
            CommunicationError: 通信失败
        """
        ...

    @abstractmethod
    def reload(self) -> None:
        """请求服务重新加载配置"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class RecordCtlError(Exception):
    """基础异常，target 为出错的记录名或正则"""

    def __init__(self, message: str, target: str | None = None):
        super().__init__(message)
        self.target = target


class RecordLookupError(RecordCtlError, LookupError):
    """记录不存在"""
    pass


class CommunicationError(RecordCtlError):
    """服务不可达或响应格式错误"""
    pass


class RecordValidationError(RecordCtlError):
    """值未通过校验"""
    pass


class AccessDeniedError(RecordCtlError):
    """访问级别禁止修改"""
    pass


class StatusError(RecordCtlError):
    """状态汇总失败（任一记录读取失败）"""
    pass
