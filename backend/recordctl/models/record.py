"""
记录模型 - 单条记录与正则匹配结果集

- RawRecord: 服务端返回的原始记录（名称、类型、原始值）
- RecordHandle: 读取成功后的记录值对象
- RecordMatchSet: 一次正则查询的结果，单次消费
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import BaseModel, field_validator

from .enums import RecordType
from .value import RawValue, TypedValue


class RawRecord(BaseModel):
    """原始记录（服务边界的数据形态）"""
    name: str
    type: RecordType = RecordType.UNDEFINED
    value: RawValue = None

    model_config = {"frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> RecordType:
        return RecordType.from_wire(v)


class RecordHandle(BaseModel):
    """已读取的记录（值对象，不是活连接）"""
    name: str
    value: TypedValue

    model_config = {"frozen": True}

    @property
    def type(self) -> RecordType:
        return self.value.type

    @classmethod
    def from_raw(cls, raw: RawRecord) -> RecordHandle:
        return cls(name=raw.name, value=TypedValue(type=raw.type, raw=raw.value))

    def as_int(self) -> int | None:
        return self.value.as_int()


class RecordMatchSet(Iterator[RecordHandle]):
    """
    正则匹配结果集

    惰性、单次、有限：每条记录恰好产出一次，消费完后 empty() 为 True。
    需要重新遍历时应以同一正则再次查询，结果可能不同（反映服务的实时状态）。

    注意：服务端不按记录类别过滤，只需要配置类记录时由调用方自行过滤。
    """

    _EXHAUSTED = object()

    def __init__(self, pattern: str, records: Iterable[RawRecord]):
        self.pattern = pattern
        self._source = iter(records)
        self._peeked: Any = None
        self._consumed = 0

    def __iter__(self) -> RecordMatchSet:
        return self

    def __next__(self) -> RecordHandle:
        raw = self._peek()
        if raw is self._EXHAUSTED:
            raise StopIteration
        self._peeked = None
        self._consumed += 1
        return RecordHandle.from_raw(raw)

    def _peek(self) -> Any:
        if self._peeked is None:
            self._peeked = next(self._source, self._EXHAUSTED)
        return self._peeked

    def empty(self) -> bool:
        """是否已无剩余记录"""
        return self._peek() is self._EXHAUSTED

    @property
    def consumed(self) -> int:
        """已产出的记录数"""
        return self._consumed
