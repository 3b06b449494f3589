"""
类型化值 - 把各种原始编码的记录值归一为统一的显示/比较形式

渲染规则：
- int/counter: 十进制
- float: 服务端原生 %f 格式
- string: 原样输出（bytes 按 UTF-8 解码）
- undefined 或无原始值: 固定占位符，与空字符串可区分

渲染是全函数，任何输入都不抛异常；无法解析的数值原样输出。
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, field_validator

from .enums import RecordType

UNDEFINED_VALUE = "(undefined)"

RawValue = Union[str, bytes, int, float, None]


def _as_text(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    return str(raw)


def render_value(rec_type: Any, raw: RawValue) -> str:
    """渲染记录值（全函数）"""
    rtype = RecordType.from_wire(rec_type)
    if raw is None or rtype is RecordType.UNDEFINED:
        return UNDEFINED_VALUE

    text = _as_text(raw)

    if rtype in (RecordType.INT, RecordType.COUNTER):
        if isinstance(raw, int) and not isinstance(raw, bool):
            return str(raw)
        try:
            return str(int(text.strip()))
        except ValueError:
            return text

    if rtype is RecordType.FLOAT:
        try:
            return f"{float(text.strip()):f}"
        except (ValueError, OverflowError):
            return text

    return text


class TypedValue(BaseModel):
    """类型化记录值（值对象，不可变）"""
    type: RecordType = RecordType.UNDEFINED
    raw: RawValue = None

    model_config = {"frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> RecordType:
        return RecordType.from_wire(v)

    @property
    def is_undefined(self) -> bool:
        return self.raw is None or self.type is RecordType.UNDEFINED

    def render(self) -> str:
        return render_value(self.type, self.raw)

    def as_int(self) -> int | None:
        """按整数读取（状态汇总用），无法解析时返回 None"""
        if self.is_undefined:
            return None
        text = self.render()
        try:
            if self.type is RecordType.FLOAT:
                return int(float(text))
            return int(text)
        except (ValueError, OverflowError):
            return None

    def __str__(self) -> str:
        return self.render()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedValue):
            return NotImplemented
        return self.type is other.type and self.render() == other.render()

    def __hash__(self) -> int:
        return hash((self.type, self.render()))
