"""
记录描述模型 - 单条记录的完整元数据快照

对应 describe 操作：类别、访问控制、更新方式、校验规则、版本、顺序、
原始统计块ID，以及当前值/默认值。快照只读，不随服务状态变化。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .enums import AccessLevel, CheckType, RecordClass, RecordType, UpdateTier
from .value import TypedValue


class ValidationRule(BaseModel):
    """校验规则（仅用于展示，校验由服务端执行）"""
    kind: CheckType = CheckType.NONE
    expression: str | None = Field(None, description="校验表达式，None 表示没有表达式")

    model_config = {"frozen": True}

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, v: Any) -> CheckType:
        return CheckType.from_wire(v)

    def render(self) -> str:
        """无表达式只输出类型名；有表达式（包括空串）附加原文"""
        if self.expression is None:
            return self.kind.label()
        return f"{self.kind.label()}, '{self.expression}'"


class RecordDescriptor(BaseModel):
    """记录描述（describe 结果）"""
    name: str
    type: RecordType = RecordType.UNDEFINED
    record_class: RecordClass = RecordClass.UNDEFINED
    access: AccessLevel = AccessLevel.DEFAULT
    update_tier: UpdateTier = UpdateTier.NONE
    validation: ValidationRule = Field(default_factory=ValidationRule)
    current_value: TypedValue = Field(default_factory=TypedValue)
    default_value: TypedValue = Field(default_factory=TypedValue)
    update_status: int = Field(0, ge=0, lt=2**64, description="更新状态位")
    version: int = 0
    order: int = 0
    raw_stat_block: int = Field(0, description="原始统计块ID")

    model_config = {"frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> RecordType:
        return RecordType.from_wire(v)

    @field_validator("record_class", mode="before")
    @classmethod
    def _coerce_class(cls, v: Any) -> RecordClass:
        return RecordClass.from_wire(v)

    @field_validator("access", mode="before")
    @classmethod
    def _coerce_access(cls, v: Any) -> AccessLevel:
        return AccessLevel.from_wire(v)

    @field_validator("update_tier", mode="before")
    @classmethod
    def _coerce_update(cls, v: Any) -> UpdateTier:
        return UpdateTier.from_wire(v)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> RecordDescriptor:
        """
        从服务端描述字段构造

        字段：name, type, class, access, update_type, update_status,
        check_type, check_expr, current_value, default_value, version,
        order, raw_stat_block

        Raises:
            pydantic.ValidationError: 字段缺失或格式错误
        """
        rec_type = RecordType.from_wire(data.get("type"))
        return cls(
            name=data.get("name"),
            type=rec_type,
            record_class=data.get("class"),
            access=data.get("access"),
            update_tier=data.get("update_type"),
            validation=ValidationRule(
                kind=data.get("check_type"),
                expression=data.get("check_expr"),
            ),
            current_value=TypedValue(type=rec_type, raw=data.get("current_value")),
            default_value=TypedValue(type=rec_type, raw=data.get("default_value")),
            update_status=data.get("update_status") or 0,
            version=data.get("version") or 0,
            order=data.get("order") or 0,
            raw_stat_block=data.get("raw_stat_block") or 0,
        )

    def to_wire(self) -> dict[str, Any]:
        """转换为服务端描述字段（from_wire 的逆操作）"""
        return {
            "name": self.name,
            "type": self.type.value,
            "class": self.record_class.value,
            "access": self.access.value,
            "update_type": self.update_tier.value,
            "update_status": self.update_status,
            "check_type": self.validation.kind.value,
            "check_expr": self.validation.expression,
            "current_value": self.current_value.raw,
            "default_value": self.default_value.raw,
            "version": self.version,
            "order": self.order,
            "raw_stat_block": self.raw_stat_block,
        }
