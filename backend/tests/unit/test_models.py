"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from recordctl.models import (
    UNDEFINED_VALUE,
    AccessLevel,
    ActionRequired,
    CheckType,
    RawRecord,
    RecordClass,
    RecordDescriptor,
    RecordMatchSet,
    RecordType,
    TypedValue,
    UpdateTier,
    ValidationRule,
    render_value,
)


class TestRenderValue:
    """值渲染测试"""

    @pytest.mark.parametrize(
        "rec_type, raw, expected",
        [
            (RecordType.INT, 8080, "8080"),
            (RecordType.INT, "-12", "-12"),
            (RecordType.COUNTER, "42", "42"),
            (RecordType.COUNTER, b"42", "42"),
            (RecordType.FLOAT, 0.5, "0.500000"),
            (RecordType.FLOAT, "2", "2.000000"),
            (RecordType.STRING, "8080 8080:ipv6", "8080 8080:ipv6"),
            (RecordType.STRING, b"caf\xc3\xa9", "café"),
            (RecordType.STRING, "", ""),
        ],
    )
    def test_render(self, rec_type, raw, expected):
        """测试各类型渲染"""
        assert render_value(rec_type, raw) == expected

    @pytest.mark.parametrize("rec_type", list(RecordType))
    def test_missing_raw_is_placeholder(self, rec_type):
        """测试无原始值时输出占位符"""
        assert render_value(rec_type, None) == UNDEFINED_VALUE

    def test_placeholder_differs_from_empty(self):
        """测试占位符与空字符串可区分"""
        assert UNDEFINED_VALUE != ""
        assert render_value(RecordType.UNDEFINED, "x") == UNDEFINED_VALUE
        assert render_value(RecordType.STRING, "") == ""

    def test_unknown_type_code(self):
        """测试未知类型编码不抛异常"""
        assert render_value(99, "abc") == UNDEFINED_VALUE
        assert render_value("bogus", "abc") == UNDEFINED_VALUE

    def test_unparseable_numeric_falls_back(self):
        """测试无法解析的数值原样输出"""
        assert render_value(RecordType.INT, "12abc") == "12abc"
        assert render_value(RecordType.FLOAT, "n/a") == "n/a"
        assert render_value(RecordType.COUNTER, b"\xff") == "�"


class TestTypedValue:
    """类型化值测试"""

    def test_equality_by_rendering(self):
        """测试按类型+渲染结果判等"""
        assert TypedValue(type=RecordType.INT, raw="42") == TypedValue(type=RecordType.INT, raw=42)
        assert TypedValue(type=RecordType.FLOAT, raw="1.5") == TypedValue(type=RecordType.FLOAT, raw=1.5)

    def test_inequality_by_type(self):
        """测试类型不同则不等"""
        assert TypedValue(type=RecordType.INT, raw=42) != TypedValue(type=RecordType.COUNTER, raw=42)

    def test_hash_consistent(self):
        """测试相等的值哈希一致"""
        values = {TypedValue(type=RecordType.INT, raw="7"), TypedValue(type=RecordType.INT, raw=7)}
        assert len(values) == 1

    def test_type_from_wire_code(self):
        """测试类型接受管理API编码"""
        assert TypedValue(type=1, raw="42").type is RecordType.COUNTER
        assert TypedValue(type="STRING", raw="x").type is RecordType.STRING

    def test_as_int(self):
        """测试按整数读取"""
        assert TypedValue(type=RecordType.INT, raw="1760500000").as_int() == 1760500000
        assert TypedValue(type=RecordType.FLOAT, raw=2.0).as_int() == 2
        assert TypedValue(type=RecordType.STRING, raw="abc").as_int() is None
        assert TypedValue(type=RecordType.INT, raw=None).as_int() is None

    def test_str(self):
        assert str(TypedValue(type=RecordType.FLOAT, raw=0.25)) == "0.250000"


class TestEnums:
    """枚举名称表测试"""

    def test_type_labels(self):
        assert [t.label() for t in RecordType] == ["INT", "COUNTER", "FLOAT", "STRING", "UNDEFINED"]

    def test_class_labels(self):
        assert RecordClass.CONFIG.label() == "standard config"
        assert RecordClass.LOCAL.label() == "local config"
        assert RecordClass.PLUGIN.label() == "plugin metric"
        assert RecordClass.UNDEFINED.label() == "undefined"

    def test_access_labels(self):
        assert AccessLevel.NO_ACCESS.label() == "no access"
        assert AccessLevel.READ_ONLY.label() == "read only"
        assert AccessLevel.DEFAULT.label() == "default"

    def test_update_labels(self):
        assert UpdateTier.DYNAMIC.label() == "dynamic, no restart"
        assert UpdateTier.RESTART_FULL.label() == "static, full restart"
        assert UpdateTier.NONE.label() == "none"

    def test_check_labels(self):
        assert CheckType.IP.label() == "IP address"
        assert CheckType.NONE.label() == "none"

    def test_from_wire_codes(self):
        """测试管理API整数编码"""
        assert RecordClass.from_wire(0x10) is RecordClass.LOCAL
        assert AccessLevel.from_wire(2) is AccessLevel.READ_ONLY
        assert UpdateTier.from_wire("3") is UpdateTier.RESTART_MANAGER
        assert ActionRequired.from_wire(0) is ActionRequired.FULL_SHUTDOWN

    def test_from_wire_default_arm(self):
        """测试未知值落到默认分支"""
        assert RecordType.from_wire(42) is RecordType.UNDEFINED
        assert RecordClass.from_wire(None) is RecordClass.UNDEFINED
        assert AccessLevel.from_wire("whatever") is AccessLevel.DEFAULT
        assert UpdateTier.from_wire(True) is UpdateTier.NONE
        assert ActionRequired.from_wire("bogus") is ActionRequired.NONE

    def test_action_restart_required(self):
        """测试后续动作是否需要重启"""
        assert not ActionRequired.NONE.restart_required
        assert not ActionRequired.DYNAMIC.restart_required
        assert ActionRequired.RESTART_PROXY.restart_required
        assert ActionRequired.FULL_SHUTDOWN.restart_required


class TestValidationRule:
    """校验规则渲染测试"""

    def test_without_expression(self):
        """测试无表达式只输出类型名"""
        rule = ValidationRule(kind=CheckType.STRING)
        assert rule.render() == "string matching a regular expression"

    def test_with_expression(self):
        """测试有表达式附加原文"""
        rule = ValidationRule(kind=CheckType.INTEGER, expression="[0-1]")
        assert rule.render() == "integer with a specified range, '[0-1]'"

    def test_empty_expression_distinct(self):
        """测试空串表达式与无表达式可区分"""
        absent = ValidationRule(kind=CheckType.STRING, expression=None)
        empty = ValidationRule(kind=CheckType.STRING, expression="")
        assert absent.render() != empty.render()
        assert empty.render() == "string matching a regular expression, ''"


class TestRecordDescriptor:
    """记录描述测试"""

    def test_from_wire(self):
        """测试从描述字段构造"""
        desc = RecordDescriptor.from_wire({
            "name": "proxy.config.http.cache.http",
            "type": 0,
            "class": 1,
            "access": 0,
            "update_type": 1,
            "update_status": 255,
            "check_type": 2,
            "check_expr": "[0-1]",
            "current_value": 1,
            "default_value": "1",
            "version": 3,
            "order": 12,
            "raw_stat_block": 0,
        })
        assert desc.type is RecordType.INT
        assert desc.record_class is RecordClass.CONFIG
        assert desc.update_tier is UpdateTier.DYNAMIC
        assert desc.validation.expression == "[0-1]"
        assert desc.current_value == desc.default_value
        assert desc.update_status == 255
        assert desc.version == 3

    def test_from_wire_optional_fields(self):
        """测试可选字段缺失时填充默认值"""
        desc = RecordDescriptor.from_wire({"name": "proxy.config.x", "type": "string"})
        assert desc.access is AccessLevel.DEFAULT
        assert desc.validation.expression is None
        assert desc.current_value.render() == UNDEFINED_VALUE
        assert desc.version == 0

    def test_from_wire_missing_name(self):
        """测试缺少名称时报错"""
        with pytest.raises(ValidationError):
            RecordDescriptor.from_wire({"type": 0})

    def test_frozen(self):
        """测试描述快照不可修改"""
        desc = RecordDescriptor(name="proxy.config.x")
        with pytest.raises(ValidationError):
            desc.version = 2


class TestRecordMatchSet:
    """匹配结果集测试"""

    @staticmethod
    def _raw(names):
        return [RawRecord(name=n, type=RecordType.INT, value=i) for i, n in enumerate(names)]

    def test_consume_once(self):
        """测试每条记录恰好产出一次，消费后为空"""
        match_set = RecordMatchSet("^a", self._raw(["a.1", "a.2", "a.3"]))
        assert not match_set.empty()

        names = [record.name for record in match_set]
        assert names == ["a.1", "a.2", "a.3"]
        assert match_set.empty()
        assert match_set.consumed == 3
        assert list(match_set) == []

    def test_lazy(self):
        """测试惰性消费"""
        pulled = []

        def source():
            for raw in self._raw(["a.1", "a.2"]):
                pulled.append(raw.name)
                yield raw

        match_set = RecordMatchSet("^a", source())
        assert pulled == []
        first = next(match_set)
        assert first.name == "a.1"
        assert pulled == ["a.1"]

    def test_empty_set(self):
        match_set = RecordMatchSet("^none", [])
        assert match_set.empty()
        with pytest.raises(StopIteration):
            next(match_set)
