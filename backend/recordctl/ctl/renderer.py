"""
输出渲染 - 把记录值对象格式化为人类可读文本

- format_record: NAME: VALUE，或 records.config 行格式 CONFIG NAME TYPE VALUE
- format_descriptor: describe 的字段块
- format_mutation: set 结果提示
- format_status: status 汇总
"""

from __future__ import annotations

from ..models import (
    ActionRequired,
    ConfigStatus,
    MutationResult,
    RecordDescriptor,
    RecordHandle,
)

_MUTATION_SUFFIX = {
    ActionRequired.DYNAMIC: "configuration reload required",
    ActionRequired.RESTART_PROXY: "traffic_server restart required",
    ActionRequired.RESTART_MANAGER: "traffic_manager restart required",
    ActionRequired.FULL_SHUTDOWN: "full shutdown required",
}

_SUBSYSTEM_NAMES = {
    "proxy": "traffic_server",
    "manager": "traffic_manager",
    "supervisor": "traffic_cop",
}


def format_record(record: RecordHandle, records_format: bool = False) -> str:
    """单条记录"""
    if records_format:
        # TODO: 区分 CONFIG/LOCAL 需要记录类别，当前读取接口不返回类别
        return f"CONFIG {record.name} {record.type.label()} {record.value.render()}"
    return f"{record.name}: {record.value.render()}"


def _field(label: str, value: object) -> str:
    return f"{label:<16}: {value}"


def format_descriptor(desc: RecordDescriptor) -> str:
    """记录描述字段块"""
    lines = [
        _field("Name", desc.name),
        _field("Current Value", desc.current_value.render()),
        _field("Default Value", desc.default_value.render()),
        _field("Record Type", desc.record_class.label()),
        _field("Data Type", desc.type.label()),
        _field("Access Control", desc.access.label()),
        _field("Update Type", desc.update_tier.label()),
        _field("Update Status", f"0x{desc.update_status:x}"),
        _field("Syntax Check", desc.validation.render()),
        _field("Version", desc.version),
        _field("Order", desc.order),
        _field("Raw Stat Block", desc.raw_stat_block),
    ]
    return "\n".join(lines)


def format_mutation(result: MutationResult) -> str:
    """set 结果提示"""
    suffix = _MUTATION_SUFFIX.get(result.action)
    if suffix is None:
        return f"set {result.name}"
    return f"set {result.name}, {suffix}"


def format_status(status: ConfigStatus) -> str:
    """配置状态汇总"""
    lines = [
        status.version,
        f"Started at {status.start_time.ctime()}",
        f"Last reconfiguration at {status.last_reconfigure_time.ctime()}",
        "Reconfiguration required" if status.reconfigure_required else "Configuration is current",
    ]
    for key in status.restart_required.pending():
        lines.append(f"{_SUBSYSTEM_NAMES[key]} requires restarting")
    return "\n".join(lines)
