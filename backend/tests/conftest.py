"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(client, service):
        assert client.get("proxy.config.http.cache.http").value.render() == "1"
"""

from __future__ import annotations

from typing import Generator

import pytest

from recordctl.config import RuntimeConfig
from recordctl.config import runtime_config as runtime_config_module
from recordctl.ctl import RecordClient
from recordctl.models import (
    AccessLevel,
    CheckType,
    RecordClass,
    RecordDescriptor,
    RecordType,
    TypedValue,
    UpdateTier,
    ValidationRule,
)
from recordctl.service import InMemoryRecordService

FIXED_NOW = 1760600000.0
START_TIME = 1760500000
RECONFIGURE_TIME = 1760550000
VERSION_STRING = "Traffic Server 6.0.0 Oct 16 2026 10:00:00 build1"


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置"""
    return RuntimeConfig()


@pytest.fixture(autouse=True)
def reset_global_config() -> Generator[None, None, None]:
    """每个测试前后清空全局配置缓存"""
    runtime_config_module._config = None
    yield
    runtime_config_module._config = None


# ============================================================================
# 记录 Fixtures
# ============================================================================

def _record(
    name: str,
    rec_type: RecordType,
    value,
    default=None,
    record_class: RecordClass = RecordClass.CONFIG,
    access: AccessLevel = AccessLevel.DEFAULT,
    update_tier: UpdateTier = UpdateTier.DYNAMIC,
    check: CheckType = CheckType.NONE,
    expr: str | None = None,
    order: int = 0,
) -> RecordDescriptor:
    return RecordDescriptor(
        name=name,
        type=rec_type,
        record_class=record_class,
        access=access,
        update_tier=update_tier,
        validation=ValidationRule(kind=check, expression=expr),
        current_value=TypedValue(type=rec_type, raw=value),
        default_value=TypedValue(type=rec_type, raw=value if default is None else default),
        order=order,
    )


def make_seed_records() -> list[RecordDescriptor]:
    """代表性记录：各数据类型/类别/访问级别/更新方式/校验规则"""
    node_metric = {"record_class": RecordClass.NODE, "access": AccessLevel.READ_ONLY,
                   "update_tier": UpdateTier.NONE}
    return [
        _record("proxy.config.http.server_ports", RecordType.STRING, "8080 8080:ipv6",
                default="8080", update_tier=UpdateTier.RESTART_SERVICE,
                check=CheckType.STRING, order=1),
        _record("proxy.config.http.cache.http", RecordType.INT, 1,
                check=CheckType.INTEGER, expr="[0-1]", order=2),
        _record("proxy.config.http.background_fill_completed_threshold", RecordType.FLOAT, 0.5,
                order=3),
        _record("proxy.config.exec_thread.limit", RecordType.INT, 2,
                update_tier=UpdateTier.RESTART_MANAGER, check=CheckType.INTEGER,
                expr="[1-4096]", order=4),
        _record("proxy.config.http.keep_alive_no_activity_timeout_in", RecordType.INT, 120,
                update_tier=UpdateTier.NONE, order=5),
        _record("proxy.config.admin.user_id", RecordType.STRING, "nobody",
                access=AccessLevel.READ_ONLY, update_tier=UpdateTier.RESTART_FULL, order=6),
        _record("proxy.config.admin.admin_password", RecordType.STRING, "secret",
                access=AccessLevel.NO_ACCESS, order=7),
        _record("proxy.local.incoming_ip_to_bind", RecordType.STRING, "0.0.0.0",
                record_class=RecordClass.LOCAL, update_tier=UpdateTier.RESTART_FULL,
                check=CheckType.IP, order=8),
        _record("proxy.process.http.incoming_requests", RecordType.COUNTER, "42",
                record_class=RecordClass.PROCESS, access=AccessLevel.READ_ONLY,
                update_tier=UpdateTier.NONE),
        _record("proxy.process.version.server.long", RecordType.STRING, VERSION_STRING,
                record_class=RecordClass.PROCESS, access=AccessLevel.READ_ONLY,
                update_tier=UpdateTier.NONE),
        _record("proxy.node.restarts.proxy.start_time", RecordType.INT, START_TIME, **node_metric),
        _record("proxy.node.config.reconfigure_time", RecordType.INT, RECONFIGURE_TIME, **node_metric),
        _record("proxy.node.config.reconfigure_required", RecordType.INT, 0, **node_metric),
        _record("proxy.node.config.restart_required.proxy", RecordType.INT, 0, **node_metric),
        _record("proxy.node.config.restart_required.manager", RecordType.INT, 0, **node_metric),
        _record("proxy.node.config.restart_required.cop", RecordType.INT, 0, **node_metric),
    ]


@pytest.fixture
def seed_records() -> list[RecordDescriptor]:
    return make_seed_records()


@pytest.fixture
def service(seed_records: list[RecordDescriptor]) -> InMemoryRecordService:
    """内存记录服务（每个测试独立）"""
    return InMemoryRecordService(seed_records, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(service: InMemoryRecordService) -> RecordClient:
    return RecordClient(service)


@pytest.fixture
def status_seed() -> dict:
    """状态记录的种子值"""
    return {
        "now": FIXED_NOW,
        "start_time": START_TIME,
        "reconfigure_time": RECONFIGURE_TIME,
        "version": VERSION_STRING,
    }
