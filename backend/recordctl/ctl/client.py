"""
记录客户端 - 记录访问层的对外操作

职责：
1. get/match/describe/set/reload 五个基本操作
2. 把服务返回的原始数据包装为值对象
3. 多条记录汇总为配置状态（status）
4. 记录操作日志，错误原样上抛（不重试、不吞异常）

测试要点：
- test_get_counter: 计数器记录读取
- test_match_consumes_once: 匹配结果单次消费
- test_set_action_required: 修改返回恰好一个后续动作
- test_status_fails_atomically: 任一读取失败则整体失败
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from ..interfaces import CommunicationError, IRecordService, RecordCtlError, StatusError
from ..models import (
    ConfigStatus,
    MutationResult,
    RecordDescriptor,
    RecordHandle,
    RecordMatchSet,
    RestartRequired,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# status 汇总所需的记录
STATUS_VERSION = "proxy.process.version.server.long"
STATUS_START_TIME = "proxy.node.restarts.proxy.start_time"
STATUS_RECONFIGURE_TIME = "proxy.node.config.reconfigure_time"
STATUS_RECONFIGURE_REQUIRED = "proxy.node.config.reconfigure_required"
STATUS_RESTART_PROXY = "proxy.node.config.restart_required.proxy"
STATUS_RESTART_MANAGER = "proxy.node.config.restart_required.manager"
STATUS_RESTART_COP = "proxy.node.config.restart_required.cop"

STATUS_RECORDS = [
    STATUS_VERSION,
    STATUS_START_TIME,
    STATUS_RECONFIGURE_TIME,
    STATUS_RECONFIGURE_REQUIRED,
    STATUS_RESTART_PROXY,
    STATUS_RESTART_MANAGER,
    STATUS_RESTART_COP,
]


class RecordClient:
    """记录访问客户端（同步、无缓存、无重试）"""

    def __init__(self, service: IRecordService):
        self.service = service

    def get(self, name: str) -> RecordHandle:
        """读取单条记录"""
        raw = self._call("fetch", name, self.service.fetch_one, name)
        return RecordHandle.from_raw(raw)

    def get_many(self, names: Iterable[str]) -> Iterator[RecordHandle]:
        """依次读取多条记录，遇到第一个错误即停止"""
        for name in names:
            yield self.get(name)

    def match(self, pattern: str) -> RecordMatchSet:
        """按正则匹配记录名（服务端不按类别过滤）"""
        records = self._call("match", pattern, self.service.fetch_matching, pattern)
        return RecordMatchSet(pattern, records)

    def describe(self, name: str) -> RecordDescriptor:
        """读取记录描述"""
        data = self._call("describe", name, self.service.describe, name)
        try:
            return RecordDescriptor.from_wire(data)
        except (ValidationError, AttributeError, TypeError) as e:
            logger.warning(f"describe 响应格式错误 {name}: {e}")
            raise CommunicationError(f"描述响应格式错误: {name}", target=name) from e

    def set(self, name: str, value_text: str) -> MutationResult:
        """修改记录值，值文本不做客户端转换或校验"""
        action = self._call("set", name, self.service.set_record, name, value_text)
        logger.info(f"set {name}: {action.value}")
        return MutationResult(name=name, action=action)

    def reload(self) -> None:
        """请求配置重载"""
        self._call("reload", None, self.service.reload)
        logger.info("配置重载请求已发送")

    def status(self) -> ConfigStatus:
        """
        汇总配置状态

        逐条读取 STATUS_RECORDS，任一读取失败（或整数字段无法解析）
        整体失败并抛出 StatusError，不返回部分结果。
        """
        handles: dict[str, RecordHandle] = {}
        for name in STATUS_RECORDS:
            try:
                handles[name] = self.get(name)
            except RecordCtlError as e:
                raise StatusError(f"状态读取失败: {name}: {e}", target=name) from e

        def as_int(name: str) -> int:
            value = handles[name].as_int()
            if value is None:
                raise StatusError(
                    f"状态记录不是整数: {name} = {handles[name].value.render()}",
                    target=name,
                )
            return value

        def as_time(name: str) -> datetime:
            try:
                return datetime.fromtimestamp(as_int(name))
            except (OverflowError, OSError, ValueError) as e:
                raise StatusError(f"状态记录不是有效时间: {name}", target=name) from e

        return ConfigStatus(
            version=handles[STATUS_VERSION].value.render(),
            start_time=as_time(STATUS_START_TIME),
            last_reconfigure_time=as_time(STATUS_RECONFIGURE_TIME),
            reconfigure_required=bool(as_int(STATUS_RECONFIGURE_REQUIRED)),
            restart_required=RestartRequired(
                proxy=bool(as_int(STATUS_RESTART_PROXY)),
                manager=bool(as_int(STATUS_RESTART_MANAGER)),
                supervisor=bool(as_int(STATUS_RESTART_COP)),
            ),
        )

    def _call(self, verb: str, target: str | None, func: Callable[..., T], *args: Any) -> T:
        logger.debug(f"{verb} {target or ''}".rstrip())
        try:
            return func(*args)
        except RecordCtlError as e:
            logger.warning(f"{verb} 失败 {target or ''}: {e}")
            raise
