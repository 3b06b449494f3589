"""
子命令分发 - recordctl get/describe/set/match/reload/status

职责：
1. 解析命令行参数
2. 按子命令调用 RecordClient 并输出渲染结果
3. 错误输出到 stderr（错误类型 + 记录名/正则原文），返回非零退出码
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from ..config import get_config, reload_config
from ..interfaces import IRecordService, RecordCtlError
from ..service import HttpRecordService
from .client import RecordClient
from .renderer import format_descriptor, format_mutation, format_record, format_status

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 2

PROG = "recordctl"


def _fail(action: str, error: RecordCtlError) -> int:
    print(f"{PROG}: {action}: {type(error).__name__}: {error}", file=sys.stderr)
    return EXIT_ERROR


def _records_format(args: argparse.Namespace) -> bool:
    if args.records is None:
        return get_config().output.records_format
    return args.records


def cmd_get(client: RecordClient, args: argparse.Namespace) -> int:
    """读取一条或多条记录"""
    recfmt = _records_format(args)
    for name in args.names:
        try:
            record = client.get(name)
        except RecordCtlError as e:
            return _fail(f"failed to fetch {name}", e)
        print(format_record(record, recfmt))
    return EXIT_OK


def cmd_describe(client: RecordClient, args: argparse.Namespace) -> int:
    """输出记录的完整描述"""
    for name in args.names:
        try:
            desc = client.describe(name)
        except RecordCtlError as e:
            return _fail(f"failed to describe {name}", e)
        print(format_descriptor(desc))
    return EXIT_OK


def cmd_set(client: RecordClient, args: argparse.Namespace) -> int:
    """修改记录值"""
    try:
        result = client.set(args.name, args.value)
    except RecordCtlError as e:
        return _fail(f"failed to set {args.name}", e)
    print(format_mutation(result))
    return EXIT_OK


def cmd_match(client: RecordClient, args: argparse.Namespace) -> int:
    """按正则输出匹配的记录"""
    recfmt = _records_format(args)
    for pattern in args.patterns:
        try:
            for record in client.match(pattern):
                print(format_record(record, recfmt))
        except RecordCtlError as e:
            return _fail(f"failed to fetch {pattern}", e)
    return EXIT_OK


def cmd_reload(client: RecordClient, args: argparse.Namespace) -> int:
    """请求配置重载"""
    try:
        client.reload()
    except RecordCtlError as e:
        return _fail("configuration reload request failed", e)
    return EXIT_OK


def cmd_status(client: RecordClient, args: argparse.Namespace) -> int:
    """输出配置状态"""
    try:
        status = client.status()
    except RecordCtlError as e:
        return _fail(f"failed to fetch {e.target}", e)
    print(format_status(status))
    return EXIT_OK


# 子命令表: (名称, 处理函数, 说明)
COMMANDS: list[tuple[str, Callable[[RecordClient, argparse.Namespace], int], str]] = [
    ("describe", cmd_describe, "Show detailed information about configuration values"),
    ("get", cmd_get, "Get one or more configuration values"),
    ("match", cmd_match, "Get configuration matching a regular expression"),
    ("reload", cmd_reload, "Request a configuration reload"),
    ("set", cmd_set, "Set a configuration value"),
    ("status", cmd_status, "Check the configuration status"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Inspect and modify records of a running service.",
    )
    parser.add_argument("--config", default="", help="配置文件路径（默认：recordctl.yaml）")
    parser.add_argument("--url", default="", help="管理接口地址（覆盖配置）")
    parser.add_argument("--timeout", type=float, default=None, help="请求超时（秒）")
    parser.add_argument("--log-level", default="", help="日志级别（覆盖配置）")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    handlers = {name: (handler, help_text) for name, handler, help_text in COMMANDS}

    def add(name: str) -> argparse.ArgumentParser:
        handler, help_text = handlers[name]
        sub = subparsers.add_parser(name, help=help_text, description=help_text)
        sub.set_defaults(handler=handler)
        return sub

    sub = add("describe")
    sub.add_argument("names", nargs="+", metavar="RECORD")

    sub = add("get")
    sub.add_argument("names", nargs="+", metavar="RECORD")
    sub.add_argument("--records", action="store_true", default=None,
                     help="Emit output in records.config format")

    sub = add("match")
    sub.add_argument("patterns", nargs="+", metavar="REGEX")
    sub.add_argument("--records", action="store_true", default=None,
                     help="Emit output in records.config format")

    add("reload")

    sub = add("set")
    sub.add_argument("name", metavar="RECORD")
    sub.add_argument("value", metavar="VALUE")

    add("status")

    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: list[str] | None = None, service: IRecordService | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = reload_config(args.config) if args.config else get_config()
    _setup_logging(args.log_level or config.logging.log_level)

    if service is None:
        service = HttpRecordService(base_url=args.url or None, timeout=args.timeout)

    return args.handler(RecordClient(service), args)
