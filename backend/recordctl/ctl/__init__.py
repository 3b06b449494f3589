"""
客户端模块 - 记录操作、输出渲染与子命令分发

子模块：
- client: RecordClient（get/match/describe/set/reload/status）
- renderer: 文本渲染
- commands: argparse 子命令入口
"""

from .client import STATUS_RECORDS, RecordClient
from .commands import EXIT_ERROR, EXIT_OK, main
from .renderer import format_descriptor, format_mutation, format_record, format_status

__all__ = [
    "RecordClient",
    "STATUS_RECORDS",
    "main",
    "EXIT_OK",
    "EXIT_ERROR",
    "format_record",
    "format_descriptor",
    "format_mutation",
    "format_status",
]
