"""
记录服务模块 - IRecordService 的实现

子模块：
- http_service: 管理接口 JSON/HTTP 客户端
- memory_service: 进程内模拟服务（测试/离线）
"""

from .http_service import HttpRecordService
from .memory_service import InMemoryRecordService

__all__ = [
    "HttpRecordService",
    "InMemoryRecordService",
]
