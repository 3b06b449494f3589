"""
recordctl - 运行中服务的配置记录访问层

模块结构：
- config/     运行期配置（服务地址/超时/日志）
- models/     记录数据模型（TypedValue/RecordHandle/RecordDescriptor）
- service/    记录服务适配器（HTTP / 内存模拟）
- ctl/        客户端操作、输出渲染与子命令分发
"""

__version__ = "0.1.0"
