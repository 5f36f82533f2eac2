from .logger_config import build_logging, get_logger

__all__ = [
    "build_logging", # 日志配置构建函数
    "get_logger", # 获取日志记录器函数
]