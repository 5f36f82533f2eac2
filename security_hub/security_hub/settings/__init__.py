from security_hub.settings.utils.logging import build_logging # 导入日志处理器模块封装
import logging.config

# === 日志模块初始化配置 ===
# 各环境 settings 通过 LOGGING_CONF 覆盖默认策略后重新生成 LOGGING
LOGGING_CONF: dict = {}
LOGGING = build_logging(LOGGING_CONF)
logging.config.dictConfig(LOGGING) # 确保 settings 加载阶段日志可用
