"""日志模块

提供日志配置与敏感数据过滤。

使用示例:
    from yoauth.log import setup_logger, get_logger, log_filter_hook_manager

    setup_logger("yoauth", level="DEBUG", log_file="logs/token.log")

    logger = get_logger()
    logger.info("params: %s", log_filter_hook_manager.apply_filters(params))
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    logger,
    get_logger,
)

from .filter_hooks import (
    LogFilterHook,
    SensitiveDataFilterHook,
    LogFilterHookManager,
    log_filter_hook_manager,
    DEFAULT_SENSITIVE_PATTERNS,
    FILTERED_PLACEHOLDER,
)

__all__ = [
    # 日志工具
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "logger",
    "get_logger",

    # 日志过滤钩子
    "LogFilterHook",
    "SensitiveDataFilterHook",
    "LogFilterHookManager",
    "log_filter_hook_manager",
    "DEFAULT_SENSITIVE_PATTERNS",
    "FILTERED_PLACEHOLDER",
]
