"""
工具模块包
提供项目所需的通用工具和功能
"""

# 导出核心工具
from .config_manager import (
    config_manager,
    UnifiedConfigManager,
    DatabaseConfig,
    ApiConfig,
    LoggingConfig,
    LoggingModuleConfig,
)
from .exceptions import (
    QuoteServiceError,
    ConfigurationError,
    DatabaseError,
    ErrorCodes,
    create_error_response,
    handle_exception
)
from .logging_manager import (
    LogContext,
    log_execution,
    logging_manager,
    LogConfig,
    initialize_logging,
    ModuleLoggers,
    db_logger,
    api_logger,
    config_logger,
    main_logger,
)
from .date_utils import utc_now
from .path_utils import BASE_DIR, CONFIG_DIR, LOG_DIR, DATA_DIR

# 版本信息
__version__ = "1.0.0"

__all__ = [
    # 配置管理
    "config_manager",
    "UnifiedConfigManager",
    "DatabaseConfig",
    "ApiConfig",
    "LoggingConfig",
    "LoggingModuleConfig",

    # 异常处理
    "QuoteServiceError",
    "ConfigurationError",
    "DatabaseError",
    "ErrorCodes",
    "create_error_response",
    "handle_exception",

    # 日志工具
    "LogContext",
    "log_execution",
    "logging_manager",
    "LogConfig",
    "initialize_logging",
    "ModuleLoggers",
    "db_logger",
    "api_logger",
    "config_logger",
    "main_logger",

    # 时间工具
    "utc_now",

    # 路径工具
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DIR",
    "DATA_DIR",
]
