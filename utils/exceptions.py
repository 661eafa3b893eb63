"""
统一异常定义模块
提供项目特定的异常类和错误处理机制
"""

from typing import Optional, Dict, Any


class QuoteServiceError(Exception):
    """语录服务基础异常类"""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(QuoteServiceError):
    """配置相关错误"""
    pass


class DatabaseError(QuoteServiceError):
    """数据库相关错误"""
    pass


# 错误代码常量
class ErrorCodes:
    """错误代码常量"""

    # 配置错误
    CONFIG_INVALID_FORMAT = "CONFIG_002"

    # 数据库错误
    DB_CONNECTION_FAILED = "DB_001"
    DB_QUERY_FAILED = "DB_002"
    DB_ROW_INVALID = "DB_003"


def create_error_response(error: Exception) -> Dict[str, Any]:
    """创建错误信封 {"err": ...}

    Envelopes only carry the human-readable message; error codes stay in logs.
    """
    if isinstance(error, QuoteServiceError):
        return {"err": error.message}
    return {"err": str(error)}


def handle_exception(func):
    """统一异常处理装饰器（异步）"""
    import functools

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except QuoteServiceError:
            # 已经是系统异常，直接重新抛出
            raise
        except Exception as e:
            # 转换为数据库异常
            raise DatabaseError(
                f"{func.__name__} failed: {e}",
                error_code=ErrorCodes.DB_QUERY_FAILED
            ) from e

    return wrapper
