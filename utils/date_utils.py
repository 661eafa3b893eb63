"""
Date and time utilities for the quote service.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """获取当前UTC时间（带时区）"""
    return datetime.now(timezone.utc)
