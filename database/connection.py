"""
Database connection management.
Builds the async SQLAlchemy engine from a DSN and hands out sessions.
"""

import os
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from utils import db_logger, config_manager, DatabaseError, ErrorCodes
from utils.config_manager import normalize_dsn


def _is_memory_sqlite(url) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, dsn: Optional[str] = None, echo: Optional[bool] = None):
        db_config = config_manager.get_database_config()
        self.dsn = normalize_dsn(dsn or db_config.dsn)
        self.echo = db_config.echo if echo is None else echo
        self.url = make_url(self.dsn)
        self.async_engine: Optional[AsyncEngine] = None
        self.AsyncSessionLocal: Optional[async_sessionmaker] = None
        db_logger.info(f"[Database] Using database: {self.url.render_as_string(hide_password=True)}")

    def initialize(self):
        """初始化数据库连接（仅创建引擎，不建立连接）"""
        if self.async_engine is not None:
            return

        engine_kwargs = {"echo": self.echo}

        try:
            if self.url.get_backend_name() == "sqlite":
                if _is_memory_sqlite(self.url):
                    # 内存数据库需要共享同一个连接
                    engine_kwargs["poolclass"] = StaticPool
                else:
                    # 确保数据目录存在
                    directory = os.path.dirname(self.url.database)
                    if directory:
                        os.makedirs(directory, exist_ok=True)
                engine_kwargs["connect_args"] = {"check_same_thread": False}

            self.async_engine = create_async_engine(self.dsn, **engine_kwargs)
        except Exception as e:
            db_logger.error(f"[Database] Failed to create engine: {e}")
            raise DatabaseError(
                f"failed to create database engine: {e}",
                ErrorCodes.DB_CONNECTION_FAILED
            ) from e

        self.AsyncSessionLocal = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False
        )
        db_logger.info("[Database] Database engine initialized successfully")

    async def create_tables(self):
        """创建数据库表"""
        from .models import Base

        self.initialize()
        try:
            async with self.async_engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            db_logger.error(f"[Database] Failed to create tables: {e}")
            raise DatabaseError(
                f"failed to create tables: {e}",
                ErrorCodes.DB_CONNECTION_FAILED
            ) from e
        db_logger.info("[Database] Database tables created successfully")

    async def ping(self):
        """检查数据库连通性"""
        self.initialize()
        try:
            async with self.async_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            raise DatabaseError(
                f"database ping failed: {e}",
                ErrorCodes.DB_CONNECTION_FAILED
            ) from e

    def get_async_session(self) -> AsyncSession:
        """获取异步数据库会话"""
        if not self.AsyncSessionLocal:
            raise RuntimeError("Database not initialized")
        return self.AsyncSessionLocal()

    async def close(self):
        """关闭数据库连接"""
        if self.async_engine is not None:
            await self.async_engine.dispose()
            self.async_engine = None
            self.AsyncSessionLocal = None
            db_logger.info("[Database] Database connections closed")
