"""
database operations for the quote service.
Each operation issues a single parameterized statement in its own session.
"""

from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import insert, select

from utils import db_logger, log_execution, handle_exception, DatabaseError, ErrorCodes
from utils.date_utils import utc_now
from .connection import DatabaseManager
from .models import (
    CategoryDB, AuthorDB, QuoteDB,
    Category, Author, Quote, NewQuote
)

M = TypeVar('M', bound=BaseModel)


class DatabaseOperations:
    """storage gateway for categories, authors and quotes"""

    def __init__(self, db: Optional[DatabaseManager] = None, dsn: Optional[str] = None):
        self.db = db or DatabaseManager(dsn)
        self.db_logger = db_logger

    async def initialize(self):
        """初始化数据库操作：建表并检查连通性"""
        self.db_logger.info("Initializing DatabaseOperations...")
        self.db.initialize()
        await self.db.create_tables()
        await self.db.ping()
        self.db_logger.info("DatabaseOperations initialized successfully")

    async def close(self):
        await self.db.close()

    def get_async_session(self):
        """Get async database session"""
        self.db.initialize()
        return self.db.get_async_session()

    async def ping(self):
        """数据库健康检查"""
        await self.db.ping()

    # === Helpers ===

    async def _insert(self, table, **values) -> int:
        """执行单条 INSERT 并返回生成的主键"""
        async with self.get_async_session() as session:
            result = await session.execute(insert(table.__table__).values(**values))
            await session.commit()
            return result.inserted_primary_key[0]

    async def _select_all(self, table, model: Type[M]) -> List[M]:
        """执行单条 SELECT，按插入顺序返回全部记录

        A row that cannot be converted fails the whole listing.
        """
        async with self.get_async_session() as session:
            result = await session.execute(select(table).order_by(table.id))
            rows = result.scalars().all()

        items = []
        for row in rows:
            try:
                items.append(model.model_validate(row))
            except PydanticValidationError as e:
                raise DatabaseError(
                    f"failed to read {table.__tablename__} row {row.id}: {e}",
                    ErrorCodes.DB_ROW_INVALID
                ) from e
        return items

    # === Category Operations ===

    @log_execution("Database", "add_category")
    @handle_exception
    async def add_category(self, name: str) -> int:
        """添加分类"""
        return await self._insert(CategoryDB, name=name, created_at=utc_now())

    @log_execution("Database", "get_categories")
    @handle_exception
    async def get_categories(self) -> List[Category]:
        """获取全部分类"""
        return await self._select_all(CategoryDB, Category)

    # === Author Operations ===

    @log_execution("Database", "add_author")
    @handle_exception
    async def add_author(self, name: str) -> int:
        """添加作者"""
        return await self._insert(AuthorDB, name=name, created_at=utc_now())

    @log_execution("Database", "get_authors")
    @handle_exception
    async def get_authors(self) -> List[Author]:
        """获取全部作者"""
        return await self._select_all(AuthorDB, Author)

    # === Quote Operations ===

    @log_execution("Database", "add_quote")
    @handle_exception
    async def add_quote(self, quote: NewQuote) -> int:
        """添加语录（不校验分类和作者是否存在）"""
        return await self._insert(
            QuoteDB,
            category_id=quote.category_id,
            author_id=quote.author_id,
            message=quote.message,
            created_at=utc_now()
        )

    @log_execution("Database", "get_quotes")
    @handle_exception
    async def get_quotes(self) -> List[Quote]:
        """获取全部语录"""
        return await self._select_all(QuoteDB, Quote)
