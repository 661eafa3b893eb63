"""
database models for the quote service.
Categories, authors and the quotes that reference them.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base

from utils.date_utils import utc_now

Base = declarative_base()

NAME_MAX_LENGTH = 255


class CategoryDB(Base):
    """database model for quote categories"""
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class AuthorDB(Base):
    """database model for quote authors"""
    __tablename__ = 'authors'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class QuoteDB(Base):
    """database model for quotes

    category_id/author_id are plain integers: the referenced rows are not
    checked, so a quote may point at a category or author that does not exist.
    """
    __tablename__ = 'messages'

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, nullable=False, index=True)
    author_id = Column(Integer, nullable=False, index=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


# Pydantic models for data transfer

class Category(BaseModel):
    """category API model"""
    id: int = Field(..., description="分类ID")
    name: str = Field(..., description="分类名称")
    created_at: datetime = Field(..., description="创建时间")

    model_config = ConfigDict(from_attributes=True)


class Author(BaseModel):
    """author API model"""
    id: int = Field(..., description="作者ID")
    name: str = Field(..., description="作者姓名")
    created_at: datetime = Field(..., description="创建时间")

    model_config = ConfigDict(from_attributes=True)


class Quote(BaseModel):
    """quote API model"""
    id: int = Field(..., description="语录ID")
    category_id: int = Field(..., description="分类ID")
    author_id: int = Field(..., description="作者ID")
    message: str = Field(..., description="语录内容")
    created_at: datetime = Field(..., description="创建时间")

    model_config = ConfigDict(from_attributes=True)


class NewQuote(BaseModel):
    """quote insert model used by the storage gateway"""
    category_id: int
    author_id: int
    message: str
