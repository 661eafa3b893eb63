"""
API data models for the quote service.
Pydantic models for request bodies and the JSON envelope.
"""

from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator

from database.models import NAME_MAX_LENGTH, Category, Author, Quote, NewQuote


class Envelope(BaseModel):
    """统一的JSON信封：失败时携带 err，成功时携带 msg"""
    err: Optional[str] = Field(None, description="错误描述")
    msg: Optional[str] = Field(None, description="提示信息")


class CategoryCreateRequest(BaseModel):
    """新建分类请求"""
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="分类名称")

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class AuthorCreateRequest(BaseModel):
    """新建作者请求"""
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="作者姓名")

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class EntityRef(BaseModel):
    """按ID引用分类或作者"""
    id: int = Field(..., description="引用的ID")


class QuoteCreateRequest(BaseModel):
    """新建语录请求

    category/author accept either a bare id or an object such as {"id": 1}.
    """
    category: EntityRef = Field(..., description="分类引用")
    author: EntityRef = Field(..., description="作者引用")
    message: str = Field(..., min_length=1, description="语录内容")

    @field_validator('category', 'author', mode='before')
    @classmethod
    def coerce_ref(cls, v: Union[int, dict, EntityRef]):
        if isinstance(v, int) and not isinstance(v, bool):
            return {"id": v}
        return v

    def to_new_quote(self) -> NewQuote:
        return NewQuote(
            category_id=self.category.id,
            author_id=self.author.id,
            message=self.message
        )


__all__ = [
    'Envelope', 'CategoryCreateRequest', 'AuthorCreateRequest', 'EntityRef',
    'QuoteCreateRequest', 'Category', 'Author', 'Quote',
]
