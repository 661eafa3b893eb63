"""
API routes for the quote service.
Each route decodes its body, calls one storage operation and encodes the result.
"""

from typing import List, Type
from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError

from database.operations import DatabaseOperations
from utils import api_logger, DatabaseError

from .middleware import envelope_response
from .models import (
    Envelope, CategoryCreateRequest, AuthorCreateRequest, QuoteCreateRequest,
    Category, Author, Quote
)

router = APIRouter()

HEALTHY_MESSAGE = "system is healthy"

ERROR_RESPONSES = {500: {"model": Envelope}, 400: {"model": Envelope}}


def get_db_ops(request: Request) -> DatabaseOperations:
    """依赖注入：获取应用持有的存储网关"""
    return request.app.state.db_ops


def json_body(model: Type[BaseModel]):
    """依赖工厂：无论 Content-Type 为何，请求体一律按JSON解码

    Decode and validation failures are raised as RequestValidationError so they
    reach the 400 envelope handler before any storage call.
    """
    async def decode(request: Request) -> BaseModel:
        raw = await request.body()
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": (), "msg": "request body is not valid UTF-8"}], body=raw
            ) from e
        try:
            return model.model_validate_json(text)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False), body=raw) from e

    return decode


def _storage_failure(operation: str, error: DatabaseError):
    api_logger.error(f"[API] {operation} failed: {error}")
    return envelope_response(500, err=error.message)


# Root
@router.get("/", response_class=PlainTextResponse, tags=["System"])
async def root():
    return "hello, world"


# Health Check
@router.get("/health", response_model=Envelope, response_model_exclude_none=True,
            responses={503: {"model": Envelope}}, tags=["System"])
async def health_check(db_ops: DatabaseOperations = Depends(get_db_ops)):
    """系统健康检查"""
    try:
        await db_ops.ping()
    except DatabaseError as e:
        api_logger.warning(f"[API] Health check failed: {e}")
        return envelope_response(503, err=e.message)
    return Envelope(msg=HEALTHY_MESSAGE)


# Categories
@router.post("/category/new", responses=ERROR_RESPONSES, tags=["Categories"])
async def new_category(body: CategoryCreateRequest = Depends(json_body(CategoryCreateRequest)),
                       db_ops: DatabaseOperations = Depends(get_db_ops)):
    """新建分类"""
    try:
        await db_ops.add_category(body.name)
    except DatabaseError as e:
        return _storage_failure("add category", e)
    return Response(status_code=200)


@router.get("/category", response_model=List[Category], responses=ERROR_RESPONSES, tags=["Categories"])
async def get_categories(db_ops: DatabaseOperations = Depends(get_db_ops)):
    """获取分类列表"""
    try:
        return await db_ops.get_categories()
    except DatabaseError as e:
        return _storage_failure("get categories", e)


# Authors
@router.post("/author/new", responses=ERROR_RESPONSES, tags=["Authors"])
async def new_author(body: AuthorCreateRequest = Depends(json_body(AuthorCreateRequest)),
                     db_ops: DatabaseOperations = Depends(get_db_ops)):
    """新建作者"""
    try:
        await db_ops.add_author(body.name)
    except DatabaseError as e:
        return _storage_failure("add author", e)
    return Response(status_code=200)


@router.get("/author", response_model=List[Author], responses=ERROR_RESPONSES, tags=["Authors"])
async def get_authors(db_ops: DatabaseOperations = Depends(get_db_ops)):
    """获取作者列表"""
    try:
        return await db_ops.get_authors()
    except DatabaseError as e:
        return _storage_failure("get authors", e)


# Quotes
@router.post("/quote/new", responses=ERROR_RESPONSES, tags=["Quotes"])
async def new_quote(body: QuoteCreateRequest = Depends(json_body(QuoteCreateRequest)),
                    db_ops: DatabaseOperations = Depends(get_db_ops)):
    """新建语录"""
    try:
        await db_ops.add_quote(body.to_new_quote())
    except DatabaseError as e:
        return _storage_failure("add quote", e)
    return Response(status_code=200)


@router.get("/quote", response_model=List[Quote], responses=ERROR_RESPONSES, tags=["Quotes"])
async def get_quotes(db_ops: DatabaseOperations = Depends(get_db_ops)):
    """获取语录列表"""
    try:
        return await db_ops.get_quotes()
    except DatabaseError as e:
        return _storage_failure("get quotes", e)
