"""
Middleware for the quote service API.
Provides CORS, request logging, error envelopes and exception handlers.
"""

import time
from typing import Callable
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from utils import api_logger, config_manager, QuoteServiceError, create_error_response

from .models import Envelope


def envelope_response(status_code: int, err: str = None, msg: str = None,
                      headers: dict = None) -> JSONResponse:
    """构造信封响应，省略空字段"""
    return JSONResponse(
        status_code=status_code,
        content=Envelope(err=err, msg=msg).model_dump(exclude_none=True),
        headers=headers
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    """将请求校验错误压缩为一行可读文本"""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{loc}: {message}" if loc else message)
    return "; ".join(parts) or "invalid request body"


class LoggingMiddleware(BaseHTTPMiddleware):
    """日志中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        api_logger.info(f"[API] {request.method} {request.url}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            api_logger.error(f"[API] {request.method} {request.url} - ERROR - {process_time:.3f}s - {str(e)}")
            raise

        process_time = time.time() - start_time
        api_logger.info(f"[API] {request.method} {request.url} - {response.status_code} - {process_time:.3f}s")

        # 添加处理时间到响应头
        response.headers["X-Process-Time"] = str(process_time)

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """错误处理中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except QuoteServiceError as e:
            api_logger.error(f"[API] Service error: {e}")
            return JSONResponse(status_code=500, content=create_error_response(e))

        except Exception as e:
            api_logger.error(f"[API] Unexpected error: {str(e)}", exc_info=True)
            return envelope_response(500, err="internal server error")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体解码/校验失败：直接返回400，不再继续处理"""
    message = _describe_validation_error(exc)
    api_logger.warning(f"[API] Invalid request body for {request.method} {request.url.path}: {message}")
    return envelope_response(400, err=message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """路由层HTTP错误（404、405、请求体读取失败等）同样使用信封"""
    api_logger.warning(f"[API] {request.method} {request.url.path} - {exc.status_code} - {exc.detail}")
    return envelope_response(exc.status_code, err=str(exc.detail), headers=getattr(exc, "headers", None))


def setup_cors(app: FastAPI):
    """设置CORS"""
    cors_origins = config_manager.get_api_config().cors_origins

    if "*" in cors_origins:
        api_logger.warning("[CORS] Using wildcard origin is not recommended for production")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


def setup_middleware(app: FastAPI):
    """设置所有中间件"""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    setup_cors(app)

    # 添加中间件（后添加的在外层）
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)

    api_logger.info("[API] Middleware setup completed")
