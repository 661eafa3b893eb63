"""
FastAPI application for the quote service.
Main application entry point for the API server.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from database.operations import DatabaseOperations
from utils import api_logger, config_manager

from .routes import router
from .middleware import setup_middleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    api_logger.info("[API] Starting Quote Service API...")

    if app.state.db_ops is None:
        app.state.db_ops = DatabaseOperations()

    # 数据库不可用时启动失败
    await app.state.db_ops.initialize()

    yield

    api_logger.info("[API] Shutting down Quote Service API...")
    await app.state.db_ops.close()


def create_app(db_ops: Optional[DatabaseOperations] = None) -> FastAPI:
    """创建FastAPI应用，存储网关通过参数注入"""
    app = FastAPI(
        title="Quote Service API",
        description="Stores and retrieves quotes grouped by category and attributed to authors",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.db_ops = db_ops

    setup_middleware(app)
    app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    api_config = config_manager.get_api_config()
    api_logger.info(f"[API] Starting server on {api_config.host}:{api_config.port}")
    uvicorn.run(app, host=api_config.host, port=api_config.port, log_level="info")
