"""
Main entry point for the Quote Service.
Provides command-line interface and system initialization.
"""

import asyncio
import argparse
import sys
from typing import Optional, List

import uvicorn

from utils import main_logger, config_manager, initialize_logging, DatabaseError
from database.operations import DatabaseOperations


class QuoteService:
    """语录服务主类"""

    def __init__(self, dsn: Optional[str] = None):
        self.config = config_manager
        self.db_ops = DatabaseOperations(dsn=dsn)

    async def init_db(self):
        """建表并检查连通性"""
        try:
            await self.db_ops.initialize()
        finally:
            await self.db_ops.close()

    async def check(self):
        """检查数据库连通性"""
        try:
            await self.db_ops.ping()
        finally:
            await self.db_ops.close()

    def serve(self, host: Optional[str] = None, port: Optional[int] = None):
        """启动API服务"""
        from api.app import create_app

        api_config = self.config.get_api_config()
        host = host or api_config.host
        port = port or api_config.port

        main_logger.info(f"[Main] Starting server on {host}:{port}")
        uvicorn.run(create_app(self.db_ops), host=host, port=port, log_level="info")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quote Service")
    parser.add_argument("--dsn", help="数据库连接串，默认读取配置或环境变量 DSN")

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="启动HTTP服务")
    serve_parser.add_argument("--host", help="监听地址")
    serve_parser.add_argument("--port", type=int, help="监听端口")

    subparsers.add_parser("init-db", help="创建数据库表")
    subparsers.add_parser("check", help="检查数据库连通性")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    initialize_logging()

    service = QuoteService(dsn=args.dsn)
    command = args.command or "serve"

    try:
        if command == "init-db":
            asyncio.run(service.init_db())
            main_logger.info("[Main] Database tables created")
        elif command == "check":
            asyncio.run(service.check())
            main_logger.info("[Main] Database is reachable")
        else:
            service.serve(host=getattr(args, "host", None), port=getattr(args, "port", None))
    except DatabaseError as e:
        main_logger.error(f"[Main] Failed to connect to database: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
