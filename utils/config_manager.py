"""
统一的配置管理模块
整合底层配置操作和应用层类型安全访问
"""

import json
import logging
import os
from typing import Any, Optional, Dict, List
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError, ErrorCodes
from .path_utils import CONFIG_DIR, DATA_DIR

# 获取配置专用日志器
config_logger = logging.getLogger("Config")

# 默认使用项目数据目录下的SQLite文件
DEFAULT_DSN = f"sqlite+aiosqlite:///{(DATA_DIR / 'quotes.db').as_posix()}"

# 环境变量 -> 配置路径
ENV_OVERRIDES = {
    "DSN": "database_config.dsn",
    "HOST": "api_config.host",
    "PORT": "api_config.port",
    "LOG_LEVEL": "logging_config.level",
}

# ============================================================================
# 配置数据类型定义
# ============================================================================

@dataclass
class LoggingModuleConfig:
    """模块日志配置"""
    level: str = "INFO"
    enabled: bool = True

@dataclass
class FileLoggingConfig:
    """文件日志配置"""
    enabled: bool = True
    directory: str = "log"
    filename: str = "sys.log"
    rotation: Optional[Dict[str, Any]] = None

@dataclass
class ConsoleLoggingConfig:
    """控制台日志配置"""
    enabled: bool = True

@dataclass
class LoggingConfig:
    """完整日志配置"""
    level: str = "INFO"
    format: str = "[%(levelname)s][%(asctime)s][%(filename)s:%(lineno)d] - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_config: FileLoggingConfig = field(default_factory=FileLoggingConfig)
    console_config: ConsoleLoggingConfig = field(default_factory=ConsoleLoggingConfig)
    modules: Dict[str, LoggingModuleConfig] = field(default_factory=dict)

@dataclass
class DatabaseConfig:
    """数据库配置"""
    dsn: str = DEFAULT_DSN
    echo: bool = False

@dataclass
class ApiConfig:
    """API配置"""
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def normalize_dsn(dsn: str) -> str:
    """将 postgres:// 形式的DSN改写为SQLAlchemy异步方言"""
    if dsn.startswith("postgres://"):
        return "postgresql+asyncpg://" + dsn[len("postgres://"):]
    if dsn.startswith("postgresql://"):
        return "postgresql+asyncpg://" + dsn[len("postgresql://"):]
    return dsn


# ============================================================================
# 统一配置管理器
# ============================================================================

class UnifiedConfigManager:
    """统一配置管理器 - JSON配置文件 + .env + 环境变量"""

    def __init__(self, config_dir: Optional[str] = None, env_file: Optional[str] = ".env",
                 environ: Optional[Dict[str, str]] = None):
        self._config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._env_file = env_file
        self._environ = environ
        self._config_data: Dict[str, Any] = {}

        # 类型化配置缓存
        self._typed_cache: Dict[str, Any] = {}

        # 初始化配置
        self._load_config()

    def _load_config(self) -> None:
        """加载配置文件并应用环境变量覆盖"""
        merged_config: Dict[str, Any] = {}
        config_logger.info(f"Loading configuration from directory: {self._config_dir}")

        if self._config_dir.is_dir():
            # 按文件名排序加载，确保加载顺序一致
            for config_file in sorted(self._config_dir.glob('*.json')):
                try:
                    with open(config_file, 'r', encoding='utf-8') as f:
                        data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(
                        f"Invalid JSON in configuration file {config_file.name}: {e}",
                        ErrorCodes.CONFIG_INVALID_FORMAT
                    ) from e
                merged_config.update(data)
                config_logger.debug(f"Loaded and merged: {config_file.name}")
        else:
            config_logger.warning(f"Configuration directory not found, using defaults: {self._config_dir}")

        self._config_data = merged_config
        self._apply_env_overrides()
        self._typed_cache.clear()

    def _apply_env_overrides(self) -> None:
        """应用 .env 文件和环境变量"""
        if self._environ is None:
            if self._env_file:
                # 不覆盖已存在的环境变量
                load_dotenv(self._env_file, override=False)
            environ = os.environ
        else:
            environ = self._environ

        for env_key, path in ENV_OVERRIDES.items():
            value = environ.get(env_key)
            if value:
                self.set_nested(path, value)
                config_logger.debug(f"Config override from environment: {env_key}")

    # ========================================================================
    # 底层访问方法
    # ========================================================================

    def get_nested(self, path: str, default: Any = None) -> Any:
        """获取嵌套配置值，支持点分隔路径"""
        keys = path.split('.')
        current = self._config_data

        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set_nested(self, path: str, value: Any) -> None:
        """设置嵌套配置值"""
        keys = path.split('.')
        current = self._config_data

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value
        self._typed_cache.clear()

    # ========================================================================
    # 类型安全访问方法
    # ========================================================================

    def get_logging_config(self) -> LoggingConfig:
        """获取日志配置（类型安全）"""
        if 'logging_config' not in self._typed_cache:
            logging_data = self.get_nested('logging_config', {})

            file_data = logging_data.get('file_config', {})
            file_config = FileLoggingConfig(
                enabled=file_data.get('enabled', True),
                directory=file_data.get('directory', 'log'),
                filename=file_data.get('filename', 'sys.log'),
                rotation=file_data.get('rotation')
            )

            console_data = logging_data.get('console_config', {})
            console_config = ConsoleLoggingConfig(
                enabled=console_data.get('enabled', True)
            )

            modules = {}
            for module_name, module_data in logging_data.get('modules', {}).items():
                modules[module_name] = LoggingModuleConfig(
                    level=module_data.get('level', 'INFO'),
                    enabled=module_data.get('enabled', True)
                )

            self._typed_cache['logging_config'] = LoggingConfig(
                level=logging_data.get('level', 'INFO'),
                file_config=file_config,
                console_config=console_config,
                modules=modules
            )

        return self._typed_cache['logging_config']

    def get_database_config(self) -> DatabaseConfig:
        """获取数据库配置（类型安全）"""
        if 'database_config' not in self._typed_cache:
            db_data = self.get_nested('database_config', {})
            self._typed_cache['database_config'] = DatabaseConfig(
                dsn=normalize_dsn(db_data.get('dsn') or DEFAULT_DSN),
                echo=bool(db_data.get('echo', False))
            )

        return self._typed_cache['database_config']

    def get_api_config(self) -> ApiConfig:
        """获取API配置（类型安全）"""
        if 'api_config' not in self._typed_cache:
            api_data = self.get_nested('api_config', {})
            try:
                port = int(api_data.get('port', 8080))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid api_config.port: {api_data.get('port')!r}",
                    ErrorCodes.CONFIG_INVALID_FORMAT
                ) from e
            self._typed_cache['api_config'] = ApiConfig(
                host=api_data.get('host', '0.0.0.0'),
                port=port,
                cors_origins=api_data.get('cors_origins', ['*'])
            )

        return self._typed_cache['api_config']


# ============================================================================
# 全局单例实例
# ============================================================================

config_manager = UnifiedConfigManager()
