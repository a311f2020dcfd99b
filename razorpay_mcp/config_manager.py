"""
Configuration management system for the Razorpay MCP Server.

This module provides flexible configuration management with support for:
- Environment variables
- Configuration files (YAML/JSON)
- Configuration validation
- Hot-reloading
"""

import os
import json
import yaml
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union, List
from dataclasses import dataclass, field
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
import httpx
from pydantic import BaseModel, ValidationError, Field

logger = logging.getLogger(__name__)


@dataclass
class TimeoutConfig:
    """HTTP timeout configuration."""
    total: float = 30.0
    connect: float = 10.0


@dataclass
class ServerConfig:
    """Server configuration."""
    name: str = "razorpay-mcp-server"
    version: str = "1.0.0"
    address: str = "localhost"
    port: int = 8080
    user_agent: str = field(init=False)

    def __post_init__(self):
        self.user_agent = f"razorpay-mcp/{self.version}"


@dataclass
class RazorpayConfig:
    """Razorpay API credentials and endpoint."""
    key_id: str = ""
    key_secret: str = ""
    base_url: str = "https://api.razorpay.com"


@dataclass
class ToolsetConfig:
    """Which toolsets to expose and whether write tools are allowed."""
    enabled: List[str] = field(default_factory=list)
    read_only: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_path: Optional[str] = None


@dataclass
class DocsConfig:
    """Documentation search and fetch endpoints."""
    search_url: str = "https://search.razorpay.com/docs"
    base_url: str = "https://razorpay.com/docs"


class ConfigurationModel(BaseModel):
    """Pydantic model for configuration validation."""
    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    razorpay: RazorpayConfig = Field(default_factory=RazorpayConfig)
    toolsets: ToolsetConfig = Field(default_factory=ToolsetConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    docs: DocsConfig = Field(default_factory=DocsConfig)

    model_config = {"arbitrary_types_allowed": True}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ['true', '1', 'yes', 'on']


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


class ConfigFileHandler(FileSystemEventHandler):
    """File system event handler for configuration hot-reloading."""

    def __init__(self, config_manager: 'ConfigManager'):
        self.config_manager = config_manager
        super().__init__()

    def on_modified(self, event):
        if not event.is_directory and event.src_path == str(self.config_manager.config_file_path):
            logger.info(f"Configuration file {event.src_path} modified, reloading...")
            self.config_manager.reload_configuration()


class ConfigManager:
    """
    Flexible configuration manager supporting environment variables,
    configuration files, validation, and hot-reloading.
    """

    # Environment variable -> (section, key, converter)
    ENV_MAPPINGS = {
        'RAZORPAY_KEY_ID': ('razorpay', 'key_id', str),
        'RAZORPAY_KEY_SECRET': ('razorpay', 'key_secret', str),
        'RAZORPAY_MCP_BASE_URL': ('razorpay', 'base_url', str),

        'RAZORPAY_MCP_TIMEOUT_TOTAL': ('timeout', 'total', float),
        'RAZORPAY_MCP_TIMEOUT_CONNECT': ('timeout', 'connect', float),

        'RAZORPAY_MCP_SERVER_VERSION': ('server', 'version', str),
        'RAZORPAY_MCP_ADDRESS': ('server', 'address', str),
        'RAZORPAY_MCP_PORT': ('server', 'port', int),

        'RAZORPAY_MCP_TOOLSETS': ('toolsets', 'enabled', _parse_list),
        'RAZORPAY_MCP_READ_ONLY': ('toolsets', 'read_only', _parse_bool),

        'RAZORPAY_MCP_LOG_LEVEL': ('logging', 'level', lambda x: x.upper()),
        'RAZORPAY_MCP_LOG_FILE': ('logging', 'file_path', str),
    }

    def __init__(self, config_file: Optional[Union[str, Path]] = None, enable_hot_reload: bool = True):
        """
        Initialize the configuration manager.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            enable_hot_reload: Whether to enable hot-reloading of configuration files
        """
        self.config_file_path = Path(config_file) if config_file else None
        self.enable_hot_reload = enable_hot_reload
        self._config_lock = threading.RLock()
        self._observer = None
        self._config: Optional[ConfigurationModel] = None

        self.load_configuration()

        if self.enable_hot_reload and self.config_file_path and self.config_file_path.exists():
            self._setup_hot_reload()

    def _setup_hot_reload(self):
        """Set up file system monitoring for hot-reloading."""
        if self._observer:
            self._observer.stop()
            self._observer.join()

        self._observer = Observer()
        event_handler = ConfigFileHandler(self)
        self._observer.schedule(event_handler, str(self.config_file_path.parent), recursive=False)
        self._observer.start()

    def load_configuration(self):
        """Load configuration from config file, then environment variables."""
        with self._config_lock:
            config_dict = {}

            if self.config_file_path and self.config_file_path.exists():
                config_dict = self._load_config_file()

            config_dict = self._load_environment_variables(config_dict)

            try:
                self._config = ConfigurationModel(**config_dict)
            except ValidationError as e:
                raise ValueError(f"Configuration validation failed: {e}")

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        try:
            with open(self.config_file_path, 'r') as f:
                if self.config_file_path.suffix.lower() in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif self.config_file_path.suffix.lower() == '.json':
                    return json.load(f)
                else:
                    raise ValueError(f"Unsupported configuration file format: {self.config_file_path.suffix}")
        except Exception as e:
            raise ValueError(f"Failed to load configuration file {self.config_file_path}: {e}")

    def _load_environment_variables(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay environment variables on top of the file configuration."""
        for env_var, (section, key, type_converter) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                try:
                    if section not in config_dict:
                        config_dict[section] = {}
                    config_dict[section][key] = type_converter(env_value)
                except (ValueError, TypeError) as e:
                    raise ValueError(f"Invalid value for environment variable {env_var}: {env_value} ({e})")

        return config_dict

    def reload_configuration(self):
        """Reload configuration from file and environment variables."""
        try:
            self.load_configuration()
            logger.info("Configuration reloaded successfully")
        except Exception as e:
            logger.error(f"Failed to reload configuration: {e}")

    @property
    def config(self) -> ConfigurationModel:
        """Get the current configuration."""
        with self._config_lock:
            if self._config is None:
                raise RuntimeError("Configuration not loaded")
            return self._config

    def get_http_timeout(self) -> httpx.Timeout:
        """Get HTTP timeout configuration."""
        timeout_config = self.config.timeout
        return httpx.Timeout(timeout_config.total, connect=timeout_config.connect)

    def stop(self):
        """Stop the configuration manager and clean up resources."""
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        config_paths = [
            Path("config.yml"),
            Path("config.yaml"),
            Path("config.json"),
            Path.home() / ".razorpay-mcp-server.yaml",
        ]

        config_file = None
        for path in config_paths:
            if path.exists():
                config_file = path
                break

        _config_manager = ConfigManager(config_file)

    return _config_manager


def set_config_manager(config_manager: Optional[ConfigManager]):
    """Set the global configuration manager instance."""
    global _config_manager
    if _config_manager:
        _config_manager.stop()
    _config_manager = config_manager
