"""
Structured logging configuration for the Razorpay MCP Server.

This module provides centralized logging configuration with structured JSON
output. Console logs go to stderr because stdout carries the MCP stdio
protocol.
"""

import json
import logging
import logging.config
import sys
from datetime import datetime, UTC
from pathlib import Path
from typing import IO, Any, Dict, Optional

REQUEST_FIELDS = (
    "method", "path", "status_code", "response_time_ms",
    "user_agent", "client_ip", "error",
)

_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs."""

    def __init__(self, service_name: str = "razorpay-mcp-server", version: str = "1.0.0"):
        super().__init__()
        self.service_name = service_name
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.version,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Fields passed through ``extra=`` or ``log_with_context``
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_entry["stack_info"] = record.stack_info

        return json.dumps(log_entry, default=str)


class RequestFormatter(logging.Formatter):
    """Specialized formatter for HTTP request/response logging."""

    def __init__(self, service_name: str = "razorpay-mcp-server"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "type": "http_request",
            "message": record.getMessage(),
        }
        for field in REQUEST_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)
        return json.dumps(log_entry, default=str)


def setup_logging(
    log_level: str = "INFO",
    service_name: str = "razorpay-mcp-server",
    version: str = "1.0.0",
    log_file_path: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Setup structured logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        service_name: Name of the service for log entries
        version: Version of the service
        log_file_path: Also write logs to this file (rotated) when given
        stream: Console stream, stderr by default
    """
    log_level = log_level.upper()
    stream = stream or sys.stderr

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": StructuredFormatter,
                "service_name": service_name,
                "version": version,
            },
            "request": {
                "()": RequestFormatter,
                "service_name": service_name,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "structured",
                "stream": stream,
            },
            "requests": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": "request",
                "stream": stream,
            },
        },
        "loggers": {
            "razorpay_mcp": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "razorpay_mcp.requests": {
                "level": "INFO",
                "handlers": ["requests"],
                "propagate": False,
            },
            "httpx": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
    }

    if log_file_path:
        Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "structured",
            "filename": log_file_path,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "encoding": "utf8",
        }
        config["loggers"]["razorpay_mcp"]["handlers"].append("file")
        config["loggers"]["razorpay_mcp.requests"]["handlers"].append("file")
        config["root"]["handlers"].append("file")

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **context: Additional context fields to include in log
    """
    level_no = getattr(logging, level.upper())
    if not logger.isEnabledFor(level_no):
        return
    record = logger.makeRecord(logger.name, level_no, "", 0, message, (), None)
    for key, value in context.items():
        setattr(record, key, value)
    logger.handle(record)
