"""
Logging Configuration and Utilities

Standard-library logging configured once at application start, with
JSON (python-json-logger) or coloured (colorlog) console output, and a
structlog pipeline for request access events.
"""

import logging
import logging.handlers
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

import colorlog
import structlog
from pythonjsonlogger import jsonlogger

from innkeeper.config.settings import Settings, get_settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
tenant_id: ContextVar[Optional[str]] = ContextVar('tenant_id', default=None)

_SENSITIVE_KEYS = ('password', 'token', 'secret', 'authorization', 'card_number', 'cvv')


class RequestContextProcessor:
    """Add request context to structlog events"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        tid = tenant_id.get()
        if tid:
            event_dict['tenant_id'] = tid

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'innkeeper'
        return event_dict


class RedactionProcessor:
    """Mask sensitive values before they reach a renderer"""

    def __call__(self, logger, method_name, event_dict):
        self._sanitize(event_dict)
        return event_dict

    def _sanitize(self, event_dict: Dict[str, Any]) -> None:
        for key in list(event_dict.keys()):
            if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
                event_dict[key] = '[REDACTED]'
            elif isinstance(event_dict[key], dict):
                self._sanitize(event_dict[key])


class ContextFilter(logging.Filter):
    """Attach request and tenant ids to every stdlib record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id.get()
        record.tenant_id = tenant_id.get()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter for production log shipping"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['line'] = record.lineno
        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging(settings: Settings) -> None:
        """Configure structlog to render through the stdlib handlers"""
        processors = [
            RequestContextProcessor(),
            RedactionProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging(settings: Settings) -> None:
        """Configure standard Python logging"""
        level = getattr(logging, settings.LOG_LEVEL)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        if settings.LOG_FORMAT == "json":
            formatter: logging.Formatter = CustomJsonFormatter(
                '%(asctime)s %(name)s %(levelname)s %(message)s %(request_id)s %(tenant_id)s'
            )
        elif settings.is_development():
            formatter = colorlog.ColoredFormatter(
                '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                },
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(ContextFilter())
        root_logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_path = Path(settings.LOG_FILE)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf8',
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(ContextFilter())
            root_logger.addHandler(file_handler)

        LoggingConfig._configure_library_loggers(settings)

    @staticmethod
    def _configure_library_loggers(settings: Settings) -> None:
        """Reduce noise from external libraries"""
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

        if settings.LOG_SQL_QUERIES:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        else:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class LoggerAdapter:
    """Thin wrapper over a stdlib logger; `extra` reaches the handlers as record attributes"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, message: str, *args, **kwargs):
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        self._log(logging.CRITICAL, message, *args, **kwargs)


def get_access_logger():
    """structlog logger for per-request access events"""
    return structlog.get_logger("innkeeper.access")


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to the innkeeper root logger)

    Returns:
        Enhanced logger adapter
    """
    return LoggerAdapter(logging.getLogger(name or "innkeeper"))


def log_execution_time(logger_name: Optional[str] = None):
    """
    Decorator to log function execution time.

    Args:
        logger_name: Custom logger name
    """
    def decorator(func):
        logger = get_logger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error("Function execution failed", extra={
                    'function': func.__name__,
                    'execution_time': round(time.perf_counter() - start, 4),
                    'error_type': type(e).__name__,
                })
                raise

            logger.debug("Function executed successfully", extra={
                'function': func.__name__,
                'execution_time': round(time.perf_counter() - start, 4),
            })
            return result

        return wrapper

    return decorator


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Initialize logging configuration"""
    settings = settings or get_settings()

    LoggingConfig.configure_structured_logging(settings)
    LoggingConfig.configure_standard_logging(settings)

    get_logger(__name__).info("Logging system initialized", extra={
        'log_level': settings.LOG_LEVEL,
        'log_format': settings.LOG_FORMAT,
    })


__all__ = [
    'get_logger',
    'get_access_logger',
    'RequestContextProcessor',
    'RedactionProcessor',
    'setup_logging',
    'log_execution_time',
    'LoggerAdapter',
    'LoggingConfig',
    'request_id',
    'tenant_id',
]
