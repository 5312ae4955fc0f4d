# ============================================================================
# MODULE CONTEXT - LOGGING
# ============================================================================
# STATUS: Shared - used by every layer of the SDK
# PURPOSE: JSON structured logging for SDK services, transport and channels
# EXPORTS: ComponentType, LogLevel, LogContext, JSONFormatter, LoggerFactory, log_exceptions
# DEPENDENCIES: enum, dataclasses, typing, datetime, logging, json (stdlib only)
# PATTERNS: JSON-only output, component-specific loggers, exception decorator
# ENTRY_POINTS: LoggerFactory.create_logger(), @log_exceptions decorator
# ============================================================================

"""
Unified Logger System.

Component-specific loggers that emit one JSON object per line. Every
record carries ``customDimensions`` with the component type and name,
plus the optional LogContext (service URL, operation, request ID).

Design Principles:
- Enum safety for component types and levels
- Component-specific loggers from a single factory
- Context injected as custom dimensions
- No external dependencies

Usage:
    from iclient.util_logger import LoggerFactory, ComponentType

    logger = LoggerFactory.create_logger(ComponentType.SERVICE, "QueryService")
    logger.info("Query dispatched")
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import sys
import json
from functools import wraps


# ============================================================================
# COMPONENT TYPES
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the SDK layers.
    """
    SERVICE = "service"      # Caller-facing wrappers
    ADAPTER = "adapter"      # Geometry adapters per host framework
    TRANSPORT = "transport"  # HTTP requests to iServer
    CHANNEL = "channel"      # DataFlow WebSocket channels
    SCHEMA = "schema"        # Parameter/DTO conversion


# ============================================================================
# LOG LEVELS
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)


# ============================================================================
# LOG CONTEXT
# ============================================================================

@dataclass
class LogContext:
    """
    Context for log correlation across a single service call.
    """
    service_url: Optional[str] = None  # Service the call targets
    operation: Optional[str] = None    # e.g. "queryBySQL", "geocoding"
    request_id: Optional[str] = None   # Caller supplied correlation ID

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'service_url': self.service_url,
                'operation': self.operation,
                'request_id': self.request_id,
            }.items() if v is not None
        }


# ============================================================================
# JSON FORMATTER
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str, ensure_ascii=False)


# ============================================================================
# LOGGER FACTORY
# ============================================================================

def _default_level() -> LogLevel:
    """DEBUG when ClientSettings.debug_logging is set, INFO otherwise."""
    # Lazy import: config pulls in iclient.common, which creates loggers at import
    from iclient.config import get_client_settings
    if get_client_settings().debug_logging:
        return LogLevel.DEBUG
    return LogLevel.INFO


class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.TRANSPORT,
            "FetchRequest"
        )
        logger.debug("GET %s", url)
    """

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        level: Optional[LogLevel] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "QueryService")
            context: Optional log context for correlation
            level: Optional explicit level, defaults from ClientSettings.debug_logging

        Returns:
            Configured Python logger
        """
        log_level = (level or _default_level()).to_python_level()

        # Hierarchical name under the package logger
        logger = logging.getLogger(f"iclient.{component_type.value}.{name}")
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

        # Let host applications capture records through the root logger too
        logger.propagate = True

        original_log = logger._log

        def log_with_context(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
            """Wrapper to inject context as custom dimensions."""
            if extra is None:
                extra = {}

            custom_dims = context.to_dict() if context else {}
            custom_dims['component_type'] = component_type.value
            custom_dims['component_name'] = name

            if 'custom_dimensions' in extra:
                custom_dims.update(extra['custom_dimensions'])

            extra['custom_dimensions'] = custom_dims

            original_log(level, msg, args, exc_info=exc_info, extra=extra,
                         stack_info=stack_info, stacklevel=stacklevel)

        logger._log = log_with_context

        return logger


# ============================================================================
# EXCEPTION DECORATOR
# ============================================================================

def log_exceptions(component_type: ComponentType, component_name: str):
    """
    Log an exception escaping the wrapped callable as ERROR, then re-raise it.

    Example:
        @log_exceptions(ComponentType.SCHEMA, "TopologyValidatorJobsParameter")
        def to_object(param, temp_obj):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log = LoggerFactory.create_logger(component_type, component_name)
                log.error(
                    f"{func.__qualname__} raised {type(e).__name__}: {e}",
                    exc_info=True,
                    extra={'custom_dimensions': {
                        'callable': func.__qualname__,
                        'exception_type': type(e).__name__,
                        'call_args': repr(args)[:500],
                    }}
                )
                raise
        return wrapper
    return decorator
