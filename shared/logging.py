"""
Shared logging configuration for the Relief Coordination service.

Every log line is a JSON object carrying the service, the component that
logged it and, inside a request, the request id and path.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Callable, Dict, Optional
from contextvars import ContextVar

# Context variables for request correlation
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
request_path_var: ContextVar[Optional[str]] = ContextVar('request_path', default=None)

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service."""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            service_context(service_name),
            add_request_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def service_context(service_name: str) -> Processor:
    """Build a processor that stamps the service and component on each event."""

    def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        # Component loggers are named "<service>.<component>", e.g. "disasters.geocoding"
        event_dict.setdefault("service", service_name)
        logger_name = event_dict.get("logger", "")
        if logger_name.startswith(f"{service_name}."):
            event_dict["component"] = logger_name[len(service_name) + 1:]
        return event_dict

    return add_service_context


def add_request_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add request correlation fields to log events."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id
    request_path = request_path_var.get()
    if request_path:
        event_dict.setdefault("path", request_path)
    return event_dict


def set_request_id(request_id: Optional[str] = None, path: Optional[str] = None) -> str:
    """Set request ID (generated when absent) and path in context."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    request_path_var.set(path)
    return request_id


def clear_context():
    """Clear all context variables."""
    request_id_var.set(None)
    request_path_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
