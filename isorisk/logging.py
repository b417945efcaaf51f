"""
Structured Logging
==================

JSON-structured logging with assessment context and a per-module
logger factory.

Uses structlog for structured, machine-readable log output.

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

from isorisk.config import settings

# Context variable tying log lines to one assessment run
_assessment_id: ContextVar[str] = ContextVar("assessment_id", default="")


def set_assessment_id(assessment_id: Optional[str] = None) -> str:
    """Set assessment ID for current context. Returns the ID."""
    aid = assessment_id or str(uuid.uuid4())[:12]
    _assessment_id.set(aid)
    return aid


def get_assessment_id() -> str:
    """Get current assessment ID."""
    return _assessment_id.get()


def _add_assessment_id(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Structlog processor to inject the assessment ID."""
    aid = _assessment_id.get()
    if aid:
        event_dict["assessment_id"] = aid
    return event_dict


def _add_service_info(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Structlog processor to inject service metadata."""
    event_dict["service"] = settings.app_name.lower()
    event_dict["version"] = settings.app_version
    return event_dict


def setup_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the IsoRisk engine.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to ``settings.log_level``
        json_output: If True, output JSON; otherwise human-readable;
            defaults to ``settings.log_json``
        log_file: Optional path to write logs to a file
    """
    if level is None:
        level = settings.log_level
    if json_output is None:
        json_output = settings.log_json
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_assessment_id,
        _add_service_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Silence noisy third-party loggers
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a structured logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)
