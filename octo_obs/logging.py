"""
Structured Logging (structlog).

Every event carries the bound request context (request_id, chat_id) and
never carries credentials: GitHub tokens and provider keys are masked.
"""

import logging
import sys
from typing import Any

import structlog

from octo_config.settings import Settings

SECRET_KEYS = frozenset(
    {"token", "github_token", "api_key", "authorization", "password", "secret"}
)
REDACTED = "***"


def redact_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask values of credential-like keys, including ``*_token`` and ``*_key`` fields."""
    for key in event_dict:
        lowered = key.lower()
        if lowered in SECRET_KEYS or lowered.endswith(("_token", "_api_key")):
            if event_dict[key]:
                event_dict[key] = REDACTED
    return event_dict


def setup_logging(settings: Settings) -> None:
    """
    Configure structlog on top of stdlib logging.

    Output format: JSON (default) or console (LOG_FORMAT=text)
    """
    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=settings.LOG_LEVEL.upper()
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get configured logger."""
    return structlog.get_logger(name)
