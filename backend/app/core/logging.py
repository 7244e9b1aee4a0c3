"""
Logging setup for the marketplace backend.

DEBUG runs get plain text on stdout. Everything else is rendered as one JSON
object per line by structlog, with the request id bound by the request
middleware and credentials scrubbed before rendering.
"""
import logging
import re
import sys
from typing import Any

import structlog

from app.core.config import settings

# Any key containing one of these is replaced wholesale
SENSITIVE_FIELDS = (
    "password",
    "token",
    "secret",
    "authorization",
    "cookie",
)

REDACTED = "***REDACTED***"

EMAIL_PATTERN = re.compile(r"^([^\s@])[^\s@]*@([^\s@]+\.[^\s@]+)$")

NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "passlib")


def setup_logging() -> None:
    """Install handlers on the root logger according to DEBUG and LOG_LEVEL."""
    level = getattr(logging, settings.LOG_LEVEL)

    if settings.DEBUG:
        _configure_text_logging(level)
    else:
        _configure_json_logging(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def _configure_text_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        stream=sys.stdout,
        force=True,
    )


def _configure_json_logging(level: int) -> None:
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_sensitive_data,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def _is_sensitive(key: Any) -> bool:
    return isinstance(key, str) and any(field in key.lower() for field in SENSITIVE_FIELDS)


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(k) else _redact_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact_value(v) for v in value)
    return value


def redact_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    structlog processor that scrubs an event.

    Values under password/token/secret/authorization/cookie keys are replaced,
    nested dicts included, and bare email addresses are masked. The incoming
    event dict is not modified.
    """
    return {
        key: REDACTED if _is_sensitive(key) else _redact_value(value)
        for key, value in event_dict.items()
    }


def redact_string(value: str) -> str:
    """Mask an email address to its first character and domain: a***@example.com"""
    match = EMAIL_PATTERN.match(value)
    if match is None:
        return value
    return f"{match.group(1)}***@{match.group(2)}"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogHelper:
    """
    Thin wrapper that turns keyword arguments into structured fields.

    Usage:
        logger = LogHelper(__name__)
        logger.warning("Login failed", email=email, failed_attempts=3)
    """

    service = "marketplace-backend"

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(name)

    def _fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {"service": self.service, "logger": self.name, **fields}

    def _log(self, level: int, message: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, exc_info=exc_info, extra=self._fields(fields))

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._log(logging.ERROR, message, fields, exc_info=True)
