"""Structured logging for the Kotoba API.

structlog renders both our own events and stdlib records from uvicorn and
SQLAlchemy through one ProcessorFormatter: coloured console lines in
development, one JSON object per line when ``LOG_JSON`` is set.

Request-scoped fields (correlation ID, path, user ID) live in structlog's
contextvars and are merged into every event emitted while handling the
request. Credentials are redacted before rendering.
"""
import logging
import sys
from functools import lru_cache
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "kotoba-api"
SERVICE_VERSION = "0.1.0"

REDACTED_KEYS = frozenset({
    "password",
    "password_hash",
    "token",
    "access_token",
    "jwt_secret",
    "secret",
    "authorization",
    "cookie",
})

# Third-party loggers held at WARNING unless overridden
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "sqlalchemy.pool", "aiosqlite")


def _redact(value, depth: int = 0):
    if depth > 5:
        return value
    if isinstance(value, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in REDACTED_KEYS else _redact(v, depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item, depth + 1) for item in value]
    return value


def redact_credentials(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    return _redact(event_dict)


def add_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", SERVICE_VERSION)
    return event_dict


def shared_processors() -> list[Processor]:
    """Chain applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_service,
        redact_credentials,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_sql: bool = False,
) -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        level: Root log level name; unknown names fall back to INFO.
        json_logs: Emit JSON lines instead of console output.
        log_sql: Log SQL statements from the SQLAlchemy engine.
    """
    processors = shared_processors()

    structlog.configure(
        processors=[
            *processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_logs),
        ],
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn installs its own handlers; let records propagate to ours instead
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).handlers = []

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if log_sql else logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    """Short random ID used to tie together one request's log lines."""
    return uuid4().hex[:8]


def bind_context(**kwargs) -> None:
    """Attach fields to every event logged for the rest of this request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@lru_cache(maxsize=None)
def domain_logger(domain: str) -> structlog.stdlib.BoundLogger:
    """Logger named ``kotoba.<domain>``, shared by every caller."""
    return get_logger(f"kotoba.{domain}")


def api_logger() -> structlog.stdlib.BoundLogger:
    return domain_logger("api")


def db_logger() -> structlog.stdlib.BoundLogger:
    return domain_logger("db")


def auth_logger() -> structlog.stdlib.BoundLogger:
    return domain_logger("auth")


def progress_logger() -> structlog.stdlib.BoundLogger:
    """Streak, cursor and word status events."""
    return domain_logger("progress")


def placement_logger() -> structlog.stdlib.BoundLogger:
    """Placement scoring and level assignment events."""
    return domain_logger("placement")
