"""
Centralized Logging Configuration.

structlog on top of stdlib logging, configured from the validated
config/settings/logging.yaml. Modules get loggers from get_logger() and
never create their own handlers.

Structured fields in every JSON log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - debug, info, warning, error, critical
    logger      - Module path (e.g., wrapcommand.backend.services.quote)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file
    source      - Origin context, set explicitly (web, cli, embed, internal, ...)
    request_id  - Request correlation ID (inside an HTTP request)
    frontend    - Resolved X-Frontend-ID (inside an HTTP request)

Fields passed as ``extra={...}`` are lifted to top-level keys. Keys listed
under ``redact_fields`` (customer email and phone) are masked before any
renderer sees them.

Usage:
    from wrapcommand.backend.core.logging import get_logger, setup_logging

    setup_logging()                              # values from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Quote created", extra={"quote_number": "WPW-261019-0001"})

    log_with_source(logger, "cli", "info", "Vehicles seeded", inserted=42)

Log File:
    logs/system.jsonl: single file, all records, filter by 'source' field
"""

import logging
import sys
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from wrapcommand.backend.core.config import find_project_root, get_app_config
from wrapcommand.backend.core.config_schema import LoggingSchema

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "api",
    "embed",
    "internal",
    "unknown",
})
"""
Recognized log source values. Source is always set explicitly by the
caller, never guessed from logger names.
"""

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")


def _load_logging_config() -> LoggingSchema:
    return get_app_config().logging


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve the log file path relative to project root."""
    return find_project_root() / configured_path


def mask_contact(value: Any) -> Any:
    """
    Mask an email address or phone number, keeping enough to recognise it.

        sam@example.com  -> s***@example.com
        (555) 123-4567   -> ***4567
    """
    if not isinstance(value, str) or not value:
        return value
    if "@" in value:
        local, _, domain = value.partition("@")
        return f"{local[:1]}***@{domain}"
    digits = [c for c in value if c.isdigit()]
    return "***" + "".join(digits[-4:]) if len(digits) > 4 else "***"


def flatten_extra(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Lift ``extra={...}`` into the event dict without overwriting bound keys."""
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def redact_fields(fields: Iterable[str]) -> Processor:
    """Build a processor that masks the given keys, including list values."""
    keys = frozenset(fields)

    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        for key in keys.intersection(event_dict):
            value = event_dict[key]
            if isinstance(value, (list, tuple)):
                event_dict[key] = [mask_contact(v) for v in value]
            else:
                event_dict[key] = mask_contact(value)
        return event_dict

    return processor


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Arguments override the corresponding logging.yaml values.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console'
        enable_console: Write to stdout
        enable_file_logging: Write the rotating JSONL file
    """
    config = _load_logging_config()

    effective_level = level if level is not None else config.level
    effective_format = format_type if format_type is not None else config.format
    console_enabled = enable_console if enable_console is not None else config.handlers.console.enabled
    file_enabled = enable_file_logging if enable_file_logging is not None else config.handlers.file.enabled

    log_level = getattr(logging, effective_level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        flatten_extra,
        redact_fields(config.redact_fields),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if effective_format == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=shared_processors,
        )
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if file_enabled:
        file_config = config.handlers.file
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit source outside HTTP request context.

    Used by the CLI (seeding, tenant creation), where no middleware binds
    a frontend.

    Raises:
        AttributeError: If level is not a valid log level
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
