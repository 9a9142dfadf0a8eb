"""Logging for the marketplace API.

structlog renders every entry; stdlib logging only carries the output to
stdout (and to a rotating file when ``LOG_DIR`` is set). Payment signatures,
processor secrets and credentials never reach a sink: ``redact_secrets``
masks them wherever they appear in an event, nested payloads included.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

REDACTED = "***"

SENSITIVE_KEY_FRAGMENTS = ("signature", "secret", "password", "token", "authorization", "api_key")

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS.get(current_environment(), "INFO"))


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if is_sensitive(str(k)) else _mask(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_mask(v) for v in value]
    return value


def redact_secrets(_logger, _method_name, event_dict: dict) -> dict:
    """structlog processor masking signature, secret and credential fields."""
    for key in list(event_dict):
        if key == "event":
            continue
        if is_sensitive(key):
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _mask(event_dict[key])
    return event_dict


def shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def renderer_for(environment: str):
    if environment in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def _route_stdlib(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [logging.StreamHandler(sys.stdout)]

    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        root.addHandler(
            logging.handlers.RotatingFileHandler(
                filename=Path(log_dir) / "marketplace.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )

    # Chatty dependencies: the SDK's HTTP pool and the framework internals.
    for name in ("urllib3", "asyncio", "protean", "razorpay"):
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging() -> None:
    """Configure stdlib routing and structlog for the running environment."""
    _route_stdlib(get_log_level())
    structlog.configure(
        processors=[*shared_processors(), renderer_for(current_environment())],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**kwargs: Any) -> None:
    """Attach values (request path, acting user) to every log line in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
