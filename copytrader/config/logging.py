"""structlog setup для copytrader.

Два renderers: JSON (production) і console (local dev). Всі log calls
отримують service/network context, а значення під ключами з
REDACTED_KEYS ніколи не потрапляють у вивід.

Usage:
    from copytrader.config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("session_runner.started", poll_interval=3.0)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from copytrader.config.settings import get_settings

REDACTED = "[REDACTED]"

REDACTED_KEYS = frozenset({
    "authorization",
    "encrypted_private_key",
    "password",
    "private_key",
    "secret",
    "secret_key",
    "seed",
    "signing_key",
    "token",
})

# Third-party loggers that only add noise at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "aiogram")


# ====== Processors ======


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in REDACTED_KEYS else _redact(v)
            for k, v in value.items()
        }
    return value


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace credential-like values (top level and nested dicts)."""
    for key, value in event_dict.items():
        event_dict[key] = REDACTED if key.lower() in REDACTED_KEYS else _redact(value)
    return event_dict


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", "aptos-copytrader")
    event_dict.setdefault("environment", settings.environment)
    event_dict.setdefault("network", settings.aptos_network)
    return event_dict


# ====== Setup ======


def setup_logging() -> None:
    """Configure structlog + stdlib root logger. Call once from the lifespan."""
    settings = get_settings()

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
        redact_secrets,
    ]

    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# ====== Context ======


def bind_request_context(request_id: str, user_id: int | None = None, **extra: Any) -> None:
    """Start a fresh log context for one HTTP request (middleware)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, user_id=user_id, **extra)


def bind_session_context(session_id: int, follower_id: int, master_address: str) -> None:
    """Bind copy-trade session context inside a runner task.

    asyncio tasks copy contextvars on creation, so the binding stays
    local to the runner's own task.
    """
    structlog.contextvars.bind_contextvars(
        session_id=session_id,
        follower_id=follower_id,
        master_address=master_address,
    )


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
