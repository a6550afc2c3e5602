"""
Structured logging for ChannelKit.

One stdlib root handler renders every record through structlog, whether it
came from ``logging.getLogger(__name__)`` (packaging, preflight, API) or
from the export service's bound ``structlog`` logger. Context bound on the
export pipeline (listing_id, channel_id, format, stage) and the request_id
set by the logging middleware therefore land as top-level keys.

Rendering:
    development          colored console lines
    staging/production   JSON lines, tracebacks flattened into ``exception``
"""

import logging
import sys

import structlog

from channelkit.config import AppEnv

# Per-request and per-query chatter; the logging middleware already logs requests
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")


def _wants_json(app_env: AppEnv, log_format: str) -> bool:
    fmt = (log_format or "auto").lower()
    if fmt in ("json", "console"):
        return fmt == "json"
    return app_env != AppEnv.DEVELOPMENT


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer_chain(as_json: bool) -> list[structlog.types.Processor]:
    if as_json:
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=True),
    ]


def setup_logging(
    app_env: AppEnv,
    log_level: str = "INFO",
    log_format: str = "auto",
) -> None:
    """
    Route stdlib and structlog output through one stdout handler.

    Args:
        app_env: Selects the renderer when ``log_format`` is ``auto``.
        log_level: Root level name; unknown names fall back to INFO.
        log_format: ``auto``, ``json`` or ``console``.
    """
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=_renderer_chain(_wants_json(app_env, log_format)),
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
