"""
Structured logging for the wallet core.

Wallet modules log through stdlib ``logging``; ``setup_logging`` routes those
records through structlog so every line carries the bound wallet context
(active account and chain) and never leaks the RPC credential.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from .config import settings

WALLET_CONTEXT_KEYS = ("wallet_account", "chain_id")
_REDACTED = "***"


def bind_wallet_context(account: str, chain_id: int) -> None:
    """Attach the active account and chain to subsequent log lines in this context."""
    structlog.contextvars.bind_contextvars(wallet_account=account, chain_id=chain_id)


def clear_wallet_context() -> None:
    structlog.contextvars.unbind_contextvars(*WALLET_CONTEXT_KEYS)


def redact_secrets(_logger: Any, _method: str, event_dict: dict) -> dict:
    """Mask the RPC and explorer API keys wherever they appear in a log event."""
    secrets = [s for s in (settings.rpc_api_key, settings.explorer_api_key) if s]
    if not secrets:
        return event_dict
    for key, value in event_dict.items():
        if isinstance(value, str):
            for secret in secrets:
                value = value.replace(secret, _REDACTED)
            event_dict[key] = value
    return event_dict


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    JSON lines by default, colored console output at DEBUG.

    Args:
        log_level: Override log level (default: from settings.log_level)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if level == logging.DEBUG:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    # Runs last so rendered tracebacks are masked too
    shared_processors.append(redact_secrets)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs full request URLs, which embed the Infura key
    for name in ("httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
