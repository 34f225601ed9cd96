"""
Structured Logging
==================
structlog integration for run-level events (one event per employee pass,
one warning per shortfall).

Usage:
    from shiftplan.utils.structured_logging import get_structured_logger

    log = get_structured_logger("shiftplan.solver")
    log.info("employee_allocated", employee_id="e1", target_hours=32)
"""
import logging
from typing import Any

import structlog


def configure_structlog(json_output: bool = False) -> None:
    """
    Configure structlog to render through the stdlib ``logging`` handlers.

    Events then honour the levels and handlers set up by setup_logging,
    so they never leak onto stdout ahead of CLI output.

    Args:
        json_output: Render events as JSON lines instead of key=value text
    """
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.getLogger("shiftplan").debug(f"structlog configured (json={json_output})")


def get_structured_logger(name: str) -> Any:
    """
    Get a structured logger.

    If structlog has not been configured yet, the stdlib-backed text setup
    is installed first, so events follow the `logging` levels instead of
    going to stdout.

    Args:
        name: Logger name (e.g., "shiftplan.solver")
    """
    if not structlog.is_configured():
        configure_structlog()
    return structlog.get_logger(name)


# Context management for run-scoped logging
def bind_context(**kwargs) -> None:
    """
    Bind context variables for all subsequent log calls.

    Args:
        **kwargs: Context values (e.g., establishment_id="store-1")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
