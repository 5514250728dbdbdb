"""Logfire tracing for revision operations.

``span`` and ``info`` do nothing until ``configure`` has connected Logfire,
which only happens when ``logfire.enabled`` is set and the ``logfire`` extra
is installed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from builder_history.config import Settings

logger = logging.getLogger(__name__)

# The logfire module once configure() has run, else None
_logfire = None


def is_available() -> bool:
    return _logfire is not None


def configure(settings: Settings) -> bool:
    """Connect Logfire according to the ``logfire`` settings block.

    Returns:
        True if tracing is now active
    """
    global _logfire

    config = settings.logfire
    if not config.enabled:
        return False

    try:
        import logfire
    except ImportError:
        logger.warning("logfire.enabled is set but the logfire package is not installed")
        return False

    options: dict[str, Any] = {
        "service_name": config.service_name,
        "send_to_logfire": "if-token-present",
    }
    if config.environment:
        options["environment"] = config.environment
    if config.console:
        options["console"] = logfire.ConsoleOptions()

    logfire.configure(**options)
    _logfire = logfire
    return True


@contextmanager
def span(name: str, **attributes: Any):
    if _logfire is None:
        yield None
        return

    with _logfire.span(name, **attributes) as current:
        yield current


def info(message: str, **attributes: Any) -> None:
    if _logfire is not None:
        _logfire.info(message, **attributes)
