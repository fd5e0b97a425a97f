"""
Logger capability used for request/response traces.

Any object with ``debug(msg, *args)`` and ``error(msg, *args)`` methods works,
``logging.Logger`` included.
"""

from typing import Any, Callable, Optional, Protocol


class Logger(Protocol):
    """Minimal logger interface the geocoder writes traces to."""

    def debug(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


# Extracts a logger from the per-call context (request id, tenant, etc.)
RequestLoggerResolver = Callable[[Any], Logger]


def resolveLogger(
    logger: Optional[Logger],
    requestLogger: Optional[RequestLoggerResolver],
    context: Any = None,
) -> Optional[Logger]:
    """Pick the logger for a single call, dood!

    A configured request logger resolver wins over the static logger.

    Args:
        logger: Static logger from the configuration
        requestLogger: Resolver called with the per-call context
        context: Whatever the caller passed along with the call

    Returns:
        Logger to use, or None if nothing is configured
    """
    if requestLogger is not None:
        return requestLogger(context)
    return logger


def withLogger(
    logger: Optional[Logger],
    requestLogger: Optional[RequestLoggerResolver],
    context: Any,
    do: Callable[[Logger], None],
) -> None:
    """Call ``do`` with the resolved logger; skip silently if there is none."""
    resolved = resolveLogger(logger, requestLogger, context)
    if resolved is not None:
        do(resolved)
