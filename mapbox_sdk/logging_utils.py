"""
Logging setup for the mapbox_sdk command line tool.

The library only writes to module loggers and to loggers injected through
GeocoderConfig. This module wires handlers for the ``[logging]`` config
section and provides the trace logger behind ``--verbose``.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TRACE_LOGGER_NAME = "mapbox_sdk.trace"
TRACE_LOG_FORMAT = "%(message)s"

# httpx/httpcore log every request on INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get log level by name ("debug", "INFO", ...)."""
    level = getattr(logging, levelStr.upper(), None)
    if not isinstance(level, int):
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def _attachHandler(localLogger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setLevel(localLogger.getEffectiveLevel())
    handler.setFormatter(formatter)
    localLogger.addHandler(handler)


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """Configure single logger, dood!

    Recognized keys: ``level``, ``propagate``, ``format``, ``console`` (log to
    stderr) and ``file`` (append to given path). Previous handlers are dropped.
    """
    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])

    if "level" in config:
        logLevel = getLogLevelByStr(config["level"])
        if logLevel is not None:
            localLogger.setLevel(logLevel)

    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)

    formatter = logging.Formatter(config.get("format", DEFAULT_LOG_FORMAT))

    if config.get("console", False):
        _attachHandler(localLogger, logging.StreamHandler(), formatter)

    if "file" in config:
        logFile = Path(config["file"])
        try:
            logFile.parent.mkdir(parents=True, exist_ok=True)
            _attachHandler(localLogger, logging.FileHandler(logFile, encoding="utf-8"), formatter)
        except OSError as e:
            logger.error(f"Failed to setup file logging for {localLogger.name}: {e}")


def initLogging(config: Dict[str, Any]) -> None:
    """Configure root logger and per-logger sections from ``[logging]`` config.

    Example:
        >>> initLogging({
        ...     "level": "warning",
        ...     "console": True,
        ...     "logger": {"mapbox_sdk": {"level": "debug", "file": "logs/mapbox.log"}},
        ... })
    """
    rootLogger = logging.getLogger()
    configureLogger(rootLogger, config)

    if rootLogger.getEffectiveLevel() < logging.WARNING:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    for loggerName, loggerConfig in config.get("logger", {}).items():
        configureLogger(logging.getLogger(loggerName), loggerConfig)

    logger.debug(f"Logging configured, root level: {logging.getLevelName(rootLogger.getEffectiveLevel())}")


def enableRequestTrace(stream: Optional[TextIO] = None) -> logging.Logger:
    """Logger for geocode request/response traces, written bare to ``stream`` (stderr by default).

    Doesn't propagate, so traces never end up in root handlers or log files.
    """
    traceLogger = logging.getLogger(TRACE_LOGGER_NAME)
    configureLogger(traceLogger, {"level": "debug", "propagate": False, "format": TRACE_LOG_FORMAT})
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _attachHandler(traceLogger, handler, logging.Formatter(TRACE_LOG_FORMAT))
    return traceLogger
