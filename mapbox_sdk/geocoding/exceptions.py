"""
Mapbox Geocoding Exceptions

This module contains exception classes raised by the geocoding client and its
configuration layer. Transport failures raised by httpx are not wrapped and
reach the caller unchanged.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class MapboxError(Exception):
    """Base exception class for all Mapbox SDK errors, dood!

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        logger.debug(f"{self.__class__.__name__}: {message}")

    def __str__(self) -> str:
        return self.message


class ConfigurationError(MapboxError):
    """Raised when a configuration file is missing or can't be parsed."""


class GeocodeError(MapboxError):
    """Base class for failed geocode calls.

    Attributes:
        body: Raw API response text the failure was detected in
    """

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body


class GeocodeStatusError(GeocodeError):
    """Raised when the API answers with anything but HTTP 200.

    Attributes:
        uri: Rendered request URI
        statusCode: HTTP status code of the response
        body: Raw response text
    """

    def __init__(self, kind: str, uri: str, statusCode: int, body: str) -> None:
        super().__init__(f"failed to {kind} geocode URI {uri} statusCode {statusCode} resp {body}", body)
        self.uri = uri
        self.statusCode = statusCode


class GeocodeParseError(GeocodeError):
    """Raised when the response body can't be decoded into the response shape.

    The underlying error is available as ``__cause__`` and as ``error``.
    """

    def __init__(self, kind: str, body: str, error: Optional[BaseException] = None) -> None:
        message = f"failed to unmarshal raw {kind} geocode resp {body}"
        if error is not None:
            message = f"{message}: {error}"
        super().__init__(message, body)
        self.error = error


class GeocodeQueryError(GeocodeError):
    """Raised when a reverse geocode response echoes a query that isn't a lon/lat pair."""

    def __init__(self, body: str) -> None:
        super().__init__(f"unexpected len of query coordinates in resp {body}", body)
