"""
Geocoder configuration.

GeocoderConfig is immutable: every ``with*`` method returns a modified copy,
so overrides compose in the order they are chained:

    >>> config = (
    ...     GeocoderConfig()
    ...     .withAccessToken("pk.test")
    ...     .withGeocodeEndpoint("mapbox.places-permanent")
    ...     .withLogger(logging.getLogger("geocoder"))
    ... )
    >>> geocoder = MapboxGeocoder(config)

MAPBOX_ACCESS_TOKEN, when set and non-empty, replaces the configured token at
geocoder construction time.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx
import tomli

from .constants import (
    DEFAULT_GEOCODE_ENDPOINT,
    DEFAULT_ROOT_API,
    DEFAULT_TIMEOUT,
    ENV_ACCESS_TOKEN,
    EQUAL_MARK,
    GEOCODE_API_PATH,
    PARAM_ACCESS_TOKEN,
    QUESTION_MARK,
    SLASH,
)
from .exceptions import ConfigurationError
from .logger import Logger, RequestLoggerResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocoderConfig:
    """Settings for MapboxGeocoder, dood!

    Attributes:
        accessToken: Mapbox access token (``access_token`` query parameter)
        rootApi: API root, default https://api.mapbox.com
        geocodeEndpoint: ``mapbox.places`` or ``mapbox.places-permanent``
        httpClient: Shared httpx.AsyncClient. When None a short-lived client
            is opened for every call.
        logger: Static logger for request/response traces
        requestLogger: Resolver returning a logger for the per-call context.
            Used instead of ``logger`` when set.
        requestTimeout: Timeout in seconds for the per-call client
        accessTokenGetValue: Prepared ``?access_token=...`` fragment
        geocodeApiUrl: Prepared ``<root>/geocoding/v5/<endpoint>/`` prefix
    """

    accessToken: str = ""
    rootApi: str = DEFAULT_ROOT_API
    geocodeEndpoint: str = DEFAULT_GEOCODE_ENDPOINT
    httpClient: Optional[httpx.AsyncClient] = field(default=None, repr=False, compare=False)
    logger: Optional[Logger] = field(default=None, repr=False, compare=False)
    requestLogger: Optional[RequestLoggerResolver] = field(default=None, repr=False, compare=False)
    requestTimeout: float = DEFAULT_TIMEOUT

    accessTokenGetValue: str = field(default="", repr=False)
    geocodeApiUrl: str = ""

    def withAccessToken(self, accessToken: str) -> "GeocoderConfig":
        """Set access token. MAPBOX_ACCESS_TOKEN still takes precedence."""
        return dataclasses.replace(self, accessToken=accessToken)

    def withRootApi(self, rootApi: str) -> "GeocoderConfig":
        """Change root API address (default https://api.mapbox.com)."""
        return dataclasses.replace(self, rootApi=rootApi)

    def withGeocodeEndpoint(self, endpoint: str) -> "GeocoderConfig":
        """Set geocode endpoint, e.g. ``mapbox.places-permanent``."""
        return dataclasses.replace(self, geocodeEndpoint=endpoint)

    def withHttpClient(self, httpClient: httpx.AsyncClient) -> "GeocoderConfig":
        """Use the given httpx client for every call."""
        return dataclasses.replace(self, httpClient=httpClient)

    def withLogger(self, logger: Logger) -> "GeocoderConfig":
        """Set logger for debug traces."""
        return dataclasses.replace(self, logger=logger)

    def withRequestLogger(self, requestLogger: RequestLoggerResolver) -> "GeocoderConfig":
        """Set the way a logger is extracted from the per-call context.

        Takes precedence over ``withLogger``.
        """
        return dataclasses.replace(self, requestLogger=requestLogger)

    def withRequestTimeout(self, requestTimeout: float) -> "GeocoderConfig":
        return dataclasses.replace(self, requestTimeout=requestTimeout)

    def withEnv(self) -> "GeocoderConfig":
        """Overwrite values from environment variables if they are not empty."""
        accessToken = os.getenv(ENV_ACCESS_TOKEN, "")
        if accessToken:
            logger.debug(f"Access token taken from {ENV_ACCESS_TOKEN}")
            return dataclasses.replace(self, accessToken=accessToken)
        return self

    def prepare(self) -> "GeocoderConfig":
        """Prebuild URI parts reused by every call."""
        return dataclasses.replace(
            self,
            accessTokenGetValue=QUESTION_MARK + PARAM_ACCESS_TOKEN + EQUAL_MARK + self.accessToken,
            geocodeApiUrl=self.rootApi + GEOCODE_API_PATH + self.geocodeEndpoint + SLASH,
        )

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "GeocoderConfig":
        """Create config from a mapping, e.g. the ``[mapbox]`` section of a TOML file.

        Recognized keys: ``access-token``, ``root-api``, ``geocode-endpoint``,
        ``request-timeout``. Missing keys keep their defaults.
        """
        config = cls()
        if "access-token" in data:
            config = config.withAccessToken(str(data["access-token"]))
        if "root-api" in data:
            config = config.withRootApi(str(data["root-api"]))
        if "geocode-endpoint" in data:
            config = config.withGeocodeEndpoint(str(data["geocode-endpoint"]))
        if "request-timeout" in data:
            config = config.withRequestTimeout(float(data["request-timeout"]))
        return config


def readConfigFile(path: Union[str, Path]) -> Dict[str, Any]:
    """Read whole TOML config file.

    Raises:
        ConfigurationError: If file is missing or isn't valid TOML
    """
    configFile = Path(path)
    if not configFile.exists():
        raise ConfigurationError(f"Configuration file {configFile} not found")

    try:
        with open(configFile, "rb") as f:
            data = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigurationError(f"Failed to parse configuration file {configFile}: {e}") from e

    logger.info(f"Configuration loaded from {configFile}")
    return data


def loadConfig(path: Union[str, Path], section: str = "mapbox") -> GeocoderConfig:
    """Build GeocoderConfig from a section of a TOML file, dood!

    Example config.toml:

        [mapbox]
        access-token = "pk.xxx"
        geocode-endpoint = "mapbox.places-permanent"
        request-timeout = 5

    Raises:
        ConfigurationError: If file is missing, invalid, or section isn't a table
    """
    data = readConfigFile(path)
    sectionData = data.get(section, {})
    if not isinstance(sectionData, dict):
        raise ConfigurationError(f"Section [{section}] in {path} must be a table")
    return GeocoderConfig.fromDict(sectionData)
