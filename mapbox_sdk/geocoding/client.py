"""
Mapbox Geocoding API Async Client

This module provides the MapboxGeocoder class: reverse and forward geocode
calls against the Geocoding v5 API over httpx.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .buffer_pool import StringBufferPool
from .config import GeocoderConfig
from .constants import (
    COMMA,
    FALSE_STR,
    HEADER_RATE_LIMIT_INTERVAL,
    HEADER_RATE_LIMIT_LIMIT,
    HEADER_RATE_LIMIT_RESET,
    HTTP_GET,
    HTTP_STATUS_OK,
    LOG_PREFIX,
    PARAM_AUTOCOMPLETE,
    PARAM_BBOX,
    PARAM_COUNTRY,
    PARAM_FUZZY_MATCH,
    PARAM_LANGUAGE,
    PARAM_LIMIT,
    PARAM_PROXIMITY,
    PARAM_REVERSE_MODE,
    PARAM_ROUTING,
    PARAM_TYPES,
    RESPONSE_FORMAT_JSON,
    TRUE_STR,
)
from .exceptions import GeocodeParseError, GeocodeQueryError, GeocodeStatusError
from .interface import GeocoderInterface
from .logger import withLogger
from .models import (
    Feature,
    ForwardGeocodeRequest,
    GeocodeResponse,
    GeoPoint,
    RateLimit,
    RawForwardResponse,
    RawReverseResponse,
    ReverseGeocodeRequest,
    ReverseMode,
)
from .query_encoder import encodeValues, formatCoordinate

logger = logging.getLogger(__name__)


class MapboxGeocoder(GeocoderInterface):
    """Async client for Mapbox Geocoding v5 API, dood!

    Configuration is resolved once at construction (MAPBOX_ACCESS_TOKEN
    override, prepared URL prefix and access token fragment) and reused by
    every call. One instance can serve concurrent calls.

    Example:
        >>> from mapbox_sdk.geocoding import GeocoderConfig, GeoPoint, MapboxGeocoder, ReverseGeocodeRequest
        >>>
        >>> geocoder = MapboxGeocoder(GeocoderConfig().withAccessToken("pk.xxx"))
        >>> resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=GeoPoint(lon=-77.05, lat=38.889)))
        >>> for feature in resp.features:
        ...     print(feature.place_name)
    """

    def __init__(self, config: Optional[GeocoderConfig] = None, bufferPool: Optional[StringBufferPool] = None):
        """Initialize geocoder, dood!

        Args:
            config: Geocoder settings (default: GeocoderConfig())
            bufferPool: Pool for URI buffers (default: a new StringBufferPool)
        """
        baseConfig = config if config is not None else GeocoderConfig()
        self.config = baseConfig.withEnv().prepare()
        self._bufferPool = bufferPool if bufferPool is not None else StringBufferPool()

        logger.debug(f"MapboxGeocoder initialized for {self.config.geocodeApiUrl}")

    async def reverseGeocode(self, request: ReverseGeocodeRequest, *, context: Any = None) -> GeocodeResponse:
        """Reverse geocoding: convert coordinates into places, dood!

        Args:
            request: Point and optional filters
            context: Per-call context handed to the request logger resolver

        Returns:
            GeocodeResponse with ``reverseQuery`` set

        Raises:
            httpx.HTTPError: Transport failure, not wrapped
            GeocodeStatusError: API answered with non-200 status
            GeocodeParseError: Body isn't a valid geocode response
            GeocodeQueryError: Echoed query isn't a lon/lat pair
        """
        with self._bufferPool.buffer() as buf:
            values, valuesMulti = self._buildReverseValues(request)

            buf.write(self.config.geocodeApiUrl)
            buf.write(formatCoordinate(request.geoPoint.lon))
            buf.write(COMMA)
            buf.write(formatCoordinate(request.geoPoint.lat))
            buf.write(RESPONSE_FORMAT_JSON)
            buf.write(self.config.accessTokenGetValue)
            encodeValues(buf, values, valuesMulti)

            reqURI = buf.getvalue()
            self._trace(context, f"{LOG_PREFIX} reverse geocode request %s", reqURI)

            response, respBytes, respText = await self._doRequest(reqURI)
            self._trace(context, f"{LOG_PREFIX} reverse geocode response %s", respText)

            if response.status_code != HTTP_STATUS_OK:
                raise GeocodeStatusError("reverse", reqURI, response.status_code, respText)

            try:
                respRaw: RawReverseResponse = json.loads(respBytes)
                features = self._parseFeatures(respRaw.get("features"))
                query = self._parseQueryCoordinates(respRaw.get("query"))
            except (ValueError, TypeError, AttributeError) as e:
                raise GeocodeParseError("reverse", respText, e) from e

            if len(query) != 2:
                raise GeocodeQueryError(respText)

            return GeocodeResponse(
                rateLimit=readRateLimit(response),
                rawResp=respBytes,
                features=features,
                reverseQuery=GeoPoint(lon=query[0], lat=query[1]),
                type=respRaw.get("type", ""),
                attribution=respRaw.get("attribution", ""),
            )

    async def forwardGeocode(self, request: ForwardGeocodeRequest, *, context: Any = None) -> GeocodeResponse:
        """Forward geocoding: convert free text into places, dood!

        Args:
            request: Search text and optional filters. Search text is written
                into the URI as is.
            context: Per-call context handed to the request logger resolver

        Returns:
            GeocodeResponse with ``forwardQuery`` set

        Raises:
            httpx.HTTPError: Transport failure, not wrapped
            GeocodeStatusError: API answered with non-200 status
            GeocodeParseError: Body isn't a valid geocode response
        """
        with self._bufferPool.buffer() as buf:
            values = self._buildForwardValues(request)

            buf.write(self.config.geocodeApiUrl)
            buf.write(request.searchText)
            buf.write(RESPONSE_FORMAT_JSON)
            buf.write(self.config.accessTokenGetValue)
            encodeValues(buf, values)

            reqURI = buf.getvalue()
            self._trace(context, f"{LOG_PREFIX} forward geocode request %s", reqURI)

            response, respBytes, respText = await self._doRequest(reqURI)
            self._trace(context, f"{LOG_PREFIX} forward geocode response %s", respText)

            if response.status_code != HTTP_STATUS_OK:
                raise GeocodeStatusError("forward", reqURI, response.status_code, respText)

            try:
                respRaw: RawForwardResponse = json.loads(respBytes)
                features = self._parseFeatures(respRaw.get("features"))
                query = [str(v) for v in respRaw.get("query") or []]
            except (ValueError, TypeError, AttributeError) as e:
                raise GeocodeParseError("forward", respText, e) from e

            return GeocodeResponse(
                rateLimit=readRateLimit(response),
                rawResp=respBytes,
                features=features,
                forwardQuery=query,
                type=respRaw.get("type", ""),
                attribution=respRaw.get("attribution", ""),
            )

    def _buildReverseValues(self, request: ReverseGeocodeRequest) -> Tuple[Dict[str, str], Dict[str, List[str]]]:
        """Collect non-zero reverse filters.

        A single type goes into the single-value mapping, several types go
        into the multi-value mapping as one comma joined ``types`` value.
        """
        values: Dict[str, str] = {}
        valuesMulti: Dict[str, List[str]] = {}

        if request.country:
            values[PARAM_COUNTRY] = request.country
        if request.limit != 0:
            values[PARAM_LIMIT] = str(request.limit)
        if request.language:
            values[PARAM_LANGUAGE] = request.language
        if request.routing:
            values[PARAM_ROUTING] = TRUE_STR
        if request.reverseMode != ReverseMode.DISTANCE:
            values[PARAM_REVERSE_MODE] = request.reverseMode.value
        if len(request.types) == 1:
            values[PARAM_TYPES] = request.types[0]
        elif len(request.types) > 1:
            valuesMulti[PARAM_TYPES] = [COMMA.join(request.types)]

        return values, valuesMulti

    def _buildForwardValues(self, request: ForwardGeocodeRequest) -> Dict[str, str]:
        """Collect non-zero forward filters. Unset tri-state flags are left to the API default."""
        values: Dict[str, str] = {}

        if request.country:
            values[PARAM_COUNTRY] = request.country
        if request.limit != 0:
            values[PARAM_LIMIT] = str(request.limit)
        if request.language:
            values[PARAM_LANGUAGE] = request.language
        if request.routing:
            values[PARAM_ROUTING] = TRUE_STR
        if request.autocomplete is not None:
            values[PARAM_AUTOCOMPLETE] = TRUE_STR if request.autocomplete else FALSE_STR
        if request.fuzzyMatch is not None:
            values[PARAM_FUZZY_MATCH] = TRUE_STR if request.fuzzyMatch else FALSE_STR
        if len(request.bbox) == 4:
            values[PARAM_BBOX] = COMMA.join(formatCoordinate(v) for v in request.bbox)
        if request.proximity is not None:
            values[PARAM_PROXIMITY] = (
                formatCoordinate(request.proximity.lon) + COMMA + formatCoordinate(request.proximity.lat)
            )
        if request.types:
            values[PARAM_TYPES] = COMMA.join(request.types)

        return values

    async def _doRequest(self, reqURI: str) -> Tuple[httpx.Response, bytes, str]:
        """Send GET request and take own copy of the body.

        Uses configured httpClient if any, otherwise a new session per call.

        Returns:
            Response, copied body bytes and body decoded as text
        """
        request = httpx.Request(HTTP_GET, reqURI)

        if self.config.httpClient is not None:
            response = await self.config.httpClient.send(request)
        else:
            async with httpx.AsyncClient(timeout=self.config.requestTimeout) as session:
                response = await session.send(request)

        respBytes = bytes(response.content)
        return response, respBytes, respBytes.decode("utf-8", errors="replace")

    def _parseFeatures(self, rawFeatures: Any) -> List[Feature]:
        if rawFeatures is None:
            return []
        if not isinstance(rawFeatures, list):
            raise TypeError(f"features must be a list, got {type(rawFeatures).__name__}")
        return [Feature.from_dict(item) for item in rawFeatures]

    def _parseQueryCoordinates(self, rawQuery: Any) -> List[float]:
        """Reverse query echo must be a list of numbers, length is checked by the caller."""
        if rawQuery is None:
            return []
        if not isinstance(rawQuery, list):
            raise TypeError(f"query must be a list, got {type(rawQuery).__name__}")
        for value in rawQuery:
            # bool is an int subclass, JSON true/false isn't a coordinate
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"query coordinate must be a number, got {value!r}")
        return [float(v) for v in rawQuery]

    def _trace(self, context: Any, msg: str, *args: Any) -> None:
        withLogger(self.config.logger, self.config.requestLogger, context, lambda log: log.debug(msg, *args))


def readRateLimit(response: httpx.Response) -> RateLimit:
    """Read rate limit headers; missing headers give empty strings."""
    return RateLimit(
        interval=response.headers.get(HEADER_RATE_LIMIT_INTERVAL, ""),
        limit=response.headers.get(HEADER_RATE_LIMIT_LIMIT, ""),
        reset=response.headers.get(HEADER_RATE_LIMIT_RESET, ""),
    )
