"""
Mapbox Geocoding API Client Library

This module provides a Python async client for the Mapbox Geocoding v5 API
(reverse and forward geocoding) with typed responses and rate limit metadata.

Example usage:
    from mapbox_sdk.geocoding import (
        ForwardGeocodeRequest,
        GeocoderConfig,
        GeoPoint,
        MapboxGeocoder,
        ReverseGeocodeRequest,
    )

    geocoder = MapboxGeocoder(GeocoderConfig().withAccessToken("pk.xxx"))

    # Reverse geocoding
    resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=GeoPoint(lon=-77.05, lat=38.889)))

    # Forward geocoding
    resp = await geocoder.forwardGeocode(ForwardGeocodeRequest(searchText="Lincoln Memorial", limit=3))
    print(resp.rateLimit.limit)
"""

from mapbox_sdk.geocoding.buffer_pool import StringBufferPool
from mapbox_sdk.geocoding.client import MapboxGeocoder, readRateLimit
from mapbox_sdk.geocoding.config import GeocoderConfig, loadConfig
from mapbox_sdk.geocoding.exceptions import (
    ConfigurationError,
    GeocodeError,
    GeocodeParseError,
    GeocodeQueryError,
    GeocodeStatusError,
    MapboxError,
)
from mapbox_sdk.geocoding.interface import GeocoderInterface
from mapbox_sdk.geocoding.logger import Logger, RequestLoggerResolver
from mapbox_sdk.geocoding.models import (
    Context,
    Feature,
    ForwardGeocodeRequest,
    GeocodeResponse,
    GeoPoint,
    Geometry,
    Properties,
    RateLimit,
    ReverseGeocodeRequest,
    ReverseMode,
)

__all__ = [
    "MapboxGeocoder",
    "GeocoderInterface",
    "GeocoderConfig",
    "loadConfig",
    "readRateLimit",
    "StringBufferPool",
    "Logger",
    "RequestLoggerResolver",
    # Models
    "GeoPoint",
    "ReverseMode",
    "ReverseGeocodeRequest",
    "ForwardGeocodeRequest",
    "GeocodeResponse",
    "RateLimit",
    "Feature",
    "Properties",
    "Geometry",
    "Context",
    # Errors
    "MapboxError",
    "ConfigurationError",
    "GeocodeError",
    "GeocodeStatusError",
    "GeocodeParseError",
    "GeocodeQueryError",
]
