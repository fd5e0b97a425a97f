"""
Mapbox Geocoding Data Models

Request objects, the parsed response and the feature model returned by the
Geocoding v5 API. Response models are frozen dataclasses created with
``from_dict()``; keys the model doesn't know about are kept in ``api_kwargs``.
Raw response shapes are described with TypedDict.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Longitude/latitude pair, dood!"""

    lon: float
    lat: float


class ReverseMode(Enum):
    """How reverse geocode results are sorted when ``limit`` > 1."""

    DISTANCE = "distance"
    """Closest feature first (API default, never sent)"""
    SCORE = "score"
    """High-prominence features may rank above nearer ones"""


@dataclass(slots=True)
class ReverseGeocodeRequest:
    """
    Reverse geocode request. Zero values are left out of the query.
    """

    geoPoint: GeoPoint
    limit: int = 0
    """Maximum number of results. Requires exactly one entry in ``types``."""
    types: List[str] = field(default_factory=list)
    """Feature types filter: country, region, postcode, district, place, locality, neighborhood, address, poi"""
    country: str = ""
    """ISO 3166 alpha 2 country codes separated by commas"""
    language: str = ""
    """IETF language tags separated by commas"""
    reverseMode: ReverseMode = ReverseMode.DISTANCE
    routing: bool = False
    """Request routable points for address features"""


@dataclass(slots=True)
class ForwardGeocodeRequest:
    """
    Forward geocode request.

    ``autocomplete`` and ``fuzzyMatch`` are tri-state: None leaves the API
    default (true) in place, True/False are sent explicitly.
    """

    searchText: str
    """Address, POI name, city, category... Written into the URI as is."""
    autocomplete: Optional[bool] = None
    bbox: List[float] = field(default_factory=list)
    """minLon, minLat, maxLon, maxLat. Ignored unless exactly 4 numbers."""
    country: str = ""
    fuzzyMatch: Optional[bool] = None
    language: str = ""
    limit: int = 0
    """Maximum number of results (API default 5, max 10)"""
    proximity: Optional[GeoPoint] = None
    """Bias results towards this location"""
    routing: bool = False
    types: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RateLimit:
    """Rate limit response headers, passed through as is."""

    interval: str = ""
    limit: str = ""
    reset: str = ""


@dataclass(frozen=True, slots=True)
class Properties:
    """
    Feature properties
    """

    accuracy: str = ""
    """Address accuracy: rooftop, parcel, point, interpolated, intersection, street"""
    short_code: str = ""
    wikidata: str = ""
    api_kwargs: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Properties":
        """Create Properties instance from API response dictionary."""
        return cls(
            accuracy=data.get("accuracy", ""),
            short_code=data.get("short_code", ""),
            wikidata=data.get("wikidata", ""),
            api_kwargs={k: v for k, v in data.items() if k not in {"accuracy", "short_code", "wikidata"}},
        )


@dataclass(frozen=True, slots=True)
class Geometry:
    """
    GeoJSON geometry of a feature
    """

    type: str = ""
    coordinates: List[float] = field(default_factory=list)
    api_kwargs: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Geometry":
        """Create Geometry instance from API response dictionary."""
        return cls(
            type=data.get("type", ""),
            coordinates=[float(v) for v in data.get("coordinates") or []],
            api_kwargs={k: v for k, v in data.items() if k not in {"type", "coordinates"}},
        )


@dataclass(frozen=True, slots=True)
class Context:
    """
    One level of the feature's place hierarchy (neighborhood, postcode, place, region, country)
    """

    id: str = ""
    text: str = ""
    wikidata: str = ""
    short_code: str = ""
    api_kwargs: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Context":
        """Create Context instance from API response dictionary."""
        return cls(
            id=data.get("id", ""),
            text=data.get("text", ""),
            wikidata=data.get("wikidata", ""),
            short_code=data.get("short_code", ""),
            api_kwargs={k: v for k, v in data.items() if k not in {"id", "text", "wikidata", "short_code"}},
        )


@dataclass(frozen=True, slots=True)
class Feature:
    """
    Single place returned by the Geocoding API
    """

    id: str = ""
    type: str = ""
    place_type: List[str] = field(default_factory=list)
    relevance: float = 0.0
    """How well the feature matches the query, 0..1"""
    properties: Properties = field(default_factory=Properties)
    text: str = ""
    place_name: str = ""
    center: List[float] = field(default_factory=list)
    geometry: Geometry = field(default_factory=Geometry)
    address: str = ""
    context: List[Context] = field(default_factory=list)
    bbox: List[float] = field(default_factory=list)
    api_kwargs: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feature":
        """Create Feature instance from API response dictionary."""
        known = {
            "id",
            "type",
            "place_type",
            "relevance",
            "properties",
            "text",
            "place_name",
            "center",
            "geometry",
            "address",
            "context",
            "bbox",
        }
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            place_type=list(data.get("place_type") or []),
            relevance=float(data.get("relevance", 0)),
            properties=Properties.from_dict(data.get("properties") or {}),
            text=data.get("text", ""),
            place_name=data.get("place_name", ""),
            center=[float(v) for v in data.get("center") or []],
            geometry=Geometry.from_dict(data.get("geometry") or {}),
            address=data.get("address", ""),
            context=[Context.from_dict(item) for item in data.get("context") or []],
            bbox=[float(v) for v in data.get("bbox") or []],
            api_kwargs={k: v for k, v in data.items() if k not in known},
        )


class RawReverseResponse(TypedDict, total=False, closed=False):
    """Body of a reverse geocode response, dood!"""

    type: str  # "FeatureCollection"
    query: List[float]  # [lon, lat] echoed back
    features: List[Dict[str, Any]]
    attribution: str


class RawForwardResponse(TypedDict, total=False, closed=False):
    """Body of a forward geocode response, dood!"""

    type: str  # "FeatureCollection"
    query: List[str]  # search text split into tokens
    features: List[Dict[str, Any]]
    attribution: str


@dataclass(frozen=True, slots=True)
class GeocodeResponse:
    """
    Parsed geocode response, same shape for reverse and forward calls
    """

    rateLimit: RateLimit
    rawResp: bytes
    """Raw API response body"""
    features: List[Feature] = field(default_factory=list)
    reverseQuery: Optional[GeoPoint] = None
    """Point echoed by a reverse geocode call"""
    forwardQuery: List[str] = field(default_factory=list)
    """Query tokens echoed by a forward geocode call"""
    type: str = ""
    attribution: str = ""
