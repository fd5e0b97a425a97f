"""
Unit tests for Mapbox Geocoder Client

This module contains unit tests for the MapboxGeocoder class, testing URI
rendering, filter handling, response parsing, error handling, rate limit
headers and logger usage.
"""

import json
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from tests.fixtures.mapbox_responses import FORWARD_RESPONSE_BODY, RATE_LIMIT_HEADERS, REVERSE_RESPONSE_BODY

from .buffer_pool import StringBufferPool
from .client import MapboxGeocoder
from .config import GeocoderConfig
from .exceptions import GeocodeParseError, GeocodeQueryError, GeocodeStatusError
from .models import ForwardGeocodeRequest, GeoPoint, ReverseGeocodeRequest, ReverseMode

POINT = GeoPoint(lon=-77.0501629, lat=38.889)
REVERSE_PREFIX = "https://api.mapbox.com/geocoding/v5/mapbox.places/-77.050163,38.889000.json?access_token=tok"


@pytest.fixture(autouse=True)
def noEnvToken(monkeypatch):
    monkeypatch.delenv("MAPBOX_ACCESS_TOKEN", raising=False)


def makeGeocoder(
    body: bytes = REVERSE_RESPONSE_BODY,
    statusCode: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[MapboxGeocoder, MagicMock, List[httpx.Request]]:
    """Create geocoder with mock transport and mock logger."""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(statusCode, content=body, headers=headers if headers is not None else RATE_LIMIT_HEADERS)

    mockLogger = MagicMock()
    config = (
        GeocoderConfig()
        .withAccessToken("tok")
        .withHttpClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        .withLogger(mockLogger)
    )
    return MapboxGeocoder(config), mockLogger, requests


def loggedRequestUri(mockLogger: MagicMock) -> str:
    """URI passed to the first debug trace."""
    return mockLogger.debug.call_args_list[0].args[1]


def renderedParams(uri: str) -> List[str]:
    """Filter parameters after the access token fragment."""
    return uri.split("&")[1:]


# Reverse geocoding


@pytest.mark.asyncio
async def test_reverse_geocode_success():
    """Test reverse geocode parses sample body, dood!"""
    geocoder, _, requests = makeGeocoder()

    resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert resp.reverseQuery == GeoPoint(lon=-77.05, lat=38.889)
    assert len(resp.features) == len(json.loads(REVERSE_RESPONSE_BODY)["features"])
    assert resp.features[0].place_name.startswith("2 Lincoln Memorial Circle SW")
    assert resp.rawResp == REVERSE_RESPONSE_BODY
    assert resp.forwardQuery == []
    assert resp.type == "FeatureCollection"
    assert resp.attribution.startswith("NOTICE")

    assert len(requests) == 1
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/geocoding/v5/mapbox.places/-77.050163,38.889000.json"
    assert requests[0].url.params["access_token"] == "tok"


@pytest.mark.asyncio
async def test_reverse_geocode_zero_filters_render_nothing():
    """Test zero-value filters are left out of the query, dood!"""
    geocoder, mockLogger, _ = makeGeocoder()

    await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert loggedRequestUri(mockLogger) == REVERSE_PREFIX


@pytest.mark.asyncio
async def test_reverse_geocode_all_filters():
    """Test every reverse filter is rendered, dood!"""
    geocoder, mockLogger, _ = makeGeocoder()

    await geocoder.reverseGeocode(
        ReverseGeocodeRequest(
            geoPoint=POINT,
            limit=3,
            types=["address"],
            country="us",
            language="en",
            reverseMode=ReverseMode.SCORE,
            routing=True,
        )
    )

    uri = loggedRequestUri(mockLogger)
    assert uri.startswith(REVERSE_PREFIX)
    assert sorted(renderedParams(uri)) == sorted(
        ["limit=3", "types=address", "country=us", "language=en", "reverseMode=score", "routing=true"]
    )


@pytest.mark.asyncio
async def test_reverse_geocode_single_type():
    """Test single type is rendered once as plain value, dood!"""
    geocoder, mockLogger, _ = makeGeocoder()

    await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT, types=["poi"]))

    assert loggedRequestUri(mockLogger) == REVERSE_PREFIX + "&types=poi"


@pytest.mark.asyncio
async def test_reverse_geocode_multiple_types():
    """Test several types are sent as one comma joined parameter, dood!"""
    geocoder, mockLogger, requests = makeGeocoder()

    await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT, types=["address", "poi"]))

    assert loggedRequestUri(mockLogger) == REVERSE_PREFIX + "&types=address,poi"
    assert requests[0].url.params.get_list("types") == ["address,poi"]


@pytest.mark.asyncio
async def test_reverse_geocode_non_200():
    """Test 429 gives error with status code and body, dood!"""
    body = b'{"message":"Too Many Requests"}'
    geocoder, _, _ = makeGeocoder(body=body, statusCode=429)

    with pytest.raises(GeocodeStatusError) as excInfo:
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert excInfo.value.statusCode == 429
    assert excInfo.value.uri == REVERSE_PREFIX
    assert excInfo.value.body == body.decode()
    assert "429" in str(excInfo.value)
    assert "Too Many Requests" in str(excInfo.value)


@pytest.mark.asyncio
async def test_reverse_geocode_bad_query_len():
    """Test query echo with one element is rejected, dood!"""
    geocoder, _, _ = makeGeocoder(body=b'{"features": [], "query": [1.0]}')

    with pytest.raises(GeocodeQueryError, match="unexpected len of query coordinates") as excInfo:
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert '"query": [1.0]' in str(excInfo.value)


@pytest.mark.asyncio
async def test_reverse_geocode_missing_query():
    """Test missing query echo is rejected, dood!"""
    geocoder, _, _ = makeGeocoder(body=b'{"features": []}')

    with pytest.raises(GeocodeQueryError):
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))


@pytest.mark.asyncio
async def test_reverse_geocode_invalid_json():
    """Test undecodable body gives parse error wrapping JSON error, dood!"""
    geocoder, _, _ = makeGeocoder(body=b"<html>oops</html>")

    with pytest.raises(GeocodeParseError) as excInfo:
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert isinstance(excInfo.value.__cause__, json.JSONDecodeError)
    assert excInfo.value.error is excInfo.value.__cause__
    assert "<html>oops</html>" in str(excInfo.value)


@pytest.mark.asyncio
async def test_reverse_geocode_wrong_shape():
    """Test JSON of the wrong shape gives parse error, dood!"""
    geocoder, _, _ = makeGeocoder(body=b'{"features": {"id": 1}, "query": [1.0, 2.0]}')

    with pytest.raises(GeocodeParseError):
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    geocoder, _, _ = makeGeocoder(body=b"[1, 2]")

    with pytest.raises(GeocodeParseError):
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        b'{"features": [], "query": "12"}',
        b'{"features": [], "query": [true, false]}',
        b'{"features": [], "query": ["-77.05", "38.889"]}',
        b'{"features": [], "query": {"lon": 1.0, "lat": 2.0}}',
    ],
)
async def test_reverse_geocode_query_not_numbers(body):
    """Test query echo must be a list of numbers, dood!"""
    geocoder, _, _ = makeGeocoder(body=body)

    with pytest.raises(GeocodeParseError) as excInfo:
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert isinstance(excInfo.value.__cause__, TypeError)


@pytest.mark.asyncio
async def test_reverse_geocode_integer_query():
    """Test integer coordinates in query echo are accepted, dood!"""
    geocoder, _, _ = makeGeocoder(body=b'{"features": [], "query": [-77, 38]}')

    resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert resp.reverseQuery == GeoPoint(lon=-77.0, lat=38.0)


@pytest.mark.asyncio
async def test_transport_error_propagated():
    """Test transport failures reach the caller unchanged, dood!"""
    error = httpx.ConnectError("connection refused")

    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    pool = StringBufferPool()
    config = GeocoderConfig().withHttpClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    geocoder = MapboxGeocoder(config, bufferPool=pool)

    with pytest.raises(httpx.ConnectError) as excInfo:
        await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert excInfo.value is error
    assert pool.idleCount() == 1


@pytest.mark.asyncio
async def test_buffer_released_on_errors():
    """Test buffer is back in the pool after a failed call, dood!"""
    geocoder, _, _ = makeGeocoder(body=b"nope", statusCode=500)
    pool = geocoder._bufferPool

    for _ in range(3):
        with pytest.raises(GeocodeStatusError):
            await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert pool.idleCount() == 1


# Forward geocoding


@pytest.mark.asyncio
async def test_forward_geocode_success():
    """Test forward geocode parses query tokens and features, dood!"""
    geocoder, mockLogger, requests = makeGeocoder(body=FORWARD_RESPONSE_BODY)

    resp = await geocoder.forwardGeocode(ForwardGeocodeRequest(searchText="Lincoln"))

    assert resp.forwardQuery == ["lincoln", "memorial"]
    assert resp.reverseQuery is None
    assert len(resp.features) == 1
    assert resp.features[0].relevance == 0.98
    assert resp.features[0].properties.api_kwargs == {"landmark": True, "category": "monument"}
    assert loggedRequestUri(mockLogger) == (
        "https://api.mapbox.com/geocoding/v5/mapbox.places/Lincoln.json?access_token=tok"
    )
    assert requests[0].url.path == "/geocoding/v5/mapbox.places/Lincoln.json"


@pytest.mark.asyncio
async def test_forward_geocode_all_filters():
    """Test every forward filter is rendered, dood!"""
    geocoder, mockLogger, _ = makeGeocoder(body=FORWARD_RESPONSE_BODY)

    await geocoder.forwardGeocode(
        ForwardGeocodeRequest(
            searchText="Lincoln",
            autocomplete=False,
            bbox=[-77.1, 38.8, -76.9, 39.0],
            country="us",
            fuzzyMatch=True,
            language="en",
            limit=5,
            proximity=POINT,
            routing=True,
            types=["poi", "address"],
        )
    )

    assert sorted(renderedParams(loggedRequestUri(mockLogger))) == sorted(
        [
            "autocomplete=false",
            "bbox=-77.100000,38.800000,-76.900000,39.000000",
            "country=us",
            "fuzzymatch=true",
            "language=en",
            "limit=5",
            "proximity=-77.050163,38.889000",
            "routing=true",
            "types=poi,address",
        ]
    )


@pytest.mark.asyncio
async def test_forward_geocode_zero_filters_render_nothing():
    """Test unset tri-state flags and empty filters are left out, dood!"""
    geocoder, mockLogger, _ = makeGeocoder(body=FORWARD_RESPONSE_BODY)

    await geocoder.forwardGeocode(ForwardGeocodeRequest(searchText="Lincoln", bbox=[1.0, 2.0]))

    assert renderedParams(loggedRequestUri(mockLogger)) == []


@pytest.mark.asyncio
async def test_forward_geocode_non_200():
    """Test forward call reports status code and body, dood!"""
    geocoder, _, _ = makeGeocoder(body=b'{"message":"Not Authorized - Invalid Token"}', statusCode=401)

    with pytest.raises(GeocodeStatusError, match="statusCode 401") as excInfo:
        await geocoder.forwardGeocode(ForwardGeocodeRequest(searchText="Lincoln"))

    assert "Invalid Token" in excInfo.value.body


@pytest.mark.asyncio
async def test_forward_geocode_does_not_check_query_len():
    """Test forward query echo may have any length, dood!"""
    geocoder, _, _ = makeGeocoder(body=b'{"features": [], "query": ["one", "two", "three"]}')

    resp = await geocoder.forwardGeocode(ForwardGeocodeRequest(searchText="one two three"))

    assert resp.forwardQuery == ["one", "two", "three"]
    assert resp.features == []


# Rate limits, config and logging


@pytest.mark.asyncio
async def test_rate_limit_headers():
    """Test rate limit headers are copied into the response, dood!"""
    geocoder, _, _ = makeGeocoder()

    resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert resp.rateLimit.interval == "60"
    assert resp.rateLimit.limit == "600"
    assert resp.rateLimit.reset == "1700000000"


@pytest.mark.asyncio
async def test_missing_rate_limit_headers():
    """Test missing headers give empty values, dood!"""
    geocoder, _, _ = makeGeocoder(headers={})

    resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert resp.rateLimit.interval == ""
    assert resp.rateLimit.limit == ""
    assert resp.rateLimit.reset == ""


def test_config_prepared_once(monkeypatch):
    """Test URL parts are frozen at construction, dood!"""
    geocoder = MapboxGeocoder(GeocoderConfig().withAccessToken("tok").withRootApi("http://localhost:9000"))

    assert geocoder.config.geocodeApiUrl == "http://localhost:9000/geocoding/v5/mapbox.places/"
    assert geocoder.config.accessTokenGetValue == "?access_token=tok"

    monkeypatch.setenv("MAPBOX_ACCESS_TOKEN", "later")
    assert geocoder.config.accessTokenGetValue == "?access_token=tok"


def test_env_token_applied_at_construction(monkeypatch):
    """Test MAPBOX_ACCESS_TOKEN replaces explicit token, dood!"""
    monkeypatch.setenv("MAPBOX_ACCESS_TOKEN", "env-token")

    geocoder = MapboxGeocoder(GeocoderConfig().withAccessToken("tok"))

    assert geocoder.config.accessTokenGetValue == "?access_token=env-token"


@pytest.mark.asyncio
async def test_request_and_response_traced():
    """Test request URI and response body are traced, dood!"""
    geocoder, mockLogger, _ = makeGeocoder()

    await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

    assert mockLogger.debug.call_count == 2
    requestCall, responseCall = mockLogger.debug.call_args_list
    assert requestCall.args == ("mapbox_sdk: reverse geocode request %s", REVERSE_PREFIX)
    assert responseCall.args == ("mapbox_sdk: reverse geocode response %s", REVERSE_RESPONSE_BODY.decode())


@pytest.mark.asyncio
async def test_request_logger_gets_context():
    """Test request logger resolver receives the call context, dood!"""
    geocoder, staticLogger, _ = makeGeocoder()
    requestLogger = MagicMock()
    resolver = MagicMock(return_value=requestLogger)
    geocoder = MapboxGeocoder(geocoder.config.withRequestLogger(resolver))
    context = {"requestId": "42"}

    await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT), context=context)

    resolver.assert_called_with(context)
    assert requestLogger.debug.call_count == 2
    staticLogger.debug.assert_not_called()


@pytest.mark.asyncio
async def test_default_http_client_session():
    """Test a short-lived httpx session is used without injected client, dood!"""
    geocoder = MapboxGeocoder(GeocoderConfig().withAccessToken("tok").withRequestTimeout(7))

    with patch("httpx.AsyncClient") as mock_client:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = REVERSE_RESPONSE_BODY
        mock_response.headers = httpx.Headers(RATE_LIMIT_HEADERS)
        mock_client.return_value.__aenter__.return_value.send = AsyncMock(return_value=mock_response)

        resp = await geocoder.reverseGeocode(ReverseGeocodeRequest(geoPoint=POINT))

        mock_client.assert_called_once_with(timeout=7)
        sentRequest = mock_client.return_value.__aenter__.return_value.send.call_args.args[0]
        assert sentRequest.method == "GET"
        assert resp.rateLimit.limit == "600"
        assert resp.reverseQuery == GeoPoint(lon=-77.05, lat=38.889)
