"""
Pytest configuration and common fixtures for mapbox_sdk tests.

All fixtures follow camelCase naming convention.
"""

from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from tests.fixtures.mapbox_responses import FORWARD_RESPONSE_BODY, RATE_LIMIT_HEADERS, REVERSE_RESPONSE_BODY


@pytest.fixture(autouse=True)
def clearAccessTokenEnv(monkeypatch):
    """Keep a developer's MAPBOX_ACCESS_TOKEN out of the tests."""
    monkeypatch.delenv("MAPBOX_ACCESS_TOKEN", raising=False)


@pytest.fixture
def reverseResponseBody() -> str:
    return REVERSE_RESPONSE_BODY


@pytest.fixture
def forwardResponseBody() -> str:
    return FORWARD_RESPONSE_BODY


@pytest.fixture
def recordedRequests() -> List[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def makeHttpClient(recordedRequests) -> Callable[..., httpx.AsyncClient]:
    """
    Factory for httpx.AsyncClient backed by httpx.MockTransport.

    Example:
        def testSomething(makeHttpClient):
            client = makeHttpClient(body=b"{}", statusCode=500)
    """

    def factory(
        body: Union[str, bytes] = REVERSE_RESPONSE_BODY,
        statusCode: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            recordedRequests.append(request)
            return httpx.Response(
                statusCode,
                content=body,
                headers=headers if headers is not None else RATE_LIMIT_HEADERS,
            )

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
