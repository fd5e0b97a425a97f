from abc import ABC, abstractmethod
from typing import Any

from .models import ForwardGeocodeRequest, GeocodeResponse, ReverseGeocodeRequest


class GeocoderInterface(ABC):
    """
    Forward and reverse geocode calls.

    Implemented by MapboxGeocoder; callers can depend on this interface and
    substitute a test double.
    """

    @abstractmethod
    async def reverseGeocode(self, request: ReverseGeocodeRequest, *, context: Any = None) -> GeocodeResponse:
        """
        Convert coordinates into places.

        Args:
            request: Point and optional filters
            context: Per-call context handed to the request logger resolver

        Returns:
            Parsed response with features and rate limit snapshot
        """
        pass

    @abstractmethod
    async def forwardGeocode(self, request: ForwardGeocodeRequest, *, context: Any = None) -> GeocodeResponse:
        """
        Convert free text into places.

        Args:
            request: Search text and optional filters
            context: Per-call context handed to the request logger resolver

        Returns:
            Parsed response with features and rate limit snapshot
        """
        pass
