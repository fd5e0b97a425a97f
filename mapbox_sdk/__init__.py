"""
mapbox_sdk - async Python client for Mapbox web APIs, dood!

Currently covers the Geocoding v5 API, see ``mapbox_sdk.geocoding``.
"""

__version__ = "0.1.0"
