#!/usr/bin/env python3
"""
Command line geocoder.

    MAPBOX_ACCESS_TOKEN=pk.xxx python -m mapbox_sdk reverse -- -77.05 38.889
    python -m mapbox_sdk --config config.toml forward "Lincoln Memorial" --limit 3

Config file is TOML with optional ``[mapbox]`` and ``[logging]`` sections.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

import httpx

from mapbox_sdk.geocoding import (
    ForwardGeocodeRequest,
    GeocodeResponse,
    GeocoderConfig,
    GeoPoint,
    MapboxError,
    MapboxGeocoder,
    ReverseGeocodeRequest,
)
from mapbox_sdk.geocoding.config import readConfigFile
from mapbox_sdk.logging_utils import enableRequestTrace, initLogging

logger = logging.getLogger(__name__)

DEFAULT_LOGGING: Dict[str, Any] = {"level": "warning", "console": True}


def buildParser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mapbox_sdk", description="Mapbox Geocoding v5 command line client")
    parser.add_argument("--config", help="TOML config file with [mapbox] and [logging] sections")
    parser.add_argument("--verbose", action="store_true", help="Print request and response traces")

    subparsers = parser.add_subparsers(dest="command", required=True)

    reverse = subparsers.add_parser("reverse", help="Coordinates to places")
    reverse.add_argument("lon", type=float)
    reverse.add_argument("lat", type=float)

    forward = subparsers.add_parser("forward", help="Free text to places")
    forward.add_argument("text")
    forward.add_argument("--no-autocomplete", action="store_true")
    forward.add_argument("--no-fuzzy-match", action="store_true")
    forward.add_argument("--proximity", nargs=2, type=float, metavar=("LON", "LAT"))

    for sub in (reverse, forward):
        sub.add_argument("--type", dest="types", action="append", default=[], help="Feature type, repeatable")
        sub.add_argument("--limit", type=int, default=0)
        sub.add_argument("--language", default="")
        sub.add_argument("--country", default="")

    return parser


def loadSettings(configPath: Optional[str]) -> Dict[str, Any]:
    if configPath is None:
        return {}
    return readConfigFile(configPath)


def printResponse(response: GeocodeResponse) -> None:
    for feature in response.features:
        if len(feature.center) == 2:
            print(f"{feature.place_name} ({feature.center[0]}, {feature.center[1]})")
        else:
            print(feature.place_name)
    rateLimit = response.rateLimit
    print(f"rate limit: limit={rateLimit.limit} interval={rateLimit.interval} reset={rateLimit.reset}")


async def run(args: argparse.Namespace, config: GeocoderConfig) -> GeocodeResponse:
    geocoder = MapboxGeocoder(config)

    if args.command == "reverse":
        return await geocoder.reverseGeocode(
            ReverseGeocodeRequest(
                geoPoint=GeoPoint(lon=args.lon, lat=args.lat),
                limit=args.limit,
                types=args.types,
                country=args.country,
                language=args.language,
            )
        )

    proximity = GeoPoint(lon=args.proximity[0], lat=args.proximity[1]) if args.proximity else None
    return await geocoder.forwardGeocode(
        ForwardGeocodeRequest(
            searchText=args.text,
            autocomplete=False if args.no_autocomplete else None,
            fuzzyMatch=False if args.no_fuzzy_match else None,
            country=args.country,
            language=args.language,
            limit=args.limit,
            proximity=proximity,
            types=args.types,
        )
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = buildParser().parse_args(argv)

    try:
        settings = loadSettings(args.config)
    except MapboxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    initLogging(settings.get("logging", DEFAULT_LOGGING))

    config = GeocoderConfig.fromDict(settings.get("mapbox", {}))
    if args.verbose:
        config = config.withLogger(enableRequestTrace())

    try:
        response = asyncio.run(run(args, config))
    except (MapboxError, httpx.HTTPError) as e:
        logger.error(f"Geocode request failed: {e}")
        return 1

    printResponse(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
