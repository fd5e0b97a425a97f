"""
Mapbox Geocoding API Constants

Query parameter names, response header names and defaults used by the
geocoding client.
"""

# API defaults
DEFAULT_ROOT_API = "https://api.mapbox.com"
DEFAULT_GEOCODE_ENDPOINT = "mapbox.places"
DEFAULT_TIMEOUT = 10
GEOCODE_API_PATH = "/geocoding/v5/"

# Environment
ENV_ACCESS_TOKEN = "MAPBOX_ACCESS_TOKEN"

# Query parameters
PARAM_ACCESS_TOKEN = "access_token"
PARAM_LIMIT = "limit"
PARAM_TYPES = "types"
PARAM_COUNTRY = "country"
PARAM_LANGUAGE = "language"
PARAM_REVERSE_MODE = "reverseMode"
PARAM_AUTOCOMPLETE = "autocomplete"
PARAM_FUZZY_MATCH = "fuzzymatch"
PARAM_BBOX = "bbox"
PARAM_PROXIMITY = "proximity"
PARAM_ROUTING = "routing"

TRUE_STR = "true"
FALSE_STR = "false"

# URI building blocks
SLASH = "/"
COMMA = ","
QUESTION_MARK = "?"
EQUAL_MARK = "="
AMPERSAND_MARK = "&"
RESPONSE_FORMAT_JSON = ".json"

# Coordinates are always written with 6 digits after the point
COORDINATE_PRECISION = 6

# Rate limit response headers
HEADER_RATE_LIMIT_INTERVAL = "X-Rate-Limit-Interval"
HEADER_RATE_LIMIT_LIMIT = "X-Rate-Limit-Limit"
HEADER_RATE_LIMIT_RESET = "X-Rate-Limit-Reset"

HTTP_GET = "GET"
HTTP_STATUS_OK = 200

# Prefix for every trace written through the injected logger
LOG_PREFIX = "mapbox_sdk:"
