"""
Query string encoder writing ``&key=value`` pairs into a reusable buffer.
"""

from typing import IO, Dict, List, Optional

from .constants import AMPERSAND_MARK, COORDINATE_PRECISION, EQUAL_MARK


def encodeValues(buf: IO[str], values: Dict[str, str], valuesMulti: Optional[Dict[str, List[str]]] = None) -> None:
    """Append every key/value pair to the buffer, dood!

    Works like ``urllib.parse.urlencode`` but writes straight into ``buf``
    and does no percent-encoding: keys and values are written verbatim.

    Args:
        buf: Writable text buffer, usually one acquired from StringBufferPool
        values: Single-value parameters
        valuesMulti: Parameters repeated once per list element
    """
    for key, value in values.items():
        encodeKeyValue(buf, key, value)

    if valuesMulti:
        for key, multi in valuesMulti.items():
            for value in multi:
                encodeKeyValue(buf, key, value)


def encodeKeyValue(buf: IO[str], key: str, value: str) -> None:
    """Append a single ``&key=value`` pair."""
    buf.write(AMPERSAND_MARK)
    buf.write(key)
    buf.write(EQUAL_MARK)
    buf.write(value)


def formatCoordinate(value: float) -> str:
    """Render a coordinate with exactly 6 digits after the point, no exponent."""
    return f"{value:.{COORDINATE_PRECISION}f}"
