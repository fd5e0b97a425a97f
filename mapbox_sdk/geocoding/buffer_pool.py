"""
Pool of reusable text buffers for request URI building.

Buffers are handed out for exclusive use and cleared on release, so concurrent
callers never see each other's content.
"""

import io
import logging
from contextlib import contextmanager
from threading import Lock
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)

# Bound on idle buffers kept around between calls
DEFAULT_MAX_IDLE = 64


class StringBufferPool:
    """Thread-safe pool of ``io.StringIO`` buffers, dood!

    Example:
        >>> pool = StringBufferPool()
        >>> with pool.buffer() as buf:
        ...     buf.write("https://api.mapbox.com")
        ...     uri = buf.getvalue()
    """

    def __init__(self, maxIdle: Optional[int] = DEFAULT_MAX_IDLE):
        """
        Initialize an empty pool.

        Args:
            maxIdle: Maximum number of idle buffers retained after release.
                None keeps every released buffer.
        """
        self.maxIdle = maxIdle
        self._idle: List[io.StringIO] = []
        self._lock = Lock()

    def acquireBuffer(self) -> io.StringIO:
        """Take an idle buffer or create a new one.

        Callers should not assume the buffer is empty; write first, then read
        with ``getvalue()``.
        """
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return io.StringIO()

    def releaseBuffer(self, buf: io.StringIO) -> None:
        """Clear the buffer and put it back into the pool."""
        buf.seek(0)
        buf.truncate(0)
        with self._lock:
            if self.maxIdle is None or len(self._idle) < self.maxIdle:
                self._idle.append(buf)

    @contextmanager
    def buffer(self) -> Iterator[io.StringIO]:
        """Context manager: acquire a buffer, release it on every exit path."""
        buf = self.acquireBuffer()
        try:
            yield buf
        finally:
            self.releaseBuffer(buf)

    def idleCount(self) -> int:
        """Number of buffers currently waiting in the pool."""
        with self._lock:
            return len(self._idle)
