"""Concurrency-safe in-memory destination.

Several outputs (and several threads of one print call) may write to the same
:class:`SafeBuffer`; every operation takes the buffer's own mutex, which is the
only serialisation the pipeline relies on for shared destinations.
"""

from __future__ import annotations

import io
import threading


class SafeBuffer:
    """Mutex-guarded text buffer satisfying the ``Writer`` port.

    Examples
    --------
    >>> buf = SafeBuffer()
    >>> buf.write("hello ")
    6
    >>> _ = buf.write("world")
    >>> str(buf)
    'hello world'
    >>> buf.reset(); buf.getvalue()
    ''
    """

    def __init__(self) -> None:
        self._buffer = io.StringIO()
        self._lock = threading.Lock()
        self.closed = False

    def write(self, data: str) -> int:
        with self._lock:
            if self.closed:
                raise ValueError("I/O operation on closed buffer.")
            return self._buffer.write(data)

    def getvalue(self) -> str:
        with self._lock:
            return self._buffer.getvalue()

    def reset(self) -> None:
        with self._lock:
            self._buffer = io.StringIO()

    def close(self) -> None:
        with self._lock:
            self.closed = True

    def __str__(self) -> str:
        return self.getvalue()
