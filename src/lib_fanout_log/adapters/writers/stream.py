"""Late-binding writers for the process's standard streams."""

from __future__ import annotations

import sys


class StandardStream:
    """Forward writes to ``sys.<name>`` as it is at write time.

    Resolving the stream per write keeps outputs working when the stream is
    swapped after the output was built (``click.testing.CliRunner``, pytest's
    ``capsys``, ``contextlib.redirect_stdout``).

    >>> StandardStream("stdout").name
    'stdout'
    """

    def __init__(self, name: str) -> None:
        if name not in ("stdout", "stderr"):
            raise ValueError(f"unsupported stream: {name!r}")
        self.name = name

    @property
    def stream(self):
        return getattr(sys, self.name)

    @property
    def closed(self) -> bool:
        return bool(getattr(self.stream, "closed", False))

    def write(self, data: str) -> int:
        stream = self.stream
        written = stream.write(data)
        stream.flush()
        return written


def stdout() -> StandardStream:
    return StandardStream("stdout")


def stderr() -> StandardStream:
    return StandardStream("stderr")
