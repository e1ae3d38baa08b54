"""Deterministic failure helpers for exercising error paths.

Contents
    - ``FAILURE_MESSAGE``: stable message used by every helper here.
    - ``i_should_fail``: raises ``RuntimeError`` so the CLI's exit-code and
      traceback handling can be asserted on.
    - ``failing_processor``: a processor that always raises, for checking that
      a broken chain is reported without stopping the write.
    - ``BrokenWriter``: a destination whose writes always fail.
"""

from __future__ import annotations

from typing import Final

from .adapters.processors.builtin import error_simulator
from .application.processor import Processor

FAILURE_MESSAGE: Final[str] = "i should fail"
"""Stable message asserted on by the CLI and pipeline tests."""


def i_should_fail() -> None:
    """Raise a deterministic :class:`RuntimeError`.

    Examples
    --------
    >>> i_should_fail()
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)


def failing_processor() -> Processor:
    """Return an ``ErrorSimulator`` processor raising :data:`FAILURE_MESSAGE`."""

    return error_simulator(FAILURE_MESSAGE)


class BrokenWriter:
    """Writer raising *exc* (``OSError(FAILURE_MESSAGE)`` by default) on every write."""

    def __init__(self, exc: BaseException | None = None, *, closed: bool = False) -> None:
        self.exc = exc if exc is not None else OSError(FAILURE_MESSAGE)
        self.closed = closed
        self.attempts = 0

    def write(self, data: str) -> int:
        self.attempts += 1
        raise self.exc
