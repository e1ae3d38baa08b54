"""Bridge from the standard :mod:`logging` module into a :class:`Logger`.

Libraries that log through :mod:`logging` can be routed into the fan-out
pipeline with :func:`redirect_std_log`. Records are forwarded as plain
messages; timestamps, levels and prefixes are left to the target logger's
processors and formatters.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from ...domain.level import Level

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ...core import Logger

_STDLIB_TO_LEVEL = (
    (logging.CRITICAL, Level.ERROR),
    (logging.ERROR, Level.ERROR),
    (logging.WARNING, Level.WARN),
    (logging.INFO, Level.INFO),
    (logging.DEBUG, Level.DEBUG),
)

# Diagnostics emitted by this package are never forwarded.
_OWN_LOGGER = "lib_fanout_log"


def level_for_record(levelno: int) -> Level:
    """Map a stdlib level number onto :class:`Level`.

    ``CRITICAL`` maps to Error so a bridged record never terminates the process.

    >>> level_for_record(logging.WARNING)
    <Level.WARN: 4>
    >>> level_for_record(logging.CRITICAL)
    <Level.ERROR: 2>
    >>> level_for_record(5)
    <Level.TRACE: 6>
    """

    for threshold, level in _STDLIB_TO_LEVEL:
        if levelno >= threshold:
            return level
    return Level.TRACE


class LoggerHandler(logging.Handler):
    """Forward records to *logger*, at *level* or mapped from the record."""

    def __init__(self, logger: "Logger", level: Level | None = Level.INFO) -> None:
        super().__init__(logging.NOTSET)
        self.target = logger
        self.fixed_level = level
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.split(".", 1)[0] == _OWN_LOGGER:
            return
        try:
            content = self.format(record)
            level = self.fixed_level if self.fixed_level is not None else level_for_record(record.levelno)
            self.target.println(level, content)
        except Exception:
            self.handleError(record)


def redirect_std_log(logger: "Logger", level: Level | None = Level.INFO) -> Callable[[], None]:
    """Route the root :mod:`logging` logger into *logger*.

    Existing root handlers are detached until the returned callable restores
    them together with the previous root level. Pass ``level=None`` to map
    each record's own level instead of using a fixed one.
    """

    if level is Level.FATAL:
        raise ValueError("redirecting the standard library at Fatal would terminate the process on every record")
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    handler = LoggerHandler(logger, level)

    for existing in previous_handlers:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.NOTSET)

    def restore() -> None:
        root.removeHandler(handler)
        for existing in previous_handlers:
            root.addHandler(existing)
        root.setLevel(previous_level)

    return restore
