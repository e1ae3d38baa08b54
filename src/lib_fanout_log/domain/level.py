"""Level, flag, and status enumerations.

Purpose
-------
Define the small closed vocabularies every other layer speaks: the verbosity
ladder (:class:`Level`), per-message behaviour overrides (:class:`Flag`), and
the on/off switch shared by outputs, processors and loggers (:class:`Status`).

System Role
-----------
Pure values without I/O. The output write protocol compares levels by their
declaration order, so ``Level.DEBUG`` as a max level also lets ``INFO``,
``WARN``, ``ERROR`` and ``FATAL`` through while ``NONE`` is never printed.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Iterable

from .errors import InvalidLevel

_LEVEL_NAMES: tuple[str, ...] = ("None", "Fatal", "Error", "Info", "Warn", "Debug", "Trace")


class Level(IntEnum):
    """Ordered verbosity ladder.

    Examples
    --------
    >>> Level.INFO <= Level.DEBUG
    True
    >>> str(Level.WARN)
    'Warn'
    >>> Level.from_name("trace")
    <Level.TRACE: 6>
    """

    NONE = 0
    FATAL = 1
    ERROR = 2
    INFO = 3
    WARN = 4
    DEBUG = 5
    TRACE = 6

    def __str__(self) -> str:
        return _LEVEL_NAMES[self.value]

    def __format__(self, format_spec: str) -> str:
        # IntEnum formats as the integer otherwise.
        return format(str(self), format_spec)

    @classmethod
    def from_name(cls, name: str) -> "Level":
        """Resolve *name* case-insensitively or raise :class:`InvalidLevel`."""

        lowered = name.strip().lower()
        for member in cls:
            if str(member).lower() == lowered:
                return member
        raise InvalidLevel(f"invalid level: {name!r}. Available: {', '.join(_LEVEL_NAMES)}")

    @classmethod
    def names(cls) -> list[str]:
        """Return the display names of all levels in declaration order."""

        return list(_LEVEL_NAMES)


def levels_to_string(levels: Iterable[Level]) -> str:
    """Join level names with commas.

    >>> levels_to_string([Level.FATAL, Level.ERROR])
    'Fatal,Error'
    """

    return ",".join(str(level) for level in levels)


class Flag(Enum):
    """Per-message override of the default level gating."""

    NONE = 0
    FORCE = 1
    MUTE = 2
    SKIP = 3
    SKIP_AND_FORCE = 4
    SKIP_AND_MUTE = 5

    def __str__(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def skips_processing(self) -> bool:
        """``True`` when processors and the formatter must be bypassed."""

        return self in (Flag.SKIP, Flag.SKIP_AND_FORCE)

    @property
    def forces_write(self) -> bool:
        """``True`` when the message is written regardless of level gating."""

        return self in (Flag.FORCE, Flag.SKIP_AND_FORCE)

    @classmethod
    def from_name(cls, name: str) -> "Flag":
        """Resolve ``"skip-and-force"``, ``"SkipAndForce"`` or ``"SKIP_AND_FORCE"``."""

        normalised = name.strip().replace("-", "").replace("_", "").lower()
        for member in cls:
            if member.name.replace("_", "").lower() == normalised:
                return member
        raise ValueError(f"invalid flag: {name!r}")


class Status(Enum):
    """Enabled/disabled state of an output, processor, or logger."""

    DISABLED = 0
    ENABLED = 1

    def __str__(self) -> str:
        return self.name.capitalize()
