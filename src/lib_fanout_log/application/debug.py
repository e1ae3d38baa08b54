"""Environment-driven level overrides and component filtering.

Purpose
-------
Turn the ``SYPL_DEBUG`` and ``SYPL_FILTER`` values into per-write decisions
without any I/O of their own; values arrive through a
:class:`~lib_fanout_log.application.ports.ConfigProvider`.

Contents
    - ``Matcher``: the rule class that produced an override.
    - ``DebugResolver``: parses debug tokens for one (component, output) pair.
    - ``resolve_debug_level``: convenience wrapper returning ``Level | None``.
    - ``component_allowed``: applies the component filter.

Rules
-----
``SYPL_DEBUG`` is a comma-separated list of tokens, each one of:

* ``level`` – class ``L``, applies to every component and output;
* ``output:level`` – class ``OL``, applies to the named output;
* ``component:output:level`` – class ``COL``, applies to one component's
  output.

Within a class the last matching token wins. Across classes precedence is
fixed (``COL`` over ``OL`` over ``L``) no matter where tokens appear. A
matching token naming an unknown level cancels the whole override.
"""

from __future__ import annotations

from enum import Enum

from ..domain.errors import InvalidLevel
from ..domain.level import Level
from .ports import ConfigProvider

DEBUG_ENV_VAR = "SYPL_DEBUG"
"""Comma-separated level override tokens (see module docstring)."""

FILTER_ENV_VAR = "SYPL_FILTER"
"""Comma-separated component names allowed to produce output."""


class Matcher(Enum):
    """Rule class that produced the effective override."""

    NONE = "None"
    L = "Level"
    OL = "OutputLevel"
    COL = "ComponentOutputLevel"


class DebugResolver:
    """Compute the debug override for one (component, output) pair.

    Examples
    --------
    >>> DebugResolver("pod", "console", "info,console:debug,pod:console:trace").level()
    (<Level.TRACE: 6>, <Matcher.COL: 'ComponentOutputLevel'>, True)
    >>> DebugResolver("svc", "console", "info,console:debug,pod:console:trace").level()
    (<Level.DEBUG: 5>, <Matcher.OL: 'OutputLevel'>, True)
    >>> DebugResolver("xyz", "other", "info,console:debug,pod:console:trace").level()
    (<Level.INFO: 3>, <Matcher.L: 'Level'>, True)
    """

    def __init__(self, component_name: str, output_name: str, content: str | None) -> None:
        self.component_name = component_name
        self.output_name = output_name
        self.content = content or ""
        self._matches: dict[Matcher, str] = {}
        self._invalid = False
        self._scan()

    def _scan(self) -> None:
        component = self.component_name.lower()
        output = self.output_name.lower()
        for token in self.content.split(","):
            parts = [part.strip() for part in token.strip().split(":")]
            if not parts[0]:
                continue
            if len(parts) == 1:
                self._record(Matcher.L, parts[0])
            elif len(parts) == 2 and parts[0].lower() == output:
                self._record(Matcher.OL, parts[1])
            elif len(parts) == 3 and parts[0].lower() == component and parts[1].lower() == output:
                self._record(Matcher.COL, parts[2])

    def _record(self, matcher: Matcher, level_name: str) -> None:
        try:
            Level.from_name(level_name)
        except InvalidLevel:
            self._invalid = True
        self._matches[matcher] = level_name

    def match_l(self) -> str:
        """Level name of the last bare-level token, or ``""``."""

        return self._matches.get(Matcher.L, "")

    def match_ol(self) -> str:
        """Level name of the last ``output:level`` token for this output, or ``""``."""

        return self._matches.get(Matcher.OL, "")

    def match_col(self) -> str:
        """Level name of the last ``component:output:level`` token, or ``""``."""

        return self._matches.get(Matcher.COL, "")

    def level(self) -> tuple[Level, Matcher, bool]:
        """Return ``(level, matcher, ok)``.

        ``Level.NONE`` is a usable override, so callers must check ``ok``
        rather than the returned level.
        """

        if not self.content or not self._matches or self._invalid:
            return Level.NONE, Matcher.NONE, False
        resolved = {matcher: Level.from_name(name) for matcher, name in self._matches.items()}
        for matcher in (Matcher.COL, Matcher.OL, Matcher.L):
            if matcher in resolved:
                return resolved[matcher], matcher, True
        return Level.NONE, Matcher.NONE, False  # pragma: no cover - _matches is non-empty


def resolve_debug_level(config: ConfigProvider, component_name: str, output_name: str) -> Level | None:
    """Return the override for the pair, or ``None`` when nothing applies."""

    content = config.lookup(DEBUG_ENV_VAR)
    if not content:
        return None
    level, _, ok = DebugResolver(component_name, output_name, content).level()
    return level if ok else None


def component_allowed(config: ConfigProvider, component_name: str) -> bool:
    """Return ``False`` when ``SYPL_FILTER`` is set and does not list *component_name*.

    >>> class _Env:
    ...     def lookup(self, key):
    ...         return "pod,svc"
    >>> component_allowed(_Env(), "pod"), component_allowed(_Env(), "other")
    (True, False)
    """

    content = config.lookup(FILTER_ENV_VAR)
    if not content:
        return True
    allowed = {name.strip() for name in content.split(",") if name.strip()}
    if not allowed:
        return True
    return component_name in allowed
