"""Environment variable adapter.

Purpose
-------
Provide the live configuration channel consumed by the debug resolver and the
component filter. It implements the
:class:`~lib_fanout_log.application.ports.ConfigProvider` port.

Key behaviours
--------------
* Reads on every lookup; nothing is cached across print calls, so exporting
  ``SYPL_DEBUG`` in a running process takes effect on the next write.
* Accepts an injected mapping for deterministic tests.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...application.debug import DEBUG_ENV_VAR, FILTER_ENV_VAR
from ...observability import log_debug


class EnvironmentProvider:
    """Look up configuration values in the process environment."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the provider with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`, read live.
        """

        self._environ = environ if environ is not None else os.environ

    def lookup(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None`` when unset.

        Examples
        --------
        >>> provider = EnvironmentProvider(environ={'SYPL_DEBUG': 'console:trace'})
        >>> provider.lookup('SYPL_DEBUG')
        'console:trace'
        >>> provider.lookup('SYPL_FILTER') is None
        True
        """

        value = self._environ.get(key)
        if value is not None:
            log_debug("env_lookup", key=key, value=value)
        return value


__all__ = [
    "DEBUG_ENV_VAR",
    "FILTER_ENV_VAR",
    "EnvironmentProvider",
]
