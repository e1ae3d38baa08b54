"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the pipeline depends on so outputs, the logger
and the debug resolver never reach for concrete adapters.

Contents
--------
* :class:`Writer` – destination accepting processed content.
* :class:`ConfigProvider` – key lookup used for ``SYPL_DEBUG``/``SYPL_FILTER``.
* :class:`ProcessorPort` – named, switchable unit of work over a message.

System Role
-----------
These protocols enforce Dependency Inversion. Console streams, files, the
rotating writer and :class:`~lib_fanout_log.adapters.writers.buffer.SafeBuffer`
all satisfy :class:`Writer`; :class:`~lib_fanout_log.adapters.env.default.EnvironmentProvider`
satisfies :class:`ConfigProvider`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain.level import Status
from ..domain.message import Message


@runtime_checkable
class Writer(Protocol):
    """Accept processed content for a destination.

    Why
    ----
    The pipeline needs only one capability from a destination. Writers that
    are shared across outputs must serialise their own writes.
    """

    def write(self, data: str) -> int | None:
        """Write *data*, returning the number of characters written (if known)."""


@runtime_checkable
class ConfigProvider(Protocol):
    """Look up live configuration values.

    Why
    ----
    Replaces direct process-environment reads so tests can inject values
    without mutating global state.
    """

    def lookup(self, key: str) -> str | None:
        """Return the value stored under *key* or ``None`` when unset."""


@runtime_checkable
class ProcessorPort(Protocol):
    """Named, enable/disable-able unit of work over a :class:`Message`."""

    name: str
    status: Status

    def run(self, message: Message) -> None:
        """Process *message* in place; raise to report a failure."""
