"""Shared, synchronised container of outputs.

A parent logger and every child created through :meth:`Logger.new` hold the
same :class:`OutputRegistry`, so adding an output or toggling one is visible to
all of them. Readers iterate over :meth:`OutputRegistry.snapshot` and never
over the live list, which keeps concurrent ``add``/``print`` calls safe.
"""

from __future__ import annotations

import threading
from typing import Iterator

from .output import Output


class OutputRegistry:
    """Ordered outputs; names need not be unique."""

    def __init__(self, *outputs: Output) -> None:
        self._outputs: list[Output] = list(outputs)
        self._lock = threading.RLock()

    def add(self, *outputs: Output) -> None:
        with self._lock:
            self._outputs.extend(outputs)

    def set(self, *outputs: Output) -> None:
        """Replace registered outputs sharing a name (case-insensitive)."""

        with self._lock:
            for replacement in outputs:
                for index, existing in enumerate(self._outputs):
                    if existing.name.lower() == replacement.name.lower():
                        self._outputs[index] = replacement

    def get(self, name: str) -> Output | None:
        """Return the first output registered under *name* (case-insensitive)."""

        with self._lock:
            for output in self._outputs:
                if output.name.lower() == name.lower():
                    return output
        return None

    def snapshot(self) -> tuple[Output, ...]:
        with self._lock:
            return tuple(self._outputs)

    def names(self) -> list[str]:
        return [output.name for output in self.snapshot()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._outputs)

    def __iter__(self) -> Iterator[Output]:
        return iter(self.snapshot())
