"""Named, switchable units of work over a message.

Processors mutate ``message.content.processed`` in place (or adjust the flag
and tags). Formatters share the exact same shape and are plain
:class:`Processor` instances.
"""

from __future__ import annotations

from typing import Callable

from ..domain.level import Status
from ..domain.message import Message

RunFunc = Callable[[Message], None]


class Processor:
    """Wrap *func* with a name and an enabled/disabled status.

    Examples
    --------
    >>> from lib_fanout_log.domain.level import Level
    >>> shout = Processor("Shout", lambda m: m.content.set_processed(m.content.processed.upper()))
    >>> msg = Message(Level.INFO, "hi")
    >>> shout.run(msg); msg.content.processed
    'HI'
    >>> shout.disable(); shout.run(msg)
    """

    def __init__(self, name: str, func: RunFunc) -> None:
        self.name = name
        self.status = Status.ENABLED
        self._func = func

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Processor(name={self.name!r}, status={self.status!s})"

    def run(self, message: Message) -> None:
        """Invoke the wrapped function unless disabled; exceptions propagate."""

        if self.status is not Status.ENABLED:
            return
        self._func(message)

    def enable(self) -> None:
        self.status = Status.ENABLED

    def disable(self) -> None:
        self.status = Status.DISABLED

    @property
    def enabled(self) -> bool:
        return self.status is Status.ENABLED
