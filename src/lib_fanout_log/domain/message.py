"""Message envelope and its value objects.

Purpose
-------
Model what travels through an output: the immutable-original/mutable-processed
:class:`Content` pair, the trailing line-break bookkeeping
(:class:`LineBreaker`), the routing and structured metadata carried by
:class:`Message`, and the per-call :class:`Options` bag.

Contents
--------
* :data:`KNOWN_LINE_BREAKERS` – suffixes removed by :meth:`Message.strip`.
* :class:`Content` – original/processed content pair.
* :class:`LineBreaker` – ordered record of stripped control characters.
* :class:`Message` – envelope consumed by outputs and processors.
* :class:`Options` – transient parameter bag threaded through print calls.
* :class:`MessageToOutput` – ``(output_name, level, content)`` triple.
* :func:`copy_fields` – merge helper for structured fields.

System Role
-----------
The logger builds one :class:`Message` per print call and hands every matching
output its own :meth:`Message.copy`, so no processor chain can observe another
output's in-flight mutations.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, NamedTuple

from .level import Flag, Level, Status

Fields = dict[str, Any]

KNOWN_LINE_BREAKERS: tuple[str, ...] = ("\n", "\r")


def copy_fields(src: Mapping[str, Any] | None, dst: Fields | None = None) -> Fields:
    """Copy keys and values from *src* into *dst* (created when ``None``).

    >>> copy_fields({"a": 1}, {"b": 2})
    {'b': 2, 'a': 1}
    """

    target: Fields = {} if dst is None else dst
    if src:
        target.update(src)
    return target


class Content:
    """Original content plus the processed rendition mutated by processors.

    >>> c = Content("hello")
    >>> c.set_processed("HELLO")
    >>> c.get_original(), c.get_processed()
    ('hello', 'HELLO')
    """

    __slots__ = ("_original", "processed")

    def __init__(self, original: str) -> None:
        self._original = original
        self.processed = original

    @property
    def original(self) -> str:
        return self._original

    def get_original(self) -> str:
        return self._original

    def get_processed(self) -> str:
        return self.processed

    def set_processed(self, content: str) -> None:
        self.processed = content

    def __repr__(self) -> str:
        return f"Content(original={self._original!r}, processed={self.processed!r})"


@dataclass
class LineBreaker:
    """Bookkeeping for trailing line breaks removed before processing."""

    control_chars: list[str] = field(default_factory=list)
    known_line_breakers: tuple[str, ...] = KNOWN_LINE_BREAKERS
    status: Status = Status.ENABLED

    def clone(self) -> "LineBreaker":
        return LineBreaker(list(self.control_chars), self.known_line_breakers, self.status)


@dataclass
class Options:
    """Per-call parameter bag selecting targets, flag, tags and fields.

    Consumed, not owned, by the logger and the message it builds.
    """

    flag: Flag = Flag.NONE
    outputs_names: list[str] = field(default_factory=list)
    processors_names: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    fields: Fields = field(default_factory=dict)


class MessageToOutput(NamedTuple):
    """One entry of :meth:`Logger.print_messages_to_outputs`."""

    output_name: str
    level: Level
    content: str


class Message:
    """Envelope combining content, flag, tags, level and routing metadata.

    ``id`` and ``timestamp`` are generated once at construction and preserved
    by :meth:`copy`; the original content never changes.

    Examples
    --------
    >>> msg = Message(Level.INFO, "Test 1\\n\\r\\n")
    >>> msg.strip()
    >>> msg.content.processed, msg.line_breaker.control_chars
    ('Test 1', ['\\n', '\\r', '\\n'])
    >>> msg.restore()
    >>> msg.content.processed == "Test 1\\n\\r\\n"
    True
    """

    def __init__(self, level: Level, content: str) -> None:
        self.content = Content(content)
        self.level = level
        self.flag = Flag.NONE
        self.fields: Fields = {}
        self.id = str(uuid.uuid4())
        self.timestamp = datetime.now().astimezone()
        self.component_name = ""
        self.output_name = ""
        self.outputs_names: list[str] = []
        self.processor_name = ""
        self.processors_names: list[str] = []
        self.line_breaker = LineBreaker()
        self._tags: set[str] = set()

    def __str__(self) -> str:
        return self.content.processed

    def __repr__(self) -> str:
        return (
            f"Message(id={self.id!r}, level={self.level!s}, flag={self.flag!s}, "
            f"component={self.component_name!r}, output={self.output_name!r}, content={self.content.processed!r})"
        )

    # Tags

    def add_tags(self, *tags: str) -> None:
        self._tags.update(tags)

    def contain_tag(self, tag: str) -> bool:
        return tag in self._tags

    def delete_tag(self, tag: str) -> None:
        self._tags.discard(tag)

    def get_tags(self) -> list[str]:
        return sorted(self._tags)

    # Line breaks

    def strip(self) -> None:
        """Remove every known trailing line break, recording each one.

        Breakers are peeled right to left until none of
        :data:`KNOWN_LINE_BREAKERS` remains as a suffix. Calling again is a
        no-op.
        """

        breaker = self.line_breaker
        if breaker.status is not Status.ENABLED:
            return
        stripped = True
        while stripped:
            stripped = False
            for known in breaker.known_line_breakers:
                processed = self.content.processed
                if known and processed.endswith(known):
                    self.content.processed = processed[: -len(known)]
                    breaker.control_chars.append(known)
                    stripped = True
                    break

    def restore(self) -> None:
        """Re-append the stripped breaks so the original tail is reproduced.

        ``control_chars`` lists breaks in removal order (right to left), so
        they are re-attached last-removed first.

        >>> msg = Message(Level.INFO, "X\\r\\n")
        >>> msg.strip()
        >>> msg.restore()
        >>> msg.content.processed == "X\\r\\n"
        True
        """

        breaker = self.line_breaker
        if breaker.status is not Status.ENABLED:
            return
        self.content.processed += "".join(reversed(breaker.control_chars))

    # Options

    def apply_options(self, options: Options) -> "Message":
        """Merge a per-call :class:`Options` bag into this message."""

        self.flag = options.flag
        self.add_tags(*options.tags)
        self.fields = copy_fields(options.fields, dict(self.fields))
        if options.outputs_names:
            self.outputs_names = list(options.outputs_names)
        if options.processors_names:
            self.processors_names = list(options.processors_names)
        return self

    def copy(self) -> "Message":
        """Return a copy owning its own tag set and line-breaker state."""

        clone = Message(self.level, self.content.original)
        clone.id = self.id
        clone.timestamp = self.timestamp
        clone.flag = self.flag
        clone.fields = dict(self.fields)
        clone.component_name = self.component_name
        clone.output_name = self.output_name
        clone.outputs_names = list(self.outputs_names)
        clone.processor_name = self.processor_name
        clone.processors_names = list(self.processors_names)
        clone.line_breaker = self.line_breaker.clone()
        clone.add_tags(*self._tags)
        return clone


def new_message(level: Level, content: str, *, tags: Iterable[str] = (), fields: Mapping[str, Any] | None = None) -> Message:
    """Build a :class:`Message` for :meth:`Logger.print_message`."""

    message = Message(level, content)
    message.add_tags(*tags)
    message.fields = copy_fields(fields)
    return message
