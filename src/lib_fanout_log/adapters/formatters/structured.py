"""Structured formatters.

Formatters are ordinary processors that an output runs last, after its
processor chain and only when the message is about to be written. Both
formatters here render the same keys:

``component``, ``output``, ``level`` (lower case), ``timestamp`` (RFC 3339,
seconds precision), ``message`` (the processed content), followed by the
message's structured fields in insertion order. A field sharing a name with
one of the standard keys replaces it.
"""

from __future__ import annotations

import json
from typing import Any

from ...application.processor import Processor
from ...domain.message import Message


def record(message: Message, *, lower_output: bool = False) -> dict[str, Any]:
    """Return the ordered key/value view of *message* used by both formatters."""

    output = message.output_name.lower() if lower_output else message.output_name
    payload: dict[str, Any] = {
        "component": message.component_name,
        "output": output,
        "level": str(message.level).lower(),
        "timestamp": message.timestamp.isoformat(timespec="seconds"),
        "message": message.content.processed,
    }
    payload.update(message.fields)
    return payload


def text() -> Processor:
    """Render ``key=value`` cells separated by single spaces.

    >>> from lib_fanout_log.domain.level import Level
    >>> msg = Message(Level.INFO, "ready")
    >>> msg.component_name, msg.output_name = "svc", "Console"
    >>> msg.fields = {"port": 80}
    >>> text().run(msg)
    >>> msg.content.processed.startswith("component=svc output=console level=info timestamp=")
    True
    >>> msg.content.processed.endswith("message=ready port=80")
    True
    """

    def run(message: Message) -> None:
        cells = (f"{key}={value}" for key, value in record(message, lower_output=True).items())
        message.content.processed = " ".join(cells)

    return Processor("Text", run)


def json_formatter() -> Processor:
    """Render a tab-indented JSON object; unserialisable values use ``str``."""

    def run(message: Message) -> None:
        message.content.processed = json.dumps(record(message), indent="\t", default=str)

    return Processor("JSON", run)
