"""Per-output delivery protocol.

Purpose
-------
An :class:`Output` owns a destination writer, a max-level ceiling, an ordered
processor chain and an optional formatter. :meth:`Output.write` runs the
gating, processing, formatting and writing steps for one message.

Write protocol
--------------
1. Resolve the processor-name list (message filter, else every registered
   processor) and record it on the message.
2. Strip trailing line breaks.
3. Unless the flag skips processing, run matching processors in registration
   order; failures are logged and the chain continues.
4. Decide: ``FORCE``/``SKIP_AND_FORCE`` always write. Otherwise the effective
   ceiling is the configured max level, replaced for this write only by a
   ``SYPL_DEBUG`` override; write when the level is not ``NONE``, within the
   ceiling, and the flag is not ``MUTE``.
5. Format (unless skipped), restore line breaks, write.
6. Broken pipes are ignored, closed destinations are logged as warnings, any
   other failure becomes :class:`~lib_fanout_log.domain.errors.WriteError`.

Concurrency
-----------
Configuration mutators take a lock; :meth:`Output.write` iterates over a
snapshot of the processor list, so structural changes made mid-chain apply to
the next write. Writes to the destination itself are not serialised here.
"""

from __future__ import annotations

import threading
from typing import Iterable

from ..domain.errors import ProcessingError, WriteError
from ..domain.level import Flag, Level, Status
from ..domain.message import Message
from ..observability import log_error, log_warning, make_event
from .debug import resolve_debug_level
from .ports import ConfigProvider, Writer
from .processor import Processor


class Output:
    """Named destination plus its processor chain and level ceiling."""

    def __init__(
        self,
        name: str,
        max_level: Level,
        writer: Writer,
        *processors: Processor,
        formatter: Processor | None = None,
    ) -> None:
        self.name = name
        self.max_level = max_level
        self.writer = writer
        self.formatter = formatter
        self.status = Status.ENABLED
        self._processors: list[Processor] = list(processors)
        self._lock = threading.RLock()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Output(name={self.name!r}, max_level={self.max_level!s}, status={self.status!s})"

    # Status

    def enable(self) -> "Output":
        self.status = Status.ENABLED
        return self

    def disable(self) -> "Output":
        self.status = Status.DISABLED
        return self

    @property
    def enabled(self) -> bool:
        return self.status is Status.ENABLED

    # Configuration

    def set_max_level(self, level: Level) -> "Output":
        self.max_level = level
        return self

    def set_formatter(self, formatter: Processor | None) -> "Output":
        self.formatter = formatter
        return self

    def set_writer(self, writer: Writer) -> "Output":
        self.writer = writer
        return self

    def add_processors(self, *processors: Processor) -> "Output":
        """Append *processors* to the end of the chain."""

        with self._lock:
            self._processors.extend(processors)
        return self

    def set_processors(self, *processors: Processor) -> "Output":
        """Replace registered processors that share a name (case-insensitive)."""

        with self._lock:
            for replacement in processors:
                for index, existing in enumerate(self._processors):
                    if existing.name.lower() == replacement.name.lower():
                        self._processors[index] = replacement
        return self

    def get_processor(self, name: str) -> Processor | None:
        """Return the processor called *name* (case-insensitive), or ``None``."""

        with self._lock:
            for processor in self._processors:
                if processor.name.lower() == name.lower():
                    return processor
        return None

    def get_processors(self) -> list[Processor]:
        """Return a snapshot of the chain in execution order."""

        with self._lock:
            return list(self._processors)

    def get_processors_names(self) -> list[str]:
        return [processor.name for processor in self.get_processors()]

    # Delivery

    def write(self, message: Message, *, config: ConfigProvider | None = None) -> None:
        """Process and, when the gates allow it, write *message*.

        Raises
        ------
        WriteError
            When the destination fails for a reason other than a broken pipe
            or a closed stream.
        """

        processors = self.get_processors()
        names = list(message.processors_names) or [processor.name for processor in processors]
        message.processors_names = names

        message.strip()

        if not message.flag.skips_processing:
            self._run_processors(message, processors, {name.lower() for name in names})

        if message.flag.forces_write:
            self._write(message)
            return

        if self._allows(message, config):
            self._write(message)

    def _run_processors(self, message: Message, processors: Iterable[Processor], names: set[str]) -> None:
        for processor in processors:
            if processor.name.lower() not in names:
                continue
            message.processor_name = processor.name
            try:
                processor.run(message)
            except Exception as exc:
                _report_processing_error(message, exc)

    def _allows(self, message: Message, config: ConfigProvider | None) -> bool:
        ceiling = self.max_level
        if config is not None:
            override = resolve_debug_level(config, message.component_name, self.name)
            if override is not None:
                ceiling = override
        return message.level is not Level.NONE and message.level <= ceiling and message.flag is not Flag.MUTE

    def _write(self, message: Message) -> None:
        formatter = self.formatter
        if formatter is not None and not message.flag.skips_processing:
            message.processor_name = formatter.name
            try:
                formatter.run(message)
            except Exception as exc:
                _report_processing_error(message, exc)

        message.restore()

        try:
            self.writer.write(message.content.processed)
        except BrokenPipeError:
            return
        except ValueError as exc:
            if not getattr(self.writer, "closed", False):
                raise WriteError(self.name, exc) from exc
            log_warning(
                "write_to_closed_writer",
                **make_event(message.component_name, self.name, {"error": str(exc)}),
            )
        except Exception as exc:
            raise WriteError(self.name, exc) from exc


def _report_processing_error(message: Message, exc: Exception) -> None:
    error = ProcessingError.from_message(message, exc)
    log_error(
        str(error),
        **make_event(message.component_name, message.output_name, {"processor": message.processor_name}),
    )

