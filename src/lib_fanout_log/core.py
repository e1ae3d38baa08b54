"""Composition root for ``lib_fanout_log``.

Purpose
-------
Provide the :class:`Logger` that turns a print call into one
:class:`~lib_fanout_log.domain.message.Message`, fans it out to every matching
output concurrently, and waits for all of them before returning.

Contents
--------
* :class:`Logger` – named orchestrator over a shared
  :class:`~lib_fanout_log.application.registry.OutputRegistry`.
* :func:`new_logger` – convenience factory.
* :func:`prettify` – tab-indented JSON used by the ``*_pretty`` printers.

System Role
-----------
The logger wires the environment adapter (``SYPL_DEBUG`` and ``SYPL_FILTER``)
into every output write and reports pipeline failures through
:mod:`lib_fanout_log.observability`. Print calls never raise pipeline errors;
the only intrinsic process-terminating path is a Fatal print, which calls the
exit function once every output has finished.
"""

from __future__ import annotations

import contextvars
import dataclasses
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, Sequence

from .adapters.env.default import EnvironmentProvider
from .application.debug import component_allowed
from .application.output import Output
from .application.ports import ConfigProvider
from .application.registry import OutputRegistry
from .domain.errors import LogError
from .domain.level import Flag, Level, Status
from .domain.message import Message, MessageToOutput, Options
from .observability import bind_trace_id, log_debug, log_error, make_event

ExitFunc = Callable[[int], Any]

FATAL_EXIT_CODE = 1


def prettify(data: Any) -> str:
    """Return *data* as tab-indented JSON, or ``""`` when it cannot be encoded.

    Dataclasses are converted with :func:`dataclasses.asdict`; other objects
    fall back to their ``__dict__`` and finally to ``str``.

    >>> prettify({"Key1": "text", "Key2": 12}) == '{\\n\\t"Key1": "text",\\n\\t"Key2": 12\\n}'
    True
    """

    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        data = dataclasses.asdict(data)
    try:
        return json.dumps(data, indent="\t", default=_json_default)
    except (TypeError, ValueError) as exc:
        log_error("prettify_failed", error=str(exc))
        return ""


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if hasattr(value, "__dict__"):
        return vars(value)
    return str(value)


def _sprint(args: Sequence[Any]) -> str:
    return " ".join(str(arg) for arg in args)


def _sprintf(format: str, args: Sequence[Any]) -> str:
    """Apply ``%``-formatting; a mismatched format degrades to a space join.

    >>> _sprintf("%d items", ("many",))
    '%d items many'
    """

    if not args:
        return format
    try:
        return format % tuple(args)
    except (TypeError, ValueError) as exc:
        log_error("format_failed", format=format, error=str(exc))
        return _sprint((format, *args))


class Logger:
    """Named logger fanning print calls out to its registered outputs.

    Parameters
    ----------
    name:
        Component name stamped on every message; matched by ``SYPL_FILTER``
        and by the component tokens of ``SYPL_DEBUG``.
    outputs:
        Initial outputs.
    config:
        Source of ``SYPL_DEBUG``/``SYPL_FILTER``. Defaults to a live view of
        the process environment.
    exit_func:
        Called with ``1`` after a Fatal print has been written everywhere.
    registry:
        Output registry to share; :meth:`new` uses it to build children.

    Examples
    --------
    >>> from lib_fanout_log.adapters.outputs.builtin import safe_buffer
    >>> buf, out = safe_buffer(Level.INFO)
    >>> log = Logger("svc", out, config=EnvironmentProvider(environ={}))
    >>> _ = log.infoln("ready").debugln("hidden")
    >>> buf.getvalue()
    'ready\\n'
    """

    def __init__(
        self,
        name: str,
        *outputs: Output,
        config: ConfigProvider | None = None,
        exit_func: ExitFunc = sys.exit,
        registry: OutputRegistry | None = None,
    ) -> None:
        self.name = name
        self.status = Status.ENABLED
        self.config: ConfigProvider = config if config is not None else EnvironmentProvider()
        self.exit_func = exit_func
        self.outputs = registry if registry is not None else OutputRegistry()
        self.outputs.add(*outputs)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Logger(name={self.name!r}, outputs={self.get_outputs_names()!r}, status={self.status!s})"

    # Status

    def enable(self) -> "Logger":
        self.status = Status.ENABLED
        return self

    def disable(self) -> "Logger":
        self.status = Status.DISABLED
        return self

    @property
    def enabled(self) -> bool:
        return self.status is Status.ENABLED

    # Outputs

    def add_outputs(self, *outputs: Output) -> "Logger":
        self.outputs.add(*outputs)
        return self

    def set_outputs(self, *outputs: Output) -> "Logger":
        """Replace registered outputs sharing a name with *outputs*."""

        self.outputs.set(*outputs)
        return self

    def get_output(self, name: str) -> Output | None:
        return self.outputs.get(name)

    def get_outputs(self) -> list[Output]:
        return list(self.outputs.snapshot())

    def get_outputs_names(self) -> list[str]:
        return self.outputs.names()

    def new(self, name: str) -> "Logger":
        """Return a child logger named *name* sharing outputs, config and exit function."""

        return Logger(name, config=self.config, exit_func=self.exit_func, registry=self.outputs)

    # Primitive printers

    def print_with_options(self, options: Options | None, level: Level, *args: Any) -> "Logger":
        """Print *args* joined by spaces, honouring *options*.

        Every other printer reduces to this method.
        """

        return self._print(options or Options(), level, _sprint(args))

    def printf_with_options(self, options: Options | None, level: Level, format: str, *args: Any) -> "Logger":
        return self._print(options or Options(), level, _sprintf(format, args))

    def println_with_options(self, options: Options | None, level: Level, *args: Any) -> "Logger":
        return self._print(options or Options(), level, _sprint(args) + "\n")

    def printlnf_with_options(self, options: Options | None, level: Level, format: str, *args: Any) -> "Logger":
        return self._print(options or Options(), level, _sprintf(format, args) + "\n")

    def print(self, level: Level, *args: Any) -> "Logger":
        return self.print_with_options(None, level, *args)

    def printf(self, level: Level, format: str, *args: Any) -> "Logger":
        return self.printf_with_options(None, level, format, *args)

    def println(self, level: Level, *args: Any) -> "Logger":
        return self.println_with_options(None, level, *args)

    def printlnf(self, level: Level, format: str, *args: Any) -> "Logger":
        return self.printlnf_with_options(None, level, format, *args)

    def print_pretty(self, level: Level, data: Any) -> "Logger":
        """Print *data* as tab-indented JSON; processors and formatter are skipped."""

        return self._print(Options(flag=Flag.SKIP_AND_FORCE), level, prettify(data))

    def println_pretty(self, level: Level, data: Any) -> "Logger":
        pretty = prettify(data)
        return self._print(Options(flag=Flag.SKIP_AND_FORCE), level, pretty + "\n" if pretty else "")

    def print_message(self, *messages: Message) -> "Logger":
        """Dispatch pre-built *messages*, each honouring its own routing and flag."""

        fatal = False
        for message in messages:
            if self._dispatch(message):
                fatal = fatal or message.level is Level.FATAL
        if fatal:
            self._exit()
        return self

    def print_messages_to_outputs(self, *entries: MessageToOutput) -> "Logger":
        return self.print_messages_to_outputs_with_options(None, *entries)

    def print_messages_to_outputs_with_options(
        self, options: Options | None, *entries: MessageToOutput
    ) -> "Logger":
        """Send each ``(output_name, level, content)`` entry to exactly that output.

        Entries run concurrently with each other; names matching no registered
        output are dropped silently. *options* applies to every entry, except
        that the target output always comes from the entry itself.
        """

        if not self._active():
            return self
        base = options or Options()
        jobs: list[tuple[Output, Message]] = []
        fatal = False
        for entry in entries:
            output = self.outputs.get(entry.output_name)
            if output is None or not output.enabled:
                continue
            if not entry.content or base.flag is Flag.SKIP_AND_MUTE:
                continue
            message = Message(entry.level, entry.content).apply_options(base)
            message.outputs_names = [output.name]
            message.component_name = self.name
            jobs.append((output, message))
            fatal = fatal or entry.level is Level.FATAL
        self._run(jobs)
        if fatal:
            self._exit()
        return self

    # Leveled printers

    def fatal(self, *args: Any) -> "Logger":
        """Print at Fatal, then call ``exit_func(1)`` once every output has written."""

        return self.print(Level.FATAL, *args)

    def fatalf(self, format: str, *args: Any) -> "Logger":
        """``%``-format at Fatal and exit; a mismatched format still exits."""

        return self.printf(Level.FATAL, format, *args)

    def fatalln(self, *args: Any) -> "Logger":
        """Like :meth:`fatal` with a trailing newline."""

        return self.println(Level.FATAL, *args)

    def fatallnf(self, format: str, *args: Any) -> "Logger":
        return self.printlnf(Level.FATAL, format, *args)

    def error(self, *args: Any) -> "Logger":
        """Print the space-joined *args* at Error."""

        return self.print(Level.ERROR, *args)

    def errorf(self, format: str, *args: Any) -> "Logger":
        return self.printf(Level.ERROR, format, *args)

    def errorln(self, *args: Any) -> "Logger":
        return self.println(Level.ERROR, *args)

    def errorlnf(self, format: str, *args: Any) -> "Logger":
        return self.printlnf(Level.ERROR, format, *args)

    def serror(self, *args: Any) -> LogError:
        """Print at Error and return the unprocessed content as a :class:`LogError`."""

        content = _sprint(args)
        self._print(Options(), Level.ERROR, content)
        return LogError(content)

    def serrorf(self, format: str, *args: Any) -> LogError:
        content = _sprintf(format, args)
        self._print(Options(), Level.ERROR, content)
        return LogError(content)

    def serrorln(self, *args: Any) -> LogError:
        content = _sprint(args) + "\n"
        self._print(Options(), Level.ERROR, content)
        return LogError(content)

    def serrorlnf(self, format: str, *args: Any) -> LogError:
        content = _sprintf(format, args) + "\n"
        self._print(Options(), Level.ERROR, content)
        return LogError(content)

    def info(self, *args: Any) -> "Logger":
        """Print the space-joined *args* at Info."""

        return self.print(Level.INFO, *args)

    def infof(self, format: str, *args: Any) -> "Logger":
        """Print ``format % args`` at Info."""

        return self.printf(Level.INFO, format, *args)

    def infoln(self, *args: Any) -> "Logger":
        return self.println(Level.INFO, *args)

    def infolnf(self, format: str, *args: Any) -> "Logger":
        return self.printlnf(Level.INFO, format, *args)

    def warn(self, *args: Any) -> "Logger":
        """Print the space-joined *args* at Warn."""

        return self.print(Level.WARN, *args)

    def warnf(self, format: str, *args: Any) -> "Logger":
        return self.printf(Level.WARN, format, *args)

    def warnln(self, *args: Any) -> "Logger":
        return self.println(Level.WARN, *args)

    def warnlnf(self, format: str, *args: Any) -> "Logger":
        return self.printlnf(Level.WARN, format, *args)

    def debug(self, *args: Any) -> "Logger":
        """Print the space-joined *args* at Debug."""

        return self.print(Level.DEBUG, *args)

    def debugf(self, format: str, *args: Any) -> "Logger":
        return self.printf(Level.DEBUG, format, *args)

    def debugln(self, *args: Any) -> "Logger":
        return self.println(Level.DEBUG, *args)

    def debuglnf(self, format: str, *args: Any) -> "Logger":
        return self.printlnf(Level.DEBUG, format, *args)

    def trace(self, *args: Any) -> "Logger":
        """Print the space-joined *args* at Trace."""

        return self.print(Level.TRACE, *args)

    def tracef(self, format: str, *args: Any) -> "Logger":
        return self.printf(Level.TRACE, format, *args)

    def traceln(self, *args: Any) -> "Logger":
        return self.println(Level.TRACE, *args)

    def tracelnf(self, format: str, *args: Any) -> "Logger":
        return self.printlnf(Level.TRACE, format, *args)

    # Pipeline

    def _print(self, options: Options, level: Level, content: str) -> "Logger":
        if not content or options.flag is Flag.SKIP_AND_MUTE:
            return self
        message = Message(level, content).apply_options(options)
        return self.print_message(message)

    def _active(self) -> bool:
        """Return ``False`` when disabled or excluded by ``SYPL_FILTER``."""

        return self.enabled and component_allowed(self.config, self.name)

    def _dispatch(self, message: Message) -> bool:
        """Fan *message* out; return ``False`` when the call was a no-op."""

        if not message.content.original or message.flag is Flag.SKIP_AND_MUTE:
            return False
        if not self._active():
            log_debug("print_filtered", **make_event(self.name, None))
            return False

        targets = {name.lower() for name in message.outputs_names}
        jobs: list[tuple[Output, Message]] = []
        for output in self.outputs.snapshot():
            if not output.enabled:
                continue
            if targets and output.name.lower() not in targets:
                continue
            copy = message.copy()
            copy.component_name = self.name
            jobs.append((output, copy))
        self._run(jobs)
        return True

    def _run(self, jobs: Iterable[tuple[Output, Message]]) -> None:
        """Write every job and block until all of them have finished."""

        jobs = list(jobs)
        if not jobs:
            return
        if len(jobs) == 1:
            contextvars.copy_context().run(self._write, *jobs[0])
            return
        with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix=f"{self.name}-fanout") as pool:
            for output, message in jobs:
                context = contextvars.copy_context()
                pool.submit(context.run, self._write, output, message)

    def _write(self, output: Output, message: Message) -> None:
        message.output_name = output.name
        bind_trace_id(message.id)
        try:
            output.write(message, config=self.config)
        except LogError as exc:
            log_error(str(exc), **make_event(self.name, output.name, {"message_id": message.id}))
        except Exception as exc:
            log_error(
                "output_failed",
                **make_event(self.name, output.name, {"message_id": message.id, "error": repr(exc)}),
            )

    def _exit(self) -> None:
        self.exit_func(FATAL_EXIT_CODE)


def new_logger(
    name: str,
    *outputs: Output,
    config: ConfigProvider | None = None,
    exit_func: ExitFunc = sys.exit,
) -> Logger:
    """Return a :class:`Logger` named *name* writing to *outputs*."""

    return Logger(name, *outputs, config=config, exit_func=exit_func)
