"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the pipeline, the adapters, and
consuming applications. The hierarchy lives in the domain layer so outer layers
may depend on it without the domain depending on them.

Contents
--------
* :class:`LogError` – umbrella base class for all library failures.
* :class:`InvalidLevel` – a level name that is not part of :class:`Level`.
* :class:`ProcessingError` – a processor or formatter failed on a message.
* :class:`WriteError` – an output could not write to its destination.
* :class:`ConfigurationError` – setup-time failure such as an unopenable file.

System Role
-----------
Print calls are best-effort: processing and write errors are logged through
:mod:`lib_fanout_log.observability` and never escape a print call. Only
setup-time errors (:class:`ConfigurationError`, :class:`InvalidLevel` on
explicit API input) propagate to callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .message import Message


class LogError(Exception):
    """Base type for all exceptions emitted by ``lib_fanout_log``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidLevel(LogError, ValueError):
    """Raised when a level name cannot be resolved to a :class:`Level`.

    Typical Sources
    ---------------
    :meth:`Level.from_name`, CLI options, and explicit configuration. The debug
    resolver swallows this error and treats it as "no override".
    """


class ProcessingError(LogError):
    """Raised (and logged) when a processor or formatter fails.

    Why
    ----
    A failing processor must never abort the output pipeline, yet operators
    need enough context to find the culprit: which output, which processor,
    and which message.

    Examples
    --------
    >>> from lib_fanout_log.domain.level import Level
    >>> from lib_fanout_log.domain.message import Message
    >>> msg = Message(Level.INFO, "boom\\n")
    >>> msg.output_name, msg.processor_name = "Console", "Prefixer"
    >>> str(ProcessingError.from_message(msg, RuntimeError("bad")))
    'Output: "Console" Processor: "Prefixer" Error: "bad" Original Message: "boom"'
    """

    def __init__(
        self,
        *,
        cause: BaseException | None = None,
        message: "Message | None" = None,
        output_name: str = "",
        processor_name: str = "",
    ) -> None:
        self.cause = cause
        self.message = message
        self.output_name = output_name
        self.processor_name = processor_name
        super().__init__(self._render())

    @classmethod
    def from_message(cls, message: "Message", cause: BaseException) -> "ProcessingError":
        """Build the error from the routing metadata stamped on *message*."""

        return cls(
            cause=cause,
            message=message,
            output_name=message.output_name,
            processor_name=message.processor_name,
        )

    def _render(self) -> str:
        text = f'Output: "{self.output_name}" Processor: "{self.processor_name}"'
        if self.cause is not None:
            text = f'{text} Error: "{self.cause}"'
        if self.message is not None:
            original = self.message.content.original
            if original.endswith("\n"):
                original = original[:-1]
            text = f'{text} Original Message: "{original}"'
        return text


class WriteError(LogError):
    """Raised when an output fails to write to its destination.

    Broken pipes and closed destinations are not reported with this type; see
    :meth:`lib_fanout_log.application.output.Output.write`.
    """

    def __init__(self, output_name: str, cause: BaseException) -> None:
        self.output_name = output_name
        self.cause = cause
        super().__init__(f'output: "{output_name}". error: "{cause}"')


class ConfigurationError(LogError):
    """Signals a setup-time failure with no useful degraded mode.

    Raised by output constructors (for example when a log file cannot be
    opened). Unlike pipeline errors this one is meant to stop the caller.
    """
