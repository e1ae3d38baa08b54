"""Public package surface for ``lib_fanout_log``.

Build a :class:`Logger`, register outputs (built-ins live in
:mod:`lib_fanout_log.adapters.outputs.builtin`), and print. Each print call is
fanned out to every matching output concurrently; every output runs its own
processor chain on its own copy of the message.
"""

from __future__ import annotations

from .adapters.env.default import DEBUG_ENV_VAR, FILTER_ENV_VAR, EnvironmentProvider
from .adapters.formatters.structured import json_formatter, text
from .adapters.stdlib.bridge import LoggerHandler, redirect_std_log
from .adapters.writers.buffer import SafeBuffer
from .adapters.writers.rotating import RotatingFileWriter
from .application.output import Output
from .application.processor import Processor
from .application.registry import OutputRegistry
from .core import Logger, new_logger, prettify
from .domain.errors import ConfigurationError, InvalidLevel, LogError, ProcessingError, WriteError
from .domain.level import Flag, Level, Status, levels_to_string
from .domain.message import Content, Message, MessageToOutput, Options, new_message
from .observability import bind_trace_id, get_logger

__all__ = [
    "DEBUG_ENV_VAR",
    "FILTER_ENV_VAR",
    "ConfigurationError",
    "Content",
    "EnvironmentProvider",
    "Flag",
    "InvalidLevel",
    "Level",
    "LogError",
    "Logger",
    "LoggerHandler",
    "Message",
    "MessageToOutput",
    "Options",
    "Output",
    "OutputRegistry",
    "ProcessingError",
    "Processor",
    "RotatingFileWriter",
    "SafeBuffer",
    "Status",
    "WriteError",
    "bind_trace_id",
    "get_logger",
    "json_formatter",
    "levels_to_string",
    "new_logger",
    "new_message",
    "prettify",
    "redirect_std_log",
    "text",
]
