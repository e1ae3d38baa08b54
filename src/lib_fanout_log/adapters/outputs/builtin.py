"""Ready-made outputs.

Contents
--------
* :func:`console` – ``Console``, writes to stdout.
* :func:`stderr` – ``StdErr``, writes only Fatal and Error messages to stderr.
* :func:`file` – ``File``, appends to a path (``"-"`` means stdout).
* :func:`file_based` – any name over any writer.
* :func:`file_with_rotation` – ``FileWithRotation``, size-rotated file.
* :func:`safe_buffer` – ``Buffer``, returns ``(buffer, output)`` for tests and
  in-memory capture.

Setup failures (an unwritable path) raise
:class:`~lib_fanout_log.domain.errors.ConfigurationError`; they never surface
from a print call.
"""

from __future__ import annotations

import os
from pathlib import Path

from ...application.output import Output
from ...application.ports import Writer
from ...application.processor import Processor
from ...domain.errors import ConfigurationError
from ...domain.level import Level
from ..processors.builtin import print_only_at_level
from ..writers import stream
from ..writers.buffer import SafeBuffer
from ..writers.rotating import RotatingFileWriter

DASH = "-"


def console(max_level: Level, *processors: Processor) -> Output:
    """Return ``Console``, writing to whatever ``sys.stdout`` is at write time."""

    return Output("Console", max_level, stream.stdout(), *processors)


def stderr(*processors: Processor) -> Output:
    """Return ``StdErr``: max level Error, printing only Fatal and Error."""

    return Output("StdErr", Level.ERROR, stream.stderr(), *processors, print_only_at_level(Level.FATAL, Level.ERROR))


def file_based(name: str, max_level: Level, writer: Writer, *processors: Processor) -> Output:
    """Return an output called *name* around an existing *writer*."""

    return Output(name, max_level, writer, *processors)


def file(path: str | os.PathLike[str], max_level: Level, *processors: Processor) -> Output:
    """Return ``File`` appending to *path*, created when missing.

    Raises
    ------
    ConfigurationError
        When *path* cannot be opened for appending.
    """

    if str(path) == DASH:
        return file_based("File", max_level, stream.stdout(), *processors)
    try:
        handle = open(Path(path), "a", encoding="utf-8", buffering=1)
    except OSError as exc:
        raise ConfigurationError(f"File output: failed to create/open {path}: {exc}") from exc
    return file_based("File", max_level, handle, *processors)


def file_with_rotation(
    path: str | os.PathLike[str],
    max_level: Level,
    *processors: Processor,
    max_age: int = 0,
    max_backups: int = 0,
    max_bytes: int = 0,
    compress: bool = False,
) -> Output:
    """Return ``FileWithRotation`` backed by :class:`RotatingFileWriter`."""

    if str(path) == DASH:
        return file_based("FileWithRotation", max_level, stream.stdout(), *processors)
    try:
        writer = RotatingFileWriter(
            path,
            max_age=max_age,
            max_backups=max_backups,
            max_bytes=max_bytes,
            compress=compress,
        )
    except OSError as exc:
        raise ConfigurationError(f"FileWithRotation output: failed to create/open {path}: {exc}") from exc
    return file_based("FileWithRotation", max_level, writer, *processors)


def safe_buffer(max_level: Level, *processors: Processor) -> tuple[SafeBuffer, Output]:
    """Return a fresh :class:`SafeBuffer` and the ``Buffer`` output writing to it.

    >>> buffer, output = safe_buffer(Level.INFO)
    >>> output.name, buffer.getvalue()
    ('Buffer', '')
    """

    buffer = SafeBuffer()
    return buffer, Output("Buffer", max_level, buffer, *processors)
