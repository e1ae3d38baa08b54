"""Size-based rotating file destination.

Purpose
-------
Back the ``file_with_rotation`` output with the standard library's
:class:`logging.handlers.RotatingFileHandler` (stream handling, backup naming
and the ``namer``/``rotator`` hooks), extended with gzip compression of rotated
backups, count limits and age-based pruning.

Key behaviours
--------------
* ``max_bytes`` of ``0`` disables size-based rotation.
* ``max_backups`` of ``0`` keeps every backup (subject to ``max_age``).
* ``max_age`` is expressed in days; ``0`` disables age-based pruning.
* Backups are named ``<file>.1``, ``<file>.2`` … (``.gz`` appended when
  compressed); ``.1`` is always the most recent.
"""

from __future__ import annotations

import gzip
import os
import shutil
import threading
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

from ...observability import log_debug

_SECONDS_PER_DAY = 24 * 60 * 60


class RotatingFileWriter:
    """Append text to *filename*, rotating once it would exceed ``max_bytes``."""

    def __init__(
        self,
        filename: str | os.PathLike[str],
        *,
        max_age: int = 0,
        max_backups: int = 0,
        max_bytes: int = 0,
        compress: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        self.path = Path(filename)
        self.max_age = max_age
        self.max_backups = max_backups
        self.max_bytes = max_bytes
        self.compress = compress
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handler = RotatingFileHandler(
            self.path,
            mode="a",
            maxBytes=max_bytes,
            backupCount=max_backups,
            encoding=encoding,
        )
        if compress:
            self._handler.namer = _gzip_namer
            self._handler.rotator = _gzip_rotator
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: str) -> int:
        with self._lock:
            if self._closed:
                raise ValueError(f"I/O operation on closed file {self.path}.")
            if self._should_rollover(data):
                self._rollover()
            stream = self._handler.stream
            if stream is None:
                stream = self._handler.stream = self._open_stream()
            written = stream.write(data)
            stream.flush()
            return written

    def rotate(self) -> None:
        """Force a rollover regardless of the current file size."""

        with self._lock:
            if self._closed:
                raise ValueError(f"I/O operation on closed file {self.path}.")
            self._rollover()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._handler.close()

    def backups(self) -> list[Path]:
        """Return existing backups, most recent first."""

        return [path for _, path in self._indexed_backups()]

    def _indexed_backups(self) -> list[tuple[int, Path]]:
        suffix = ".gz" if self.compress else ""
        found: list[tuple[int, Path]] = []
        for candidate in self.path.parent.glob(f"{self.path.name}.*"):
            index = candidate.name[len(self.path.name) + 1 :]
            if suffix and index.endswith(suffix):
                index = index[: -len(suffix)]
            if index.isdigit():
                found.append((int(index), candidate))
        return sorted(found)

    def _open_stream(self) -> TextIO:
        handler = self._handler
        return open(handler.baseFilename, handler.mode, encoding=handler.encoding)

    def _backup_name(self, index: int) -> str:
        return self._handler.rotation_filename(f"{self._handler.baseFilename}.{index}")

    def _should_rollover(self, data: str) -> bool:
        if self.max_bytes <= 0:
            return False
        stream = self._handler.stream
        if stream is None:
            return False
        stream.seek(0, os.SEEK_END)
        position = stream.tell()
        encoded = len(data.encode(self._handler.encoding or "utf-8"))
        return position > 0 and position + encoded > self.max_bytes

    def _rollover(self) -> None:
        handler = self._handler
        if handler.stream is not None:
            handler.stream.close()
            handler.stream = None

        for index, backup in reversed(self._indexed_backups()):
            os.replace(backup, self._backup_name(index + 1))
        if os.path.exists(handler.baseFilename):
            handler.rotate(handler.baseFilename, self._backup_name(1))

        self._prune()
        handler.stream = self._open_stream()
        log_debug("file_rotated", path=str(self.path))

    def _prune(self) -> None:
        cutoff = time.time() - self.max_age * _SECONDS_PER_DAY if self.max_age > 0 else None
        for index, backup in self._indexed_backups():
            if self.max_backups > 0 and index > self.max_backups:
                backup.unlink(missing_ok=True)
            elif cutoff is not None and backup.stat().st_mtime < cutoff:
                backup.unlink(missing_ok=True)


def _gzip_namer(name: str) -> str:
    return f"{name}.gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as plain, gzip.open(dest, "wb") as packed:
        shutil.copyfileobj(plain, packed)
    os.remove(source)
