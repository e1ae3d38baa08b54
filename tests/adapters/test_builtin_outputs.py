from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lib_fanout_log.adapters.outputs import builtin
from lib_fanout_log.adapters.writers.buffer import SafeBuffer
from lib_fanout_log.adapters.writers.rotating import RotatingFileWriter
from lib_fanout_log.adapters.writers.stream import StandardStream
from lib_fanout_log.domain.errors import ConfigurationError
from lib_fanout_log.domain.level import Level
from lib_fanout_log.domain.message import Message


def _message(level: Level, content: str = "line\n") -> Message:
    message = Message(level, content)
    message.component_name = "svc"
    return message


def test_console_writes_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    output = builtin.console(Level.INFO)
    assert output.name == "Console"
    output.write(_message(Level.INFO))
    assert capsys.readouterr().out == "line\n"


def test_stderr_prints_only_fatal_and_error(capsys: pytest.CaptureFixture[str]) -> None:
    output = builtin.stderr()
    assert output.name == "StdErr"
    assert output.max_level is Level.ERROR
    assert output.get_processors_names() == ["PrintOnlyAtLevel"]
    output.write(_message(Level.INFO, "info\n"))
    output.write(_message(Level.ERROR, "error\n"))
    assert capsys.readouterr().err == "error\n"


def test_file_appends_and_creates(tmp_path: Path) -> None:
    path = tmp_path / "app.log"
    path.write_text("existing\n", encoding="utf-8")
    output = builtin.file(path, Level.INFO)
    output.write(_message(Level.INFO))
    output.writer.close()
    assert output.name == "File"
    assert path.read_text(encoding="utf-8") == "existing\nline\n"


def test_file_dash_means_stdout() -> None:
    output = builtin.file("-", Level.INFO)
    assert output.name == "File"
    assert isinstance(output.writer, StandardStream)


def test_unopenable_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        builtin.file(tmp_path / "missing" / "app.log", Level.INFO)


def test_file_with_rotation(tmp_path: Path) -> None:
    output = builtin.file_with_rotation(tmp_path / "app.log", Level.INFO, max_bytes=1024, compress=True)
    assert output.name == "FileWithRotation"
    assert isinstance(output.writer, RotatingFileWriter)
    assert output.writer.compress
    output.writer.close()


def test_closed_rotating_file_is_skipped_with_a_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_fanout_log")
    path = tmp_path / "app.log"
    output = builtin.file_with_rotation(path, Level.INFO)
    output.writer.close()
    output.write(_message(Level.INFO))
    assert path.read_text(encoding="utf-8") == ""
    assert caplog.records[-1].levelno == logging.WARNING


def test_file_based_and_safe_buffer() -> None:
    writer = SafeBuffer()
    named = builtin.file_based("Audit", Level.DEBUG, writer)
    assert named.name == "Audit" and named.writer is writer

    buffer, output = builtin.safe_buffer(Level.INFO)
    assert output.name == "Buffer"
    output.write(_message(Level.INFO))
    assert buffer.getvalue() == "line\n"
