"""Default adapters must keep satisfying the application-layer ports."""

from __future__ import annotations

from pathlib import Path

from lib_fanout_log.adapters.env.default import EnvironmentProvider
from lib_fanout_log.adapters.formatters.structured import json_formatter, text
from lib_fanout_log.adapters.processors.builtin import prefixer
from lib_fanout_log.adapters.writers.buffer import SafeBuffer
from lib_fanout_log.adapters.writers.rotating import RotatingFileWriter
from lib_fanout_log.adapters.writers.stream import stderr, stdout
from lib_fanout_log.application import ports


def test_writers_satisfy_writer_port(tmp_path: Path) -> None:
    rotating = RotatingFileWriter(tmp_path / "app.log")
    try:
        for writer in (SafeBuffer(), rotating, stdout(), stderr()):
            assert isinstance(writer, ports.Writer)
    finally:
        rotating.close()


def test_environment_provider_satisfies_config_port() -> None:
    assert isinstance(EnvironmentProvider(environ={}), ports.ConfigProvider)


def test_processors_and_formatters_satisfy_processor_port() -> None:
    for processor in (prefixer("> "), text(), json_formatter()):
        assert isinstance(processor, ports.ProcessorPort)
