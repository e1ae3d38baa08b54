from __future__ import annotations

import threading

from lib_fanout_log.adapters.writers.buffer import SafeBuffer
from lib_fanout_log.application.output import Output
from lib_fanout_log.application.registry import OutputRegistry
from lib_fanout_log.domain.level import Level


def _output(name: str) -> Output:
    return Output(name, Level.TRACE, SafeBuffer())


def test_get_returns_first_match_case_insensitively() -> None:
    first, second = _output("Console"), _output("console")
    registry = OutputRegistry(first, second)
    assert registry.get("CONSOLE") is first
    assert registry.get("missing") is None


def test_set_replaces_outputs_by_name() -> None:
    original = _output("File")
    registry = OutputRegistry(original, _output("Console"))
    replacement = _output("file")
    registry.set(replacement, _output("Unknown"))
    assert registry.get("File") is replacement
    assert registry.names() == ["file", "Console"]


def test_snapshot_is_detached_from_later_additions() -> None:
    registry = OutputRegistry(_output("A"))
    snapshot = registry.snapshot()
    registry.add(_output("B"))
    assert [output.name for output in snapshot] == ["A"]
    assert len(registry) == 2
    assert [output.name for output in registry] == ["A", "B"]


def test_concurrent_adds_are_all_kept() -> None:
    registry = OutputRegistry()

    def worker(index: int) -> None:
        for step in range(50):
            registry.add(_output(f"{index}-{step}"))

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(registry) == 400
