"""End-to-end behaviour of the fan-out logger."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import pytest

from lib_fanout_log import (
    DEBUG_ENV_VAR,
    FILTER_ENV_VAR,
    EnvironmentProvider,
    Flag,
    Level,
    LogError,
    Logger,
    MessageToOutput,
    Options,
    Output,
    SafeBuffer,
    new_logger,
    new_message,
)
from lib_fanout_log.adapters.outputs.builtin import safe_buffer
from lib_fanout_log.adapters.processors.builtin import prefixer, suffixer
from lib_fanout_log.application.processor import Processor
from lib_fanout_log.testing import BrokenWriter, failing_processor


def _named(name: str, max_level: Level = Level.TRACE, *processors: Processor) -> tuple[SafeBuffer, Output]:
    buffer = SafeBuffer()
    return buffer, Output(name, max_level, buffer, *processors)


def _logger(name: str, *outputs: Output, environ: dict[str, str] | None = None, **kwargs) -> Logger:
    return Logger(name, *outputs, config=EnvironmentProvider(environ=environ or {}), **kwargs)


def test_print_fans_out_to_every_output() -> None:
    first, one = _named("One")
    second, two = _named("Two", Level.INFO, prefixer("> "))
    _logger("svc", one, two).infoln("hello", 42)
    assert first.getvalue() == "hello 42\n"
    assert second.getvalue() == "> hello 42\n"


def test_printers_format_their_arguments() -> None:
    buffer, output = _named("Buffer")
    logger = _logger("svc", output)
    logger.printf(Level.INFO, "%s=%d;", "a", 1).print(Level.INFO, "b").printlnf(Level.INFO, "[%s]", "c").println(Level.INFO)
    assert buffer.getvalue() == "a=1;b[c]\n\n"


def test_literal_percent_without_arguments_is_kept() -> None:
    buffer, output = _named("Buffer")
    _logger("svc", output).infof("100%")
    assert buffer.getvalue() == "100%"


def test_leveled_printers_respect_the_ceiling() -> None:
    buffer, output = _named("Buffer", Level.WARN)
    logger = _logger("svc", output)
    logger.errorln("e").warnln("w").infoln("i").debugln("d").traceln("t")
    logger.errorf("%s|", "ef").warnlnf("%s", "wl")
    assert buffer.getvalue() == "e\nw\ni\nef|wl\n"


def test_empty_content_is_a_no_op() -> None:
    buffer, output = _named("Buffer")
    seen: list[str] = []
    output.add_processors(Processor("Spy", lambda message: seen.append(message.id)))
    _logger("svc", output).info("").print(Level.INFO)
    assert buffer.getvalue() == ""
    assert seen == []


def test_skip_and_mute_is_a_no_op() -> None:
    seen: list[str] = []
    buffer, output = _named("Buffer", Level.TRACE, Processor("Spy", lambda message: seen.append(message.id)))
    _logger("svc", output).println_with_options(Options(flag=Flag.SKIP_AND_MUTE), Level.INFO, "x")
    assert buffer.getvalue() == ""
    assert seen == []


def test_flag_precedence_through_the_logger() -> None:
    strict_buffer, strict = _named("Strict", Level.FATAL)
    loose_buffer, loose = _named("Loose", Level.TRACE)
    logger = _logger("svc", strict, loose)
    logger.print_with_options(Options(flag=Flag.FORCE, outputs_names=["Strict"]), Level.TRACE, "forced")
    logger.print_with_options(Options(flag=Flag.MUTE, outputs_names=["Loose"]), Level.INFO, "muted")
    assert strict_buffer.getvalue() == "forced"
    assert loose_buffer.getvalue() == ""


def test_options_select_outputs_and_processors() -> None:
    a_buffer, a = _named("A", Level.TRACE, prefixer("P-"), suffixer("-S"))
    b_buffer, b = _named("B")
    options = Options(outputs_names=["a"], processors_names=["Suffixer"], tags=["t"], fields={"k": 1})
    _logger("svc", a, b).println_with_options(options, Level.INFO, "x")
    assert a_buffer.getvalue() == "x-S\n"
    assert b_buffer.getvalue() == ""


def test_disabled_outputs_and_loggers_are_skipped() -> None:
    buffer, output = _named("Buffer")
    other_buffer, other = _named("Other")
    other.disable()
    logger = _logger("svc", output, other)
    logger.infoln("on")
    logger.disable().infoln("off")
    logger.enable()
    assert buffer.getvalue() == "on\n"
    assert other_buffer.getvalue() == ""


def test_each_output_processes_its_own_copy() -> None:
    observed: dict[str, list[str]] = {}
    lock = threading.Lock()

    def tagger(label: str) -> Processor:
        def run(message) -> None:
            message.add_tags(label)
            message.content.processed = label + message.content.processed
            with lock:
                observed[label] = message.get_tags()

        return Processor(f"Tagger{label}", run)

    first, one = _named("One", Level.TRACE, tagger("1"))
    second, two = _named("Two", Level.TRACE, tagger("2"))
    _logger("svc", one, two).print_with_options(Options(tags=["base"]), Level.INFO, "m")
    assert first.getvalue() == "1m"
    assert second.getvalue() == "2m"
    assert observed == {"1": ["1", "base"], "2": ["2", "base"]}


def test_component_and_output_names_are_stamped() -> None:
    stamps: list[tuple[str, str]] = []
    lock = threading.Lock()

    def spy(message) -> None:
        with lock:
            stamps.append((message.component_name, message.output_name))

    _, one = _named("One", Level.TRACE, Processor("Spy", spy))
    _, two = _named("Two", Level.TRACE, Processor("Spy", spy))
    _logger("svc", one, two).info("x")
    assert sorted(stamps) == [("svc", "One"), ("svc", "Two")]


@pytest.mark.parametrize(
    ("component", "output_name", "expected"),
    [
        ("pod", "console", "trace\ndebug\ninfo\n"),
        ("svc", "console", "debug\ninfo\n"),
        ("xyz", "other", "info\n"),
    ],
)
def test_debug_precedence_end_to_end(component: str, output_name: str, expected: str) -> None:
    buffer, output = _named(output_name, Level.ERROR)
    logger = _logger(component, output, environ={DEBUG_ENV_VAR: "info,console:debug,pod:console:trace"})
    logger.traceln("trace").debugln("debug").infoln("info")
    assert buffer.getvalue() == expected
    assert output.max_level is Level.ERROR


def test_debug_variable_is_read_on_every_write(monkeypatch: pytest.MonkeyPatch) -> None:
    buffer, output = _named("console", Level.INFO)
    logger = Logger("svc", output)
    logger.debugln("hidden")
    monkeypatch.setenv(DEBUG_ENV_VAR, "console:debug")
    logger.debugln("shown")
    assert buffer.getvalue() == "shown\n"


def test_filter_variable_limits_components() -> None:
    buffer, output = _named("Buffer")
    environ = {FILTER_ENV_VAR: "pod,api"}
    _logger("svc", output, environ=environ).infoln("svc")
    _logger("pod", output, environ=environ).infoln("pod")
    assert buffer.getvalue() == "pod\n"


def test_filtered_logger_touches_no_output() -> None:
    seen: list[str] = []
    _, output = _named("Buffer", Level.TRACE, Processor("Spy", lambda message: seen.append(message.id)))
    _logger("svc", output, environ={FILTER_ENV_VAR: "pod"}).infoln("x")
    assert seen == []


def test_fatal_exits_only_after_every_output_has_written() -> None:
    buffers = [SafeBuffer() for _ in range(5)]
    outputs = [Output(f"Out{index}", Level.ERROR, buffer) for index, buffer in enumerate(buffers)]
    snapshots: list[list[str]] = []

    def record_exit(code: int) -> None:
        snapshots.append([buffer.getvalue() for buffer in buffers])
        assert code == 1

    _logger("svc", *outputs, exit_func=record_exit).fatalln("goodbye")

    assert snapshots == [["goodbye\n"] * 5]


def test_fatal_default_exit_raises_system_exit() -> None:
    buffer, output = _named("Buffer")
    with pytest.raises(SystemExit) as excinfo:
        _logger("svc", output).fatal("bye")
    assert excinfo.value.code == 1
    assert buffer.getvalue() == "bye"


def test_fatal_no_op_does_not_exit() -> None:
    exits: list[int] = []
    _, output = _named("Buffer")
    logger = _logger("svc", output, exit_func=exits.append)
    logger.fatal("")
    logger.disable().fatalf("%s", "x")
    assert exits == []


def test_mismatched_format_is_written_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_fanout_log")
    buffer, output = _named("Buffer")
    _logger("svc", output).infof("%d items", "many")
    assert buffer.getvalue() == "%d items many"
    assert caplog.records[-1].getMessage() == "format_failed"


def test_fatal_with_mismatched_format_still_exits() -> None:
    exits: list[int] = []
    buffer, output = _named("Buffer")
    _logger("svc", output, exit_func=exits.append).fatallnf("%s %s", "only-one")
    assert buffer.getvalue() == "%s %s only-one\n"
    assert exits == [1]


def test_write_errors_are_logged_and_other_outputs_still_receive(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_fanout_log")
    buffer, healthy = _named("Healthy")
    broken = Output("Broken", Level.TRACE, BrokenWriter())
    _logger("svc", broken, healthy).infoln("x")
    assert buffer.getvalue() == "x\n"
    record = caplog.records[-1]
    assert "Broken" in record.getMessage()
    assert getattr(record, "context")["output"] == "Broken"


def test_processor_failure_does_not_stop_the_print(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_fanout_log")
    buffer, output = _named("Buffer", Level.TRACE, failing_processor(), suffixer("!"))
    _logger("svc", output).infoln("x")
    assert buffer.getvalue() == "x!\n"
    assert caplog.records


def test_serror_returns_the_unprocessed_content() -> None:
    buffer, output = _named("Buffer", Level.TRACE, prefixer("E: "))
    logger = _logger("svc", output)
    error = logger.serrorf("code %d", 7)
    assert isinstance(error, LogError)
    assert str(error) == "code 7"
    assert str(logger.serrorln("again")) == "again\n"
    assert buffer.getvalue() == "E: code 7E: again\n"


def test_child_logger_shares_outputs_and_config() -> None:
    def stamp(message) -> None:
        message.content.processed = f"[{message.component_name}] {message.content.processed}"

    buffer, output = _named("Buffer", Level.TRACE, Processor("Component", stamp))
    parent = _logger("parent", output, environ={FILTER_ENV_VAR: "parent,child"})
    child = parent.new("child")
    late_buffer, late = _named("Late")
    child.add_outputs(late)

    parent.infoln("p")
    child.infoln("c")

    assert child.config is parent.config
    assert parent.get_outputs_names() == ["Buffer", "Late"]
    assert buffer.getvalue().splitlines() == ["[parent] p", "[child] c"]
    assert late_buffer.getvalue() == "p\nc\n"


def test_set_and_get_outputs() -> None:
    _, original = _named("Console")
    replacement_buffer, replacement = _named("console")
    logger = _logger("svc", original)
    logger.set_outputs(replacement)
    assert logger.get_output("CONSOLE") is replacement
    assert logger.get_output("missing") is None
    assert logger.get_outputs() == [replacement]
    logger.info("x")
    assert replacement_buffer.getvalue() == "x"


def test_print_message_honours_each_message() -> None:
    a_buffer, a = _named("A")
    b_buffer, b = _named("B")
    targeted = new_message(Level.INFO, "only-b\n")
    targeted.outputs_names = ["B"]
    broadcast = new_message(Level.INFO, "all\n")
    _logger("svc", a, b).print_message(targeted, broadcast)
    assert a_buffer.getvalue() == "all\n"
    assert b_buffer.getvalue() == "only-b\nall\n"


def test_print_messages_to_outputs_routes_each_entry() -> None:
    one_buffer, one = _named("Console 1")
    two_buffer, two = _named("Console 2")
    three_buffer, three = _named("Console 3")
    _logger("pod", one, two, three).print_messages_to_outputs(
        MessageToOutput("Console 1", Level.INFO, "Test 1\n"),
        MessageToOutput("Console 2", Level.INFO, "Test 3\n"),
        MessageToOutput("Console 4", Level.INFO, "Test 4\n"),
    )
    assert one_buffer.getvalue() == "Test 1\n"
    assert two_buffer.getvalue() == "Test 3\n"
    assert three_buffer.getvalue() == ""


def test_print_messages_to_outputs_with_options_and_fatal() -> None:
    exits: list[int] = []
    buffer, output = _named("Console 1", Level.TRACE)
    output.set_formatter(Processor("Fields", lambda m: m.content.set_processed(f"{m.content.processed} {m.fields}")))
    _logger("pod", output, exit_func=exits.append).print_messages_to_outputs_with_options(
        Options(fields={"1": 2}),
        MessageToOutput("Console 1", Level.FATAL, "last words\n"),
    )
    assert buffer.getvalue() == "last words {'1': 2}\n"
    assert exits == [1]


@dataclass
class _Payload:
    key1: str
    key2: int


def test_print_pretty_skips_processing_and_forces_the_write() -> None:
    buffer, output = _named("Buffer", Level.FATAL, prefixer("P-"))
    _logger("svc", output).println_pretty(Level.DEBUG, _Payload("text", 12))
    assert buffer.getvalue() == '{\n\t"key1": "text",\n\t"key2": 12\n}\n'


def test_print_pretty_of_unencodable_data_is_a_no_op() -> None:
    buffer, output = _named("Buffer")
    circular: list = []
    circular.append(circular)
    _logger("svc", output).print_pretty(Level.INFO, circular)
    assert buffer.getvalue() == ""


def test_new_logger_factory() -> None:
    buffer, output = safe_buffer(Level.INFO)
    logger = new_logger("svc", output, config=EnvironmentProvider(environ={}))
    assert str(logger) == "svc"
    logger.info("x")
    assert buffer.getvalue() == "x"
