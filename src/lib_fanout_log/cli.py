"""CLI adapter for ``lib_fanout_log`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators try the pipeline from a shell: emit a message through a
built-in output, list the levels, and check which ``SYPL_DEBUG`` override a
component/output pair resolves to without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_levels` – lists the levels in verbosity order.
* :func:`cli_debug_level` – shows the effective max level for a pair.
* :func:`cli_emit` – prints one message through a built-in output.
* :func:`cli_fail` – raises deterministically to exercise error handling.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It builds a
:class:`~lib_fanout_log.core.Logger` from built-in adapters and never reaches
into the write protocol directly. ``lib_cli_exit_tools`` centralises the exit
code strategy, so a Fatal emit exits with code ``1`` like any library user.
"""

from __future__ import annotations

import sys
from importlib import metadata
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import DEBUG_ENV_VAR, EnvironmentProvider
from .adapters.formatters.structured import json_formatter, text
from .adapters.outputs import builtin as outputs
from .application.debug import resolve_debug_level
from .application.output import Output
from .core import Logger
from .domain.level import Flag, Level
from .domain.message import Options
from .testing import i_should_fail

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

OUTPUT_CHOICES: Final[tuple[str, ...]] = ("console", "stderr", "json", "text")
LEVEL_CHOICES: Final[tuple[str, ...]] = tuple(name.lower() for name in Level.names())
FLAG_CHOICES: Final[tuple[str, ...]] = ("none", "force", "mute", "skip", "skip-and-force", "skip-and-mute")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("lib_fanout_log")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Structured multi-output logging pipeline",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_fanout_log",
    message="lib_fanout_log version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_fanout_log")
    except metadata.PackageNotFoundError:
        click.echo("lib_fanout_log (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_fanout_log')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("levels", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_levels() -> None:
    """List levels from least to most verbose.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> CliRunner().invoke(cli, ["levels"]).output.splitlines()[1]
    '1 Fatal'
    """

    for level in Level:
        click.echo(f"{int(level)} {level}")


@cli.command("debug-level", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--component", required=True, help="Logger (component) name")
@click.option("--output", "output_name", required=True, help="Output name")
@click.option(
    "--max-level",
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    default="info",
    show_default=True,
    help="Configured max level used when no override matches",
)
@click.option("--debug", "debug_value", default=None, help=f"Value to evaluate instead of ${DEBUG_ENV_VAR}")
def cli_debug_level(component: str, output_name: str, max_level: str, debug_value: Optional[str]) -> None:
    """Show the effective max level for a component/output pair.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> args = ["debug-level", "--component", "pod", "--output", "console",
    ...         "--debug", "info,console:debug,pod:console:trace"]
    >>> CliRunner().invoke(cli, args).output.strip()
    'Trace (override)'
    """

    config = EnvironmentProvider(environ={DEBUG_ENV_VAR: debug_value}) if debug_value is not None else EnvironmentProvider()
    override = resolve_debug_level(config, component, output_name)
    if override is None:
        click.echo(f"{Level.from_name(max_level)} (configured)")
        return
    click.echo(f"{override} (override)")


@cli.command("emit", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option(
    "--level",
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    default="info",
    show_default=True,
    help="Message level",
)
@click.option(
    "--output",
    "output_kind",
    type=click.Choice(OUTPUT_CHOICES, case_sensitive=False),
    default="console",
    show_default=True,
    help="Built-in output used for the message",
)
@click.option(
    "--max-level",
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    default="trace",
    show_default=True,
    help="Max level of the output",
)
@click.option("--component", default="cli", show_default=True, help="Logger (component) name")
@click.option("--tag", "tags", multiple=True, help="Tag attached to the message (repeatable)")
@click.option("--field", "fields", multiple=True, help="Structured field as key=value (repeatable)")
@click.option(
    "--flag",
    type=click.Choice(FLAG_CHOICES, case_sensitive=False),
    default="none",
    show_default=True,
    help="Flag controlling processing and gating",
)
def cli_emit(
    message: str,
    level: str,
    output_kind: str,
    max_level: str,
    component: str,
    tags: Sequence[str],
    fields: Sequence[str],
    flag: str,
) -> None:
    """Print MESSAGE (plus a newline) through a built-in output.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> CliRunner().invoke(cli, ["emit", "hello"]).output
    'hello\\n'
    """

    logger = Logger(component, _build_output(output_kind, Level.from_name(max_level)))
    options = Options(flag=Flag.from_name(flag), tags=list(tags), fields=_parse_fields(fields))
    logger.println_with_options(options, Level.from_name(level), message)


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Trigger a deterministic error for testing traceback handling."""

    i_should_fail()


def _build_output(kind: str, max_level: Level) -> Output:
    """Return the built-in output selected by ``--output``."""

    kind = kind.lower()
    if kind == "stderr":
        return outputs.stderr()
    output = outputs.console(max_level)
    if kind == "json":
        output.set_formatter(json_formatter())
    elif kind == "text":
        output.set_formatter(text())
    return output


def _parse_fields(values: Sequence[str]) -> dict[str, str]:
    """Parse ``key=value`` pairs; a missing ``=`` is a usage error."""

    parsed: dict[str, str] = {}
    for value in values:
        key, separator, raw = value.partition("=")
        if not separator or not key.strip():
            raise click.BadParameter(f"expected key=value, got {value!r}", param_hint="--field")
        parsed[key.strip()] = raw
    return parsed


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_fanout_log",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
