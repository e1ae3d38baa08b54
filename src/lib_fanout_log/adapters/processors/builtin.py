"""Built-in processors and colour helpers.

Purpose
-------
Ship the ready-made :class:`~lib_fanout_log.application.processor.Processor`
factories most applications need: decorating content, colouring it, and
adjusting a message's flag based on its level or tags.

Contents
--------
* :class:`Casing` – target case for :func:`change_first_char_case`.
* Colour helpers – :func:`red`, :func:`bold_red`, :func:`green`,
  :func:`bold_green`, :func:`yellow`, :func:`bold_yellow`, :func:`blue`,
  :func:`cyan`, built on :func:`click.style`.
* Content processors – :func:`prefixer`, :func:`suffixer`,
  :func:`change_first_char_case`, :func:`colorize_based_on_level`,
  :func:`colorize_based_on_word`, :func:`decolourizer`,
  :func:`prefix_based_on_mask`, :func:`prefix_based_on_mask_except_for_levels`.
* Gate processors – :func:`force_based_on_level`, :func:`mute_based_on_level`,
  :func:`print_only_at_level`, :func:`print_only_if_tagged`.
* :func:`error_simulator` – always fails; exercises error reporting.

Order matters: a processor sees whatever earlier processors left in
``content.processed``.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Callable, Mapping

import click

from ...application.processor import Processor
from ...domain.level import Flag, Level
from ...domain.message import Message

Color = Callable[[str], str]

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Casing(Enum):
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


def red(text: str) -> str:
    return click.style(text, fg="red")


def bold_red(text: str) -> str:
    return click.style(text, fg="red", bold=True)


def green(text: str) -> str:
    return click.style(text, fg="green")


def bold_green(text: str) -> str:
    return click.style(text, fg="green", bold=True)


def yellow(text: str) -> str:
    return click.style(text, fg="yellow")


def bold_yellow(text: str) -> str:
    return click.style(text, fg="yellow", bold=True)


def blue(text: str) -> str:
    return click.style(text, fg="blue")


def cyan(text: str) -> str:
    return click.style(text, fg="cyan")


def mask_prefix(message: Message, timestamp_format: str) -> str:
    """Render ``<timestamp> [<pid>] [<component>] [<level>] `` for *message*.

    >>> from lib_fanout_log.domain.level import Level
    >>> msg = Message(Level.INFO, "x")
    >>> msg.component_name = "svc"
    >>> mask_prefix(msg, "%Y").endswith("[svc] [Info] ")
    True
    """

    timestamp = message.timestamp.strftime(timestamp_format)
    return f"{timestamp} [{os.getpid()}] [{message.component_name}] [{message.level}] "


def prefixer(prefix: str) -> Processor:
    """Prepend *prefix* to the processed content.

    >>> from lib_fanout_log.domain.level import Level
    >>> msg = Message(Level.INFO, "body")
    >>> prefixer("> ").run(msg); msg.content.processed
    '> body'
    """

    def run(message: Message) -> None:
        message.content.processed = prefix + message.content.processed

    return Processor("Prefixer", run)


def suffixer(suffix: str) -> Processor:
    """Append *suffix* to the processed content.

    >>> message = Message(Level.INFO, "X")
    >>> suffixer("-B").run(message)
    >>> message.content.processed
    'X-B'
    """

    def run(message: Message) -> None:
        message.content.processed += suffix

    return Processor("Suffixer", run)


def change_first_char_case(casing: Casing) -> Processor:
    """Change the first character of the processed content to *casing*.

    Empty content is left untouched.
    """

    def run(message: Message) -> None:
        processed = message.content.processed
        if not processed:
            return
        first = processed[0].upper() if casing is Casing.UPPERCASE else processed[0].lower()
        message.content.processed = first + processed[1:]

    return Processor("ChangeFirstCharCase", run)


def colorize_based_on_level(level_color_map: Mapping[Level, Color]) -> Processor:
    """Colour the content with the helper mapped to the message level, if any."""

    def run(message: Message) -> None:
        color = level_color_map.get(message.level)
        if color is not None:
            message.content.processed = color(message.content.processed)

    return Processor("ColorizeBasedOnLevel", run)


def colorize_based_on_word(word_color_map: Mapping[str, Color]) -> Processor:
    """Colour the whole content once for every mapped word it contains."""

    def run(message: Message) -> None:
        for word, color in word_color_map.items():
            if word in message.content.processed:
                message.content.processed = color(message.content.processed)

    return Processor("ColorizeBasedOnWord", run)


def decolourizer() -> Processor:
    """Strip ANSI styling, e.g. before writing to a file."""

    def run(message: Message) -> None:
        message.content.processed = click.unstyle(message.content.processed)

    return Processor("Decolourizer", run)


def error_simulator(text: str) -> Processor:
    """Return a processor that always raises ``RuntimeError(text)``."""

    def run(message: Message) -> None:
        raise RuntimeError(text)

    return Processor("ErrorSimulator", run)


def force_based_on_level(*levels: Level) -> Processor:
    """Flag messages at any of *levels* as ``FORCE`` so they bypass the ceiling."""

    def run(message: Message) -> None:
        if message.level in levels:
            message.flag = Flag.FORCE

    return Processor("ForceBasedOnLevel", run)


def mute_based_on_level(*levels: Level) -> Processor:
    """Flag messages at any of *levels* as ``MUTE``."""

    def run(message: Message) -> None:
        if message.level in levels:
            message.flag = Flag.MUTE

    return Processor("MuteBasedOnLevel", run)


def prefix_based_on_mask(timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> Processor:
    """Prefix content with the timestamp/pid/component/level mask.

    Example output: ``2021-06-22 12:51:46 [80819] [CLI] [Info] body``.
    """

    def run(message: Message) -> None:
        message.content.processed = mask_prefix(message, timestamp_format) + message.content.processed

    return Processor("PrefixBasedOnMask", run)


def prefix_based_on_mask_except_for_levels(
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT, *levels: Level
) -> Processor:
    """Like :func:`prefix_based_on_mask`, leaving messages at *levels* unprefixed."""

    def run(message: Message) -> None:
        if message.level not in levels:
            message.content.processed = mask_prefix(message, timestamp_format) + message.content.processed

    return Processor("PrefixBasedOnMaskExceptForLevels", run)


def print_only_at_level(*levels: Level) -> Processor:
    """Mute every message whose level is not one of *levels*."""

    def run(message: Message) -> None:
        if message.level not in levels:
            message.flag = Flag.MUTE

    return Processor("PrintOnlyAtLevel", run)


def print_only_if_tagged(tag: str) -> Processor:
    """Mute every message that does not carry *tag*."""

    def run(message: Message) -> None:
        if not message.contain_tag(tag):
            message.flag = Flag.MUTE

    return Processor("PrintOnlyIfTagged", run)


__all__ = [
    "DEFAULT_TIMESTAMP_FORMAT",
    "Casing",
    "Color",
    "blue",
    "bold_green",
    "bold_red",
    "bold_yellow",
    "change_first_char_case",
    "colorize_based_on_level",
    "colorize_based_on_word",
    "cyan",
    "decolourizer",
    "error_simulator",
    "force_based_on_level",
    "green",
    "mask_prefix",
    "mute_based_on_level",
    "prefix_based_on_mask",
    "prefix_based_on_mask_except_for_levels",
    "prefixer",
    "print_only_at_level",
    "print_only_if_tagged",
    "red",
    "suffixer",
    "yellow",
]
