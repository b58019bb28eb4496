# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Human readable rendering of parse errors and declared flags."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO, assert_never

from flagscan.errors import ErrorKind, ParseError
from flagscan.parser import FLAG_MARKER
from flagscan.values import FlagInfo, FlagType, FlagValue

_INDENT = " " * 4
_DETAIL_INDENT = " " * 10


def format_error(error: ParseError) -> str:
    # Tokens without the marker were meant as commands, not flags.
    noun = "flag"
    if error.kind == ErrorKind.UNKNOWN and not (error.flag or "").startswith(FLAG_MARKER):
        noun = "command"
    flag = f'{noun} "{error.flag}"'
    provided = f'Provided value was "{error.value}"'

    match error.kind:
        case ErrorKind.NONE:
            return "No error. Only report an error after parse() returned False!"
        case ErrorKind.UNKNOWN:
            return f"ERROR: UNKNOWN {flag}"
        case ErrorKind.NO_VALUE:
            return f"ERROR: NO VALUE provided for {flag}"
        case ErrorKind.INVALID_NUMBER:
            return f"ERROR: INVALID VALUE for {flag}. {provided}"
        case ErrorKind.OVERFLOW:
            return f"ERROR: OVERFLOW while parsing {flag}. {provided}"
        case ErrorKind.UNDERFLOW:
            return f"ERROR: UNDERFLOW while parsing {flag}. {provided}"
        case ErrorKind.OUT_OF_BOUNDS:
            return f"ERROR: Value OUT OF BOUNDS for {flag}. {provided}"
        case _:
            assert_never(error.kind)


def log_error(error: ParseError, stream: TextIO | None = None) -> None:
    print(format_error(error), file=stream if stream is not None else sys.stderr)


def format_usage(prog: str) -> str:
    return f"Usage: {prog} [OPTIONS]"


def _format_value(type_: FlagType, value: FlagValue | None) -> str:
    match type_:
        case FlagType.BOOL:
            return "true" if value else "false"
        case FlagType.INT | FlagType.UINT64:
            return str(value)
        case FlagType.FLOAT:
            assert isinstance(value, float | int)
            return f"{value:f}"
        case FlagType.STRING:
            return "" if value is None else str(value)
        case _:
            assert_never(type_)


def format_options(
    flags: Iterable[FlagInfo],
    print_default: bool = True,
    print_minmax: bool = False,
) -> str:
    """Renders one block per flag, in the given order.

    :param print_default: Include a ``Default:`` line.
    :param print_minmax: Include ``Min:``/``Max:`` lines for numeric flags.
    """
    lines = []
    for flag in flags:
        lines.append(f"{_INDENT}{FLAG_MARKER}{flag.name}")
        lines.append(f"{_DETAIL_INDENT}{flag.description}")

        if print_default:
            lines.append(f"{_DETAIL_INDENT}Default: {_format_value(flag.type, flag.default)}")
        if print_minmax and flag.min is not None and flag.max is not None:
            lines.append(f"{_DETAIL_INDENT}Min:     {_format_value(flag.type, flag.min)}")
            lines.append(f"{_DETAIL_INDENT}Max:     {_format_value(flag.type, flag.max)}")

    return "\n".join(lines)


def log_options(
    flags: Iterable[FlagInfo],
    stream: TextIO | None = None,
    print_default: bool = True,
    print_minmax: bool = False,
) -> None:
    if out := format_options(flags, print_default, print_minmax):
        print(out, file=stream)
