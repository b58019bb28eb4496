# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""A process wide default :class:`FlagSet` and module level shortcuts to it.

This is a convenience for small programs::

    import flagscan

    count = flagscan.declare_int("count", "how many", 0)
    if not flagscan.parse():
        flagscan.report.log_error(flagscan.get_last_error())

Libraries should create their own :class:`FlagSet` instead.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from flagscan.errors import ParseError
from flagscan.registry import FlagHandle, FlagSet, ValueT
from flagscan.values import FlagInfo

command_line = FlagSet()


def declare_bool(name: str, description: str, default: bool = False) -> FlagHandle[bool]:
    return command_line.declare_bool(name, description, default)


def declare_int(name: str, description: str, default: int = 0) -> FlagHandle[int]:
    return command_line.declare_int(name, description, default)


def declare_uint64(name: str, description: str, default: int = 0) -> FlagHandle[int]:
    return command_line.declare_uint64(name, description, default)


def declare_float(name: str, description: str, default: float = 0.0) -> FlagHandle[float]:
    return command_line.declare_float(name, description, default)


def declare_string(name: str, description: str, default: str = "") -> FlagHandle[str]:
    return command_line.declare_string(name, description, default)


def set_bounds(handle: FlagHandle[ValueT], lo: ValueT, hi: ValueT) -> None:
    handle.flagset.set_bounds(handle, lo, hi)


def parse(argv: Sequence[str] | None = None) -> bool:
    """Parses a full argument vector; the first element,
    the program name, is skipped. Defaults to ``sys.argv``.
    """
    if argv is None:
        argv = sys.argv
    return command_line.parse(argv[1:])


def get_last_error() -> ParseError:
    return command_line.last_error


def flags() -> list[FlagInfo]:
    return command_line.flags()
