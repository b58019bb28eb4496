# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Typed command line flags.

Declare flags of fixed primitive types on a :class:`FlagSet`, parse an
argument list against them and read the typed values back through the
returned handles. A failed parse leaves a structured :class:`ParseError`
on the flag set.
"""

from flagscan import report
from flagscan.commandline import (
    command_line,
    declare_bool,
    declare_float,
    declare_int,
    declare_string,
    declare_uint64,
    flags,
    get_last_error,
    parse,
    set_bounds,
)
from flagscan.errors import (
    BoundsError,
    ConversionError,
    DuplicateFlagError,
    ErrorKind,
    FlagDefinitionError,
    InvalidFlagNameError,
    ParseError,
    RegistryFullError,
)
from flagscan.registry import MAX_FLAGS, FlagHandle, FlagSet
from flagscan.values import FlagInfo, FlagType

__all__ = [
    "MAX_FLAGS",
    "BoundsError",
    "ConversionError",
    "DuplicateFlagError",
    "ErrorKind",
    "FlagDefinitionError",
    "FlagHandle",
    "FlagInfo",
    "FlagSet",
    "FlagType",
    "InvalidFlagNameError",
    "ParseError",
    "RegistryFullError",
    "command_line",
    "declare_bool",
    "declare_float",
    "declare_int",
    "declare_string",
    "declare_uint64",
    "flags",
    "get_last_error",
    "parse",
    "set_bounds",
    "report",
]
