# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from typing import TYPE_CHECKING, assert_never

from flagscan.convert import convert_float, convert_int, convert_uint64
from flagscan.errors import ConversionError, ErrorKind, ParseError
from flagscan.log import get_logger
from flagscan.values import BoolFlag, FloatFlag, IntFlag, StringFlag, UInt64Flag

if TYPE_CHECKING:
    from flagscan.registry import FlagSet

logger = get_logger(__name__)

FLAG_MARKER = "-"


def flag_name(token: str) -> str | None:
    """Returns the flag name a token refers to, or None if the token
    carries no flag marker. ``-name`` and ``--name`` are equivalent.
    """
    if not token.startswith(FLAG_MARKER):
        return None
    return token[len(FLAG_MARKER) :].removeprefix(FLAG_MARKER)


def scan(flagset: FlagSet, arguments: Sequence[str]) -> ParseError | None:
    """Assigns ``arguments`` to the flags of ``flagset`` in a single pass.

    Scanning stops at the first error, which is returned. Flags
    assigned before that point keep their new values.
    """
    args = deque(arguments)

    while args:
        token = args.popleft()

        name = flag_name(token)
        flag = flagset.lookup(name) if name is not None else None
        if flag is None:
            logger.debug(f"unknown flag {token!r}")
            return ParseError(kind=ErrorKind.UNKNOWN, flag=token)

        if isinstance(flag, BoolFlag):
            flag.value = True
            logger.trace(f"{flag.name} = True")
            continue

        if not args:
            logger.debug(f"no value for flag {flag.name!r}")
            return ParseError(kind=ErrorKind.NO_VALUE, flag=flag.name)

        raw = args.popleft()
        try:
            match flag:
                case IntFlag():
                    flag.value = convert_int(raw, flag.min, flag.max)
                case UInt64Flag():
                    flag.value = convert_uint64(raw, flag.min, flag.max)
                case FloatFlag():
                    flag.value = convert_float(raw, flag.min, flag.max)
                case StringFlag():
                    flag.value = raw
                case _:
                    assert_never(flag)
        except ConversionError as e:
            logger.debug(f"flag {flag.name!r}: {e}")
            return ParseError(kind=e.kind, flag=flag.name, value=raw)

        logger.trace(f"{flag.name} = {flag.value!r}")

    return None
