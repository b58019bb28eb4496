# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar, assert_never, cast

from pydantic import ValidationError

from flagscan.errors import (
    NO_ERROR,
    BoundsError,
    DuplicateFlagError,
    InvalidFlagNameError,
    ParseError,
    RegistryFullError,
)
from flagscan.log import get_logger
from flagscan.parser import FLAG_MARKER, scan
from flagscan.values import (
    BoolFlag,
    Flag,
    FlagInfo,
    FloatFlag,
    IntFlag,
    StringFlag,
    UInt64Flag,
)

logger = get_logger(__name__)

MAX_FLAGS = 128

ValueT = TypeVar("ValueT", bool, int, float, str)


@dataclass(frozen=True)
class FlagHandle(Generic[ValueT]):
    """A lightweight reference to one flag of a :class:`FlagSet`.

    The handle stays valid for the lifetime of its flag set;
    read :attr:`value` after parsing to get the parsed value.
    """

    flagset: FlagSet
    index: int

    @property
    def name(self) -> str:
        return self.flagset.flag_at(self.index).name

    @property
    def value(self) -> ValueT:
        return cast(ValueT, self.flagset.flag_at(self.index).value)

    @property
    def default(self) -> ValueT:
        return cast(ValueT, self.flagset.flag_at(self.index).default)

    def info(self) -> FlagInfo:
        return FlagInfo.from_flag(self.flagset.flag_at(self.index))


class FlagSet:
    """An ordered registry of typed flags together with the
    error state of its last failed parse.

    Flags are declared with the ``declare_*`` methods, which return a
    :class:`FlagHandle`, and are then filled in by :meth:`parse`.
    """

    def __init__(self, max_flags: int = MAX_FLAGS) -> None:
        if max_flags < 1:
            raise ValueError(f"max_flags must be positive, got {max_flags}")

        self.max_flags = max_flags
        self._flags: list[Flag] = []
        self._last_error: ParseError = NO_ERROR
        # Declaration, bound setting and parsing are serialized.
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        names = ", ".join(f.name for f in self._flags)
        return f"{type(self).__name__}([{names}])"

    @property
    def last_error(self) -> ParseError:
        """The error of the most recent failed :meth:`parse`.

        A later successful parse does not reset it; use the
        return value of :meth:`parse` to decide success.
        """
        return self._last_error

    def flag_at(self, index: int) -> Flag:
        return self._flags[index]

    def lookup(self, name: str) -> Flag | None:
        for flag in self._flags:
            if flag.name == name:
                return flag
        return None

    def flags(self) -> list[FlagInfo]:
        """Returns snapshots of all flags in declaration order."""
        return [FlagInfo.from_flag(flag) for flag in self._flags]

    def _append(self, flag: Flag) -> FlagHandle[ValueT]:
        with self._lock:
            if len(self._flags) >= self.max_flags:
                raise RegistryFullError(
                    f"cannot declare {flag.name!r}: registry is full ({self.max_flags} flags)"
                )
            if self.lookup(flag.name) is not None:
                raise DuplicateFlagError(f"flag {flag.name!r} is already declared")

            self._flags.append(flag)
            logger.trace(f"declared {flag.type.value} flag {flag.name!r}")
            return FlagHandle(self, len(self._flags) - 1)

    @staticmethod
    def _check_name(name: str) -> None:
        if name == "":
            raise InvalidFlagNameError("flag name must not be empty")
        if name.startswith(FLAG_MARKER):
            raise InvalidFlagNameError(
                f"flag name {name!r} must be given without the leading {FLAG_MARKER!r}"
            )

    def declare_bool(self, name: str, description: str, default: bool = False) -> FlagHandle[bool]:
        self._check_name(name)
        return self._append(
            BoolFlag(name=name, description=description, default=default, value=default)
        )

    def declare_int(self, name: str, description: str, default: int = 0) -> FlagHandle[int]:
        self._check_name(name)
        return self._append(
            IntFlag(name=name, description=description, default=default, value=default)
        )

    def declare_uint64(self, name: str, description: str, default: int = 0) -> FlagHandle[int]:
        self._check_name(name)
        return self._append(
            UInt64Flag(name=name, description=description, default=default, value=default)
        )

    def declare_float(
        self, name: str, description: str, default: float = 0.0
    ) -> FlagHandle[float]:
        self._check_name(name)
        return self._append(
            FloatFlag(name=name, description=description, default=default, value=default)
        )

    def declare_string(self, name: str, description: str, default: str = "") -> FlagHandle[str]:
        self._check_name(name)
        return self._append(
            StringFlag(name=name, description=description, default=default, value=default)
        )

    def set_bounds(self, handle: FlagHandle[ValueT], lo: ValueT, hi: ValueT) -> None:
        """Narrows the inclusive range a numeric flag accepts.

        Swapped arguments are reordered. The current value is not
        revalidated, so bounds belong before :meth:`parse`.
        """
        if handle.flagset is not self:
            raise BoundsError(f"flag {handle.name!r} belongs to another flag set")

        flag = self.flag_at(handle.index)
        match flag:
            case IntFlag() | UInt64Flag() | FloatFlag():
                pass
            case BoolFlag() | StringFlag():
                raise BoundsError(f"{flag.type.value} flag {flag.name!r} has no bounds")
            case _:
                assert_never(flag)

        with self._lock:
            bounds = {"min": min(lo, hi), "max": max(lo, hi)}  # type: ignore[type-var]
            try:
                checked = flag.model_validate(flag.model_dump() | bounds)
            except ValidationError as e:
                raise BoundsError(
                    f"invalid bounds [{lo}, {hi}] for {flag.type.value} flag {flag.name!r}: {e}"
                ) from e
            flag.min, flag.max = checked.min, checked.max

        logger.trace(f"bounds of {flag.name!r} set to [{flag.min}, {flag.max}]")

    def parse(self, arguments: Sequence[str]) -> bool:
        """Parses ``arguments`` (without the program name).

        Returns ``False`` on the first error, which is then
        available as :attr:`last_error`.
        """
        with self._lock:
            error = scan(self, arguments)
            if error is not None:
                self._last_error = error
                return False
            return True
