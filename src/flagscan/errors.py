# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import IntEnum, unique

from pydantic import BaseModel, ConfigDict


@unique
class ErrorKind(IntEnum):
    """The closed set of reasons a parse can fail.
    ``NONE`` is the sentinel reported before any parse failed.
    """

    NONE = 0
    UNKNOWN = 1
    NO_VALUE = 2
    INVALID_NUMBER = 3
    OVERFLOW = 4
    UNDERFLOW = 5
    OUT_OF_BOUNDS = 6


class ParseError(BaseModel):
    """The record describing the last failed parse of a :class:`FlagSet`.

    ``flag`` holds the flag name (or, for ``UNKNOWN``, the raw token)
    and ``value`` the raw value token, if one was consumed.
    """

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = ErrorKind.NONE
    flag: str | None = None
    value: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == ErrorKind.NONE

    def __str__(self) -> str:
        from flagscan.report import format_error

        return format_error(self)


NO_ERROR = ParseError()


class ConversionError(ValueError):
    """Raised by the numeric converters; carries the classified kind."""

    def __init__(self, kind: ErrorKind, raw: str, message: str | None = None):
        self.kind = kind
        self.raw = raw
        self.message = message

        super().__init__(message)

    def __str__(self) -> str:
        message = f"{self.kind.name} for {self.raw!r}"

        if self.message is not None:
            message = f"{message}; {self.message}"

        return message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({repr(str(self))})"


class FlagDefinitionError(Exception):
    """Base class for programming errors while declaring flags.

    These indicate a broken program, not bad user input,
    and are not meant to be caught.
    """


class RegistryFullError(FlagDefinitionError):
    pass


class DuplicateFlagError(FlagDefinitionError):
    pass


class InvalidFlagNameError(FlagDefinitionError):
    pass


class BoundsError(FlagDefinitionError):
    pass
