# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""The typed value model behind every declared flag.

Each of the five flag kinds is its own pydantic model carrying a
``type`` tag; :data:`Flag` is the closed union of them. Consumers
``match`` on the model class and finish with :func:`typing.assert_never`
so that a new kind cannot be added without handling it everywhere.
"""

from __future__ import annotations

import struct
from enum import Enum, unique
from typing import Annotated, Literal, TypeAlias, assert_never

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, Strict, StrictBool, StrictInt

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
UINT64_MAX = 2**64 - 1
# Largest finite and smallest normal IEEE-754 single precision values.
FLT_MAX: float = struct.unpack("<f", bytes.fromhex("ffff7f7f"))[0]
FLT_MIN = 2.0**-126


def to_float32(value: float) -> float:
    """Rounds ``value`` to the nearest single precision float.

    Raises :class:`OverflowError` if a finite ``value`` rounds
    to infinity.
    """
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _narrow_float32(value: float) -> float:
    try:
        return to_float32(value)
    except OverflowError:
        raise ValueError(f"{value!r} is out of range for a single precision float") from None


Int32 = Annotated[StrictInt, Field(ge=INT_MIN, le=INT_MAX)]
UInt64 = Annotated[StrictInt, Field(ge=0, le=UINT64_MAX)]
# Strict floats still accept ints, but no numeric strings.
Float32 = Annotated[float, Strict(), AfterValidator(_narrow_float32)]


@unique
class FlagType(Enum):
    BOOL = "bool"
    INT = "int"
    UINT64 = "uint64"
    FLOAT = "float"
    STRING = "string"


class _FlagBase(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    name: str
    description: str


class BoolFlag(_FlagBase):
    type: Literal[FlagType.BOOL] = FlagType.BOOL
    default: StrictBool
    value: StrictBool


class IntFlag(_FlagBase):
    type: Literal[FlagType.INT] = FlagType.INT
    default: Int32
    value: Int32
    min: Int32 = INT_MIN
    max: Int32 = INT_MAX


class UInt64Flag(_FlagBase):
    type: Literal[FlagType.UINT64] = FlagType.UINT64
    default: UInt64
    value: UInt64
    min: UInt64 = 0
    max: UInt64 = UINT64_MAX


class FloatFlag(_FlagBase):
    type: Literal[FlagType.FLOAT] = FlagType.FLOAT
    default: Float32
    value: Float32
    min: Float32 = -FLT_MAX
    max: Float32 = FLT_MAX


class StringFlag(_FlagBase):
    type: Literal[FlagType.STRING] = FlagType.STRING
    default: str
    value: str


Flag: TypeAlias = BoolFlag | IntFlag | UInt64Flag | FloatFlag | StringFlag
NumericFlag: TypeAlias = IntFlag | UInt64Flag | FloatFlag

FlagValue: TypeAlias = bool | int | float | str


class FlagInfo(BaseModel):
    """Read-only snapshot of a declared flag, used for help output."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    type: FlagType
    default: FlagValue
    value: FlagValue
    min: int | float | None = None
    max: int | float | None = None

    @classmethod
    def from_flag(cls, flag: Flag) -> FlagInfo:
        match flag:
            case BoolFlag() | StringFlag():
                return cls(
                    name=flag.name,
                    description=flag.description,
                    type=flag.type,
                    default=flag.default,
                    value=flag.value,
                )
            case IntFlag() | UInt64Flag() | FloatFlag():
                return cls(
                    name=flag.name,
                    description=flag.description,
                    type=flag.type,
                    default=flag.default,
                    value=flag.value,
                    min=flag.min,
                    max=flag.max,
                )
            case _:
                assert_never(flag)
