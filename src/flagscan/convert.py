# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Conversion of raw command line tokens into bounded numeric values.

All converters share one contract. The longest numeric prefix of the
token is parsed into a wider intermediate and classified, in this order:

1. empty text or leading whitespace: ``INVALID_NUMBER``
2. no numeric prefix at all: ``INVALID_NUMBER``
3. magnitude outside the target type: ``OVERFLOW`` / ``UNDERFLOW``
4. characters left over after the prefix: ``INVALID_NUMBER``
5. value outside the caller supplied ``[lo, hi]``: ``OUT_OF_BOUNDS``

Failures raise :class:`~flagscan.errors.ConversionError`.
"""

from __future__ import annotations

import math
import re
from fractions import Fraction
from typing import TypeVar

from flagscan.errors import ConversionError, ErrorKind
from flagscan.values import FLT_MAX, FLT_MIN, INT_MAX, INT_MIN, UINT64_MAX

NumberT = TypeVar("NumberT", int, float)

_INT_PREFIX = re.compile(r"[+-]?[0-9]+")
_UINT_PREFIX = re.compile(r"\+?[0-9]+")
_FLOAT_PREFIX = re.compile(
    r"""
    [+-]?
    (?:
        0x(?P<hex>[0-9a-f]+(?:\.[0-9a-f]*)?|\.[0-9a-f]+)(?:p(?P<hexexp>[+-]?[0-9]+))?
      | (?P<dec>[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e(?P<decexp>[+-]?[0-9]+))?
      | (?P<inf>inf(?:inity)?)
      | (?P<nan>nan)
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)

# Single precision layout: 24 significant bits, smallest normal
# exponent -126, largest finite exponent 127.
_FLT_MANT_DIG = 24
_FLT_MIN_EXP = -126
_FLT_MAX_EXP = 127
# Decimal digits kept before the tail collapses into one sticky digit.
# Every float32 halfway point has fewer significant digits than this.
_MAX_DIGITS = 200
# Exponent literals are clamped to this magnitude.
_MAX_EXPONENT = 10**6
# Stand-ins for literals whose magnitude is far outside the float range.
_HUGE = Fraction(2 ** (_FLT_MAX_EXP + 2))
_TINY = Fraction(1, 2**170)


def _reject_blank(raw: str) -> None:
    # Stricter than the usual number parsers, which skip leading whitespace.
    if raw == "" or raw[0].isspace():
        raise ConversionError(ErrorKind.INVALID_NUMBER, raw, "empty or leading whitespace")


def _reject_trailing(raw: str, match: re.Match[str]) -> None:
    if match.end() != len(raw):
        raise ConversionError(
            ErrorKind.INVALID_NUMBER,
            raw,
            f"unexpected trailing characters {raw[match.end() :]!r}",
        )


def _check_bounds(raw: str, value: NumberT, lo: NumberT, hi: NumberT) -> NumberT:
    # Written negated so that NaN never passes.
    if not lo <= value <= hi:
        raise ConversionError(ErrorKind.OUT_OF_BOUNDS, raw, f"not within [{lo}, {hi}]")
    return value


def _widen(literal: str, limit: int) -> int:
    """Parses a decimal integer literal. Magnitudes with more
    digits than ``limit`` are clamped to ``limit + 1``, which keeps
    overlong input away from :func:`int` and still classifies
    as out of range.
    """
    sign = -1 if literal.startswith("-") else 1
    digits = literal.lstrip("+-").lstrip("0") or "0"
    if len(digits) > len(str(limit)):
        return sign * (limit + 1)
    return sign * int(digits)


def _exponent(literal: str | None) -> int:
    if literal is None:
        return 0
    return max(-_MAX_EXPONENT, min(_MAX_EXPONENT, _widen(literal, _MAX_EXPONENT)))


def _exact_decimal(mantissa: str, exponent: str | None) -> Fraction:
    """Returns the exact magnitude of a decimal float literal."""
    whole, _, frac = mantissa.partition(".")
    digits = (whole + frac).lstrip("0")
    if digits == "":
        return Fraction(0)

    exp10 = _exponent(exponent) - len(frac)
    if len(digits) > _MAX_DIGITS:
        sticky = "1" if digits[_MAX_DIGITS:].strip("0") != "" else ""
        exp10 += len(digits) - _MAX_DIGITS - len(sticky)
        digits = digits[:_MAX_DIGITS] + sticky

    # 10**magnitude <= value < 10**(magnitude + 1)
    magnitude = exp10 + len(digits) - 1
    if magnitude > 40:
        return _HUGE
    if magnitude < -50:
        return _TINY
    return Fraction(int(digits)) * Fraction(10) ** exp10


def _exact_hex(mantissa: str, exponent: str | None) -> Fraction:
    """Returns the exact magnitude of a hexadecimal float literal."""
    whole, _, frac = mantissa.partition(".")
    digits = (whole + frac).lstrip("0")
    if digits == "":
        return Fraction(0)

    # The int() length limit does not apply to base 16.
    significand = int(digits, 16)
    exp2 = _exponent(exponent) - 4 * len(frac)

    # 2**magnitude <= value < 2**(magnitude + 1)
    magnitude = exp2 + significand.bit_length() - 1
    if magnitude > _FLT_MAX_EXP + 1:
        return _HUGE
    if magnitude < _FLT_MIN_EXP - _FLT_MANT_DIG - 2:
        return _TINY
    return Fraction(significand) * Fraction(2) ** exp2


def _round_float32(value: Fraction) -> float:
    """Rounds a nonnegative exact value to the nearest single
    precision float, ties to even. Raises :class:`OverflowError`
    if the result is infinite.
    """
    if value == 0:
        return 0.0

    exp = value.numerator.bit_length() - value.denominator.bit_length()
    if value < Fraction(2) ** exp:
        exp -= 1

    # Subnormals share the quantum of the smallest normal binade.
    quantum = max(exp, _FLT_MIN_EXP) - (_FLT_MANT_DIG - 1)
    significand = round(value / Fraction(2) ** quantum)
    result = math.ldexp(significand, quantum)
    if result > FLT_MAX:
        raise OverflowError("value rounds to infinity in single precision")
    return result


def convert_int(raw: str, lo: int = INT_MIN, hi: int = INT_MAX) -> int:
    """Converts ``raw`` to a signed 32 bit integer within ``[lo, hi]``."""
    _reject_blank(raw)

    if (match := _INT_PREFIX.match(raw)) is None:
        raise ConversionError(ErrorKind.INVALID_NUMBER, raw, "not an integer")

    value = _widen(match.group(0), -INT_MIN)
    if value > INT_MAX:
        raise ConversionError(ErrorKind.OVERFLOW, raw, f"larger than {INT_MAX}")
    if value < INT_MIN:
        raise ConversionError(ErrorKind.UNDERFLOW, raw, f"smaller than {INT_MIN}")

    _reject_trailing(raw, match)
    return _check_bounds(raw, value, lo, hi)


def convert_uint64(raw: str, lo: int = 0, hi: int = UINT64_MAX) -> int:
    """Converts ``raw`` to an unsigned 64 bit integer within ``[lo, hi]``.

    A minus sign is not part of an unsigned literal, so negative
    input is ``INVALID_NUMBER`` and ``UNDERFLOW`` never occurs.
    """
    _reject_blank(raw)

    if (match := _UINT_PREFIX.match(raw)) is None:
        raise ConversionError(ErrorKind.INVALID_NUMBER, raw, "not an unsigned integer")

    value = _widen(match.group(0), UINT64_MAX)
    if value > UINT64_MAX:
        raise ConversionError(ErrorKind.OVERFLOW, raw, f"larger than {UINT64_MAX}")

    _reject_trailing(raw, match)
    return _check_bounds(raw, value, lo, hi)


def convert_float(raw: str, lo: float = -FLT_MAX, hi: float = FLT_MAX) -> float:
    """Converts ``raw`` to a single precision float within ``[lo, hi]``.

    Decimal and hexadecimal (``0x1.8p3``) literals are accepted, as
    are the spellings ``inf``, ``infinity`` and ``nan``. Literals are
    held exactly and rounded to single precision once, ties to even.
    A finite literal which rounds to infinity is ``OVERFLOW``, a nonzero
    literal which rounds to a subnormal or zero is ``UNDERFLOW``.
    """
    _reject_blank(raw)

    if (match := _FLOAT_PREFIX.match(raw)) is None:
        raise ConversionError(ErrorKind.INVALID_NUMBER, raw, "not a floating point number")

    literal = match.group(0)
    if match["nan"] is not None:
        value = math.nan
    elif match["inf"] is not None:
        value = -math.inf if literal.startswith("-") else math.inf
    else:
        if match["hex"] is not None:
            exact = _exact_hex(match["hex"], match["hexexp"])
        else:
            exact = _exact_decimal(match["dec"], match["decexp"])

        try:
            magnitude = _round_float32(exact)
        except OverflowError:
            raise ConversionError(ErrorKind.OVERFLOW, raw, "too large for a float") from None
        if magnitude < FLT_MIN and exact != 0:
            raise ConversionError(ErrorKind.UNDERFLOW, raw, "too small for a float")

        value = -magnitude if literal.startswith("-") else magnitude

    _reject_trailing(raw, match)
    return _check_bounds(raw, value, lo, hi)
