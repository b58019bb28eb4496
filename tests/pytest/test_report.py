# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from io import StringIO

import pytest

from flagscan import ErrorKind, FlagSet, ParseError
from flagscan.report import format_error, format_options, format_usage, log_error, log_options


@pytest.mark.parametrize(
    "error,expected",
    [
        (
            ParseError(),
            "No error. Only report an error after parse() returned False!",
        ),
        (
            ParseError(kind=ErrorKind.UNKNOWN, flag="-bogus"),
            'ERROR: UNKNOWN flag "-bogus"',
        ),
        (
            ParseError(kind=ErrorKind.UNKNOWN, flag="--bogus"),
            'ERROR: UNKNOWN flag "--bogus"',
        ),
        (
            ParseError(kind=ErrorKind.UNKNOWN, flag="count"),
            'ERROR: UNKNOWN command "count"',
        ),
        (
            ParseError(kind=ErrorKind.NO_VALUE, flag="count"),
            'ERROR: NO VALUE provided for flag "count"',
        ),
        (
            ParseError(kind=ErrorKind.INVALID_NUMBER, flag="count", value="abc"),
            'ERROR: INVALID VALUE for flag "count". Provided value was "abc"',
        ),
        (
            ParseError(kind=ErrorKind.OVERFLOW, flag="count", value="9999999999"),
            'ERROR: OVERFLOW while parsing flag "count". Provided value was "9999999999"',
        ),
        (
            ParseError(kind=ErrorKind.UNDERFLOW, flag="ratio", value="1e-50"),
            'ERROR: UNDERFLOW while parsing flag "ratio". Provided value was "1e-50"',
        ),
        (
            ParseError(kind=ErrorKind.OUT_OF_BOUNDS, flag="count", value="20"),
            'ERROR: Value OUT OF BOUNDS for flag "count". Provided value was "20"',
        ),
    ],
)
def test_format_error(error: ParseError, expected: str) -> None:
    assert format_error(error) == expected
    assert str(error) == expected


def test_log_error() -> None:
    flags = FlagSet()
    flags.declare_int("count", "", 0)
    assert not flags.parse(["-count"])

    buf = StringIO()
    log_error(flags.last_error, buf)
    assert buf.getvalue() == 'ERROR: NO VALUE provided for flag "count"\n'


def test_log_error_bare_token() -> None:
    flags = FlagSet()
    flags.declare_int("count", "", 0)
    assert not flags.parse(["count", "5"])

    buf = StringIO()
    log_error(flags.last_error, buf)
    assert buf.getvalue() == 'ERROR: UNKNOWN command "count"\n'


def test_format_usage() -> None:
    assert format_usage("demo") == "Usage: demo [OPTIONS]"


@pytest.fixture
def flags() -> FlagSet:
    flags = FlagSet()
    flags.declare_bool("verbose", "be chatty", False)
    count = flags.declare_int("count", "how many", 3)
    flags.set_bounds(count, 1, 10)
    flags.declare_float("ratio", "a ratio", 0.5)
    flags.declare_string("name", "a name", "widget")
    return flags


def test_format_options_defaults(flags: FlagSet) -> None:
    expected = """\
    -verbose
          be chatty
          Default: false
    -count
          how many
          Default: 3
    -ratio
          a ratio
          Default: 0.500000
    -name
          a name
          Default: widget"""
    assert format_options(flags.flags()) == expected


def test_format_options_minmax(flags: FlagSet) -> None:
    out = format_options(flags.flags()[:2], print_default=False, print_minmax=True)
    expected = """\
    -verbose
          be chatty
    -count
          how many
          Min:     1
          Max:     10"""
    assert out == expected


def test_format_options_names_only(flags: FlagSet) -> None:
    out = format_options(flags.flags(), print_default=False)
    assert out.splitlines()[::2] == ["    -verbose", "    -count", "    -ratio", "    -name"]


def test_log_options(flags: FlagSet) -> None:
    buf = StringIO()
    log_options(flags.flags(), buf)
    assert buf.getvalue() == format_options(flags.flags()) + "\n"

    buf = StringIO()
    log_options(FlagSet().flags(), buf)
    assert buf.getvalue() == ""
