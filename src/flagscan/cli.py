# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""``flagscan-demo``: a small program showing the flag registry at work."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

import exitcode

from flagscan.config import load_config_file
from flagscan.errors import RegistryFullError
from flagscan.log import get_logger, setup_logging
from flagscan.registry import MAX_FLAGS, FlagSet
from flagscan.report import format_usage, log_error, log_options

logger = get_logger(__name__)


def print_help(prog: str, flagset: FlagSet) -> None:
    print(format_usage(prog))
    print("Options:")
    log_options(flagset.flags(), sys.stdout, print_default=True)


def count_to(limit: int) -> list[int]:
    step = 1 if limit >= 0 else -1
    return list(range(0, limit + step, step))


def run(argv: Sequence[str], max_flags: int = MAX_FLAGS) -> int:
    prog = Path(argv[0]).name if len(argv) > 0 else "flagscan-demo"

    flagset = FlagSet(max_flags=max_flags)
    help_ = flagset.declare_bool("h", "Prints this help menu", False)
    iterations = flagset.declare_int("i", "Print all integers up to i", 0)
    number = flagset.declare_uint64(
        "n", "A uint64 number which is printed before exiting the program", 0
    )
    number2 = flagset.declare_float(
        "n2", "A floating point number which is printed before exiting the program", 0.0
    )
    printme = flagset.declare_string("s", "A string which is printed to stdout", "")

    if not flagset.parse(argv[1:]):
        logger.debug(f"parsing {list(argv[1:])} failed: {flagset.last_error!r}")
        log_error(flagset.last_error, sys.stdout)
        print_help(prog, flagset)
        return exitcode.USAGE

    if help_.value:
        print_help(prog, flagset)
        return exitcode.OK

    if iterations.value != 0:
        for i in count_to(iterations.value):
            print(i)

    if number.value != 0:
        print(f"n  = {number.value}")
    if number2.value != 0.0:
        print(f"n2 = {number2.value:.38f}")
    if printme.value != "":
        print(f"s  = {printme.value}")

    return exitcode.OK


def main() -> None:
    try:
        config, config_path = load_config_file()
        level = config.loglevel
        color_mode = config.color_mode
        max_flags = config.max_flags
    except (ValueError, FileNotFoundError) as e:
        print(f"invalid config: {e}", file=sys.stderr)
        sys.exit(exitcode.CONFIG)

    setup_logging(level=level, color_mode=color_mode)
    if config_path is not None:
        logger.notice(f"loaded config: {config_path}")

    try:
        code = run(sys.argv, max_flags)
    except RegistryFullError as e:
        print(f"invalid config: flagscan.max_flags: {e}", file=sys.stderr)
        sys.exit(exitcode.CONFIG)

    sys.exit(code)


if __name__ == "__main__":
    main()
