# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import atexit
import datetime
import logging
import os
import sys
import traceback
from enum import Enum, IntEnum, unique
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from typing import TYPE_CHECKING, Any, TextIO, cast

if TYPE_CHECKING:
    from logging import _ExcInfoType


@unique
class ColorMode(Enum):
    """ColorMode is used as an argument to :func:`setup_logging`."""

    #: Colors are always turned on.
    ALWAYS = "always"
    #: Colors are turned off if the target
    #: stream (e.g. stderr) is not a tty.
    AUTO = "auto"
    #: No colors are used. In other words,
    #: no ANSI escape codes are included.
    NEVER = "never"


def resolve_color_mode(mode: ColorMode, stream: TextIO = sys.stderr) -> bool:
    """Decides whether the console log handler emits colors.

    :param mode: The available options are described in :class:`ColorMode`.
    :param stream: Used as a reference for :attr:`ColorMode.AUTO`.
    """
    if sys.platform == "win32":
        return False

    match mode:
        case ColorMode.ALWAYS:
            return True
        case ColorMode.AUTO:
            if os.getenv("NO_COLOR") is not None:
                return False
            else:
                return stream.isatty()
        case ColorMode.NEVER:
            return False


# https://stackoverflow.com/a/35804945
def _add_logging_level(level_name: str, level_num: int) -> None:
    method_name = level_name.lower()

    # Another library in the same process may have registered it already.
    if getattr(logging, level_name, None) == level_num:
        return

    if hasattr(logging, level_name):
        raise AttributeError(f"{level_name} already defined in logging module")
    if hasattr(logging, method_name):
        raise AttributeError(f"{method_name} already defined in logging module")
    if hasattr(logging.getLoggerClass(), method_name):
        raise AttributeError(f"{method_name} already defined in logger class")

    def for_level(self, message, *args, **kwargs):  # type: ignore
        if self.isEnabledFor(level_num):
            self._log(
                level_num,
                message,
                args,
                **kwargs,
            )

    def to_root(message, *args, **kwargs):  # type: ignore
        logging.log(level_num, message, *args, **kwargs)

    logging.addLevelName(level_num, level_name)
    setattr(logging, level_name, level_num)
    setattr(logging.getLoggerClass(), method_name, for_level)
    setattr(logging, method_name, to_root)


_add_logging_level("TRACE", 5)
_add_logging_level("NOTICE", 25)


@unique
class Loglevel(IntEnum):
    """A wrapper around the constants exposed by python's
    ``logging`` module. flagscan adds two additional
    loglevels (``NOTICE`` and ``TRACE``); this class
    provides a type safe way to access all of them.
    """

    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    NOTICE = logging.NOTICE  # type: ignore
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = logging.TRACE  # type: ignore

    @classmethod
    def from_str(cls, string: str) -> Loglevel:
        """Converts a string to an instance of Loglevel.
        ``string`` can be a numeric python loglevel (e.g. ``10``)
        or a case insensitive name of the level (e.g. ``debug``).
        """
        if string.isnumeric():
            return cls(int(string, 0))

        match string.lower():
            case "critical":
                return cls.CRITICAL
            case "error":
                return cls.ERROR
            case "warning":
                return cls.WARNING
            case "notice":
                return cls.NOTICE
            case "info":
                return cls.INFO
            case "debug":
                return cls.DEBUG
            case "trace":
                return cls.TRACE
            case _:
                raise ValueError(f"{string} not a valid loglevel")


def setup_logging(
    level: Loglevel | None = None,
    color_mode: ColorMode = ColorMode.AUTO,
    logger_name: str = "flagscan",
) -> None:
    """Enable and configure flagscan's logging system.
    The library itself never calls this; applications
    (such as ``flagscan-demo``) do, as early as possible.
    A QueueHandler is installed to avoid blocking calls
    during logging.

    :param level: The loglevel to enable for the console handler.
                  If this argument is None, the env variable
                  ``FLAGSCAN_LOGLEVEL`` is read.
    :param color_mode: The color mode to use for the console.
    :param logger_name: The logger which receives the handler.
    """
    if level is None:
        if (raw := os.getenv("FLAGSCAN_LOGLEVEL")) is not None:
            level = Loglevel.from_str(raw)
        else:
            level = Loglevel.WARNING

    logging.logMultiprocessing = False
    logging.logThreads = False
    logging.logProcesses = False

    logger = logging.getLogger(logger_name)
    # LogLevel cannot be 0 (NOTSET), because only the root logger sends it to its handlers then
    logger.setLevel(1)

    while len(logger.handlers) > 0:
        logger.handlers[0].close()
        logger.removeHandler(logger.handlers[0])
    colored = resolve_color_mode(color_mode)
    add_stderr_log_handler(logger_name, level, colored)


def add_stderr_log_handler(
    logger_name: str,
    level: Loglevel,
    colored: bool,
) -> None:
    queue: Queue[Any] = Queue()
    logger = logging.getLogger(logger_name)
    logger.addHandler(QueueHandler(queue))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    console_formatter = _ConsoleFormatter()
    console_formatter.colored = colored
    stderr_handler.terminator = ""  # We manually handle the terminator while formatting
    stderr_handler.setFormatter(console_formatter)

    queue_listener = QueueListener(
        queue,
        *[stderr_handler],
        respect_handler_level=True,
    )
    queue_listener.start()
    atexit.register(queue_listener.stop)


@unique
class _Color(Enum):
    NOP = ""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    GRAY = "\033[0;38;5;245m"


def _colorize_msg(data: str, levelno: int) -> str:
    match levelno:
        case Loglevel.TRACE | Loglevel.DEBUG:
            style = _Color.GRAY.value
        case Loglevel.NOTICE:
            style = _Color.BOLD.value
        case Loglevel.WARNING:
            style = _Color.YELLOW.value
        case Loglevel.ERROR:
            style = _Color.RED.value
        case Loglevel.CRITICAL:
            style = _Color.RED.value + _Color.BOLD.value
        case _:
            style = _Color.NOP.value

    return style + data + _Color.RESET.value


def _format_record(
    dt: datetime.datetime,
    name: str,
    data: str,
    levelno: int,
    stacktrace: str | None,
    colored: bool = False,
) -> str:
    msg = dt.strftime("%b %d %H:%M:%S.%f")[:-3]
    msg += " "
    msg += name
    msg += ": "
    msg += _colorize_msg(data, levelno) if colored else data
    msg += "\n"

    if stacktrace is not None:
        msg += "\n"
        msg += stacktrace

    return msg


class _ConsoleFormatter(logging.Formatter):
    colored: bool = False

    def format(
        self,
        record: logging.LogRecord,
    ) -> str:
        stacktrace = None

        if record.exc_info:
            exc_type, exc_value, exc_traceback = record.exc_info
            assert exc_type
            assert exc_value

            stacktrace = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))

        return _format_record(
            dt=datetime.datetime.fromtimestamp(record.created),
            name=record.name,
            data=record.getMessage(),
            levelno=record.levelno,
            stacktrace=stacktrace,
            colored=self.colored,
        )


class Logger(logging.Logger):
    def trace(
        self,
        msg: Any,
        *args: Any,
        exc_info: _ExcInfoType = None,
        stack_info: bool = False,
        extra: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if self.isEnabledFor(Loglevel.TRACE):
            self._log(
                Loglevel.TRACE,
                msg,
                args,
                exc_info=exc_info,
                extra=extra,
                stack_info=stack_info,
                **kwargs,
            )

    def notice(
        self,
        msg: Any,
        *args: Any,
        exc_info: _ExcInfoType = None,
        stack_info: bool = False,
        extra: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if self.isEnabledFor(Loglevel.NOTICE):
            self._log(
                Loglevel.NOTICE,
                msg,
                args,
                exc_info=exc_info,
                extra=extra,
                stack_info=stack_info,
                **kwargs,
            )


logging.setLoggerClass(Logger)


def get_logger(name: str) -> Logger:
    return cast(Logger, logging.getLogger(name))
