"""Logging for bladecalc: a console handler plus an optional file handler, both rich consoles."""

from typing import Literal, Union

from rich.console import Console

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogValue = Union[int, LogLevel]

# Same numbers as the logging module
_level_value = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}

_level_label = {
    "DEBUG": "DEBUG",
    "INFO": "[cyan]INFO[/cyan]",
    "WARNING": "[yellow]WARNING[/yellow]",
    "ERROR": "[bold red]ERROR[/bold red]",
}

DEFAULT_LEVEL = "INFO"


def _get_level_int(level: LogValue) -> int:
    if isinstance(level, int):
        return level

    name = level.upper()
    if name not in _level_value:
        # ValueError, not BladeCalcValueError: exceptions.py imports this module
        raise ValueError(f"Unknown logging level {name}, expected one of {', '.join(_level_value)}")
    return _level_value[name]


class LogHandler:
    """Writes messages at or above its level to one rich console."""

    def __init__(self, console: Console, level: LogValue):
        self.level = _get_level_int(level)
        self.console = console

    def handle(self, level_name: str, message: str):
        if _level_value[level_name] >= self.level:
            self.console.log(_level_label[level_name], message, sep=": ")


class Logger:
    """Dispatches %-formatted messages to the named handlers ("console", "file")."""

    def __init__(self):
        self.handlers = {}

    def _emit(self, level_name: str, message: str, args: tuple) -> None:
        text = message % args
        # Warnings and errors keep plain text color after the colored label
        if _level_value[level_name] >= _level_value["WARNING"]:
            text = f"[white]{text}[/white]"
        for handler in self.handlers.values():
            handler.handle(level_name, text)

    def debug(self, message: str, *args) -> None:
        self._emit("DEBUG", message, args)

    def info(self, message: str, *args) -> None:
        self._emit("INFO", message, args)

    def warning(self, message: str, *args) -> None:
        self._emit("WARNING", message, args)

    def error(self, message: str, *args) -> None:
        self._emit("ERROR", message, args)


log = Logger()


def set_logging_level(level: LogValue = DEFAULT_LEVEL) -> None:
    """Lowest level shown on the console. The file handler keeps its own level."""
    if "console" in log.handlers:
        log.handlers["console"].level = _get_level_int(level)


def set_logging_console(stderr: bool = False) -> None:
    """Send console output to stdout (default) or stderr, keeping the current level."""
    level = log.handlers["console"].level if "console" in log.handlers else DEFAULT_LEVEL
    log.handlers["console"] = LogHandler(Console(stderr=stderr, log_path=False), level)


def set_logging_file(fname: str, filemode: str = "a", level: LogValue = DEFAULT_LEVEL) -> None:
    """
    Also write log messages to fname ('w' truncates, 'a' appends).
    Replaces and closes any previous log file.
    """
    if filemode not in ("w", "a"):
        raise ValueError("filemode must be either 'w' or 'a'")

    if "file" in log.handlers:
        log.handlers.pop("file").console.file.close()

    try:
        # pylint: disable=consider-using-with
        file = open(fname, filemode, encoding="utf-8")
    except OSError:
        log.warning("File %s could not be opened. Logging to file disabled.", fname)
        return

    log.handlers["file"] = LogHandler(Console(file=file, log_path=False), level)


set_logging_console()
