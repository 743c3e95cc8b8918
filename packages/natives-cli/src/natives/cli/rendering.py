from enum import Enum

import typer

from natives.common.messaging import protocols


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_LEVEL_ORDER = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.SUCCESS: 25,
    LogLevel.WARNING: 30,
    LogLevel.ERROR: 40,
}


class CliRenderer(protocols.Renderer):
    """
    Renders messages to the command line using Typer for colored output.
    Messages below the configured level are dropped.
    """

    def __init__(self, loglevel: LogLevel = LogLevel.INFO):
        self.loglevel = LogLevel(loglevel)

    def render(self, message: str, level: str) -> None:
        if _LEVEL_ORDER.get(LogLevel(level), 0) < _LEVEL_ORDER[self.loglevel]:
            return

        color = None
        if level == "success":
            color = typer.colors.GREEN
        elif level == "warning":
            color = typer.colors.YELLOW
        elif level == "error":
            color = typer.colors.RED
        elif level == "debug":
            color = typer.colors.BRIGHT_BLACK

        typer.secho(message, fg=color)
