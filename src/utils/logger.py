import logging
from functools import lru_cache

from rich.console import Console
from rich.logging import RichHandler
from textual.logging import TextualHandler

from utils import config


class CenteredFormatter(logging.Formatter):
    longest_name_length = 14  # Initial default width

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )

        dynamic_width = CenteredFormatter.longest_name_length + 2
        record.name = f"{record.name.center(dynamic_width - 2)}"
        return super().format(record)


@lru_cache(maxsize=None)
def _file_console(path: str) -> Console:
    # one handle per log file, shared by every logger
    return Console(file=open(path, "a", encoding="utf-8"), width=120)


def _make_handler() -> logging.Handler:
    """
    Writing to the terminal would tear up the running TUI, so records either
    go to the textual devtools console (stderr when no app is running), or,
    with POS_LOG_FILE set, through rich into that file.
    """
    if config.LOG_FILE:
        return RichHandler(
            console=_file_console(config.LOG_FILE),
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
    return TextualHandler()


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger for the given module name.
    """
    if name is None:
        name = "SpreadsheetPOS"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if config.DEBUG else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        formatter = CenteredFormatter("[%(name)s]  %(message)s")

        handler = _make_handler()
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger for '{name}' initialized.")

    return logger
