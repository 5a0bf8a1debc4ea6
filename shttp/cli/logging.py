"""
CLI logging setup.

Library modules log through `logging.getLogger(__name__)` under the `shttp` logger;
the CLI attaches a stderr handler whose level follows `-v` flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "shttp"


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    propagate: bool
    handlers: tuple[logging.Handler, ...]


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int) -> LoggingState:
    """Route `shttp` log records to stderr; returns the state to restore afterwards."""
    root = logging.getLogger(_LOGGER_NAME)
    previous = LoggingState(
        level=root.level,
        propagate=root.propagate,
        handlers=tuple(root.handlers),
    )

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbosity >= 2,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root.handlers = [handler]
    root.setLevel(_level_for_verbosity(verbosity))
    root.propagate = False
    return previous


def restore_logging(state: LoggingState) -> None:
    root = logging.getLogger(_LOGGER_NAME)
    for handler in root.handlers:
        if handler not in state.handlers:
            handler.close()
    root.handlers = list(state.handlers)
    root.setLevel(state.level)
    root.propagate = state.propagate
