"""Logging setup shared by the CLI and the library modules."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from code_context.constants import APP_NAME


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    root = logging.getLogger("code_context")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(root.handlers):
        if getattr(handler, "name", None) == APP_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        show_time=verbose,
        markup=False,
    )
    handler.set_name(APP_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
