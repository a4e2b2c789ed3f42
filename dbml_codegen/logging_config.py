"""
Logging configuration for dbml-codegen.

Usage in modules:
    from dbml_codegen.logging_config import get_logger
    logger = get_logger(__name__)

All loggers live under the "dbml_codegen" hierarchy. The CLI calls
configure_logging() once; library callers get standard logging behaviour.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "dbml_codegen"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger under the dbml_codegen hierarchy.

    Args:
        name: Module __name__, or None for the package root logger.

    Returns:
        logging.Logger instance
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure the dbml_codegen logger hierarchy with a rich handler.

    Levels:
        --verbose -> DEBUG
        (default) -> INFO

    Args:
        verbose: Enable DEBUG-level output.
        debug: Render full tracebacks for logged exceptions.
        console: Console to log to (defaults to stderr).

    Returns:
        The configured root logger of the hierarchy.
    """
    level = logging.DEBUG if verbose else logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Replace handlers so repeated CLI invocations in one process don't stack
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=debug,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.propagate = False

    return root_logger
