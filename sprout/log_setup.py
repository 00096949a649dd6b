"""Logging setup for the ``sprout`` logger tree.

Modules log through ``logging.getLogger(__name__)``; this module decides where
those records go, based on ``logLevel`` and ``logOutput`` from the config.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_HANDLER_NAME = "sprout"


def configure_logging(level: str = "warn", output: str = "stderr", interactive: bool = False) -> None:
    """Install one handler on the ``sprout`` logger.

    Args:
        level: debug, info, warn or error.
        output: "stderr", "stdout", or a file path.
        interactive: When True the terminal belongs to the TUI, so console
            outputs are replaced by no handler at all.
    """
    logger = logging.getLogger("sprout")
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
            existing.close()

    logger.setLevel(LEVELS.get(level.lower(), logging.WARNING))

    handler: logging.Handler
    if output in ("stderr", "stdout") and interactive:
        handler = logging.NullHandler()
    elif output == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
