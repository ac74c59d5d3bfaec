from __future__ import annotations

import logging
import sys

_PACKAGE_LOGGER = "taskflow_api"
_HANDLER_NAME = "taskflow_api.console"


def setup_logging(level: int = logging.INFO) -> None:
    """
    Attach a single stderr handler to the package logger.

    Safe to call more than once (e.g. one app per test); the handler is
    installed only the first time and the level is updated on every call.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(fmt)
    logger.addHandler(handler)
