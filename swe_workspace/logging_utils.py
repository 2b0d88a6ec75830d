from __future__ import annotations

import logging

LOGGER_NAME = "swe_workspace"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a console handler to the ``swe_workspace`` logger.

    Calling it again only updates the level; handlers are installed once.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if getattr(logger, "_swe_configured", False):
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    logger.addHandler(handler)
    setattr(logger, "_swe_configured", True)
    return logger
