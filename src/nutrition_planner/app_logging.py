"""Logging configuration helpers."""

import logging


def configure_logging(level: int) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("nutrition_planner")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
