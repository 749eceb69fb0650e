"""Logging setup for the animalsos logger tree."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger (idempotent)."""
    logger = logging.getLogger("animalsos")
    logger.setLevel(level)
    if not any(getattr(h, "_animalsos", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._animalsos = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
