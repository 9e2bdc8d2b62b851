"""Logging configuration for console and rotating file logs."""

from __future__ import annotations

import sys

from loguru import logger

from app.config import RelayConfig


def setup_logger(config: RelayConfig):
    """Console sink always; rotating relay.log only when log_dir is set."""
    logger.remove()
    logger.add(sys.stdout, level=config.log_level, enqueue=True)
    if config.log_dir is None:
        return logger

    path = config.log_path
    path.mkdir(parents=True, exist_ok=True)
    logger.add(
        path / "relay.log",
        level=config.log_level,
        rotation=config.log_rotation,
        retention=config.log_retention,
        enqueue=True,
        encoding="utf-8",
    )
    return logger
