"""Logging module for modelgraph."""

from .logger import (
    ModelLogger,
    get_logger,
    get_model_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "ModelLogger",
    "get_model_logger",
]
