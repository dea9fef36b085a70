"""Structured logging configuration for modelgraph using structlog."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = False,
    colorize: bool = True,
) -> None:
    """Configure structured logging for modelgraph.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by MODELGRAPH_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv("MODELGRAPH_DISABLE_CONSOLE_LOGGING") == "1":
        console = False

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    if console:
        # stderr keeps stdout free for the automation's own output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )


# Global state for lazy initialization
_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called lazily, not at import time)."""
    global _logging_initialized

    if _logging_initialized:
        return

    try:
        settings = get_settings()
        log_file = None
        if settings.log_path is not None:
            log_file = settings.log_path / f"modelgraph_{datetime.now().strftime('%Y%m%d')}.log"
        setup_logging(
            level=settings.effective_log_level,
            log_file=log_file,
            structured=settings.structured_logging and not settings.debug_mode,
            colorize=settings.debug_mode,
        )
    except (ValueError, OSError):
        # Unreadable settings or log path fall back to plain console logging
        setup_logging(level="INFO", structured=False)

    _logging_initialized = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))


class ModelLogger:
    """Specialized logger for transitions and context registration."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        """Initialize model logger.

        Args:
            base_logger: Base logger to use
        """
        self.logger = base_logger or get_logger(__name__)

    def log_evaluation(self, transition: str, valid: bool, guard_count: int, **kwargs) -> None:
        """Log the outcome of a guard evaluation.

        Args:
            transition: Transition description
            valid: Whether the transition was found valid
            guard_count: Number of registered guards
            **kwargs: Additional context
        """
        self.logger.debug(
            "transition_evaluated",
            transition=transition,
            valid=valid,
            guard_count=guard_count,
            **kwargs,
        )

    def log_run(self, transition: str, action_count: int, **kwargs) -> None:
        """Log a completed transition run.

        Args:
            transition: Transition description
            action_count: Number of actions executed
            **kwargs: Additional context
        """
        self.logger.info(
            "transition_run", transition=transition, action_count=action_count, **kwargs
        )

    def log_loaded(self, transition: str, **kwargs) -> None:
        """Log a target type becoming loaded."""
        self.logger.debug("transition_loaded", transition=transition, **kwargs)

    def log_load_failed(self, transition: str, error: Exception, **kwargs) -> None:
        """Log a loader that raised.

        Args:
            transition: Transition description
            error: The exception raised by the loader
            **kwargs: Additional context
        """
        self.logger.error(
            "transition_load_failed",
            transition=transition,
            error=str(error),
            error_type=type(error).__name__,
            **kwargs,
        )

    def log_context_registered(self, carrier: str, names: list[str], **kwargs) -> None:
        """Log contexts merged into a carrier."""
        self.logger.debug("context_registered", carrier=carrier, names=names, **kwargs)


# Default logger (lazy initialization - only created when first accessed)
_model_logger: ModelLogger | None = None


def get_model_logger() -> ModelLogger:
    """Get the shared transition logger, creating it on first use."""
    global _model_logger

    if _model_logger is None:
        _model_logger = ModelLogger()
    return _model_logger
