"""
Logging system using structlog.
Provides structured logging with different output formats and levels.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Enable debug mode for more verbose logging
    """

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    # Set up file logging if specified
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))

        logging.getLogger().addHandler(file_handler)

    # APScheduler is chatty at INFO on every tick
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class CycleLogger:
    """
    Specialized logger for bot cycles with context management.
    """

    def __init__(self, name: str = "question_bot"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'CycleLogger':
        """
        Bind context variables to the logger.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def log_cycle_start(self, questions_loaded: int) -> None:
        self.logger.info(
            "Cycle started",
            questions_loaded=questions_loaded,
            **self.context
        )

    def log_reconciled(self, lines: int, added: int, updated: int, unchanged: int) -> None:
        self.logger.info(
            "Fetched questions reconciled",
            lines=lines,
            added=added,
            updated=updated,
            unchanged=unchanged,
            **self.context
        )

    def log_delivery(self, question_id: Optional[str], due: bool) -> None:
        """Log the outcome of the delivery decision."""
        if not due:
            self.logger.debug("Nothing due to post", **self.context)
            return
        self.logger.info(
            "Delivery attempted",
            question_id=question_id,
            delivered=question_id is not None,
            **self.context
        )

    def log_cycle_complete(self, questions_saved: int, duration_seconds: float) -> None:
        self.logger.info(
            "Cycle completed",
            questions_saved=questions_saved,
            duration_seconds=duration_seconds,
            **self.context
        )

    def log_error(self, error: str, stage: Optional[str] = None) -> None:
        """Log error with context."""
        self.logger.error(
            "Cycle failed",
            error=error,
            stage=stage,
            **self.context
        )
