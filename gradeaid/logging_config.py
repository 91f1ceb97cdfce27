"""
Logging setup for GradeAid.

Configures Loguru sinks for console output and an optional rotating log file.
The scoring functions themselves never log; only the service layer and CLI do.
"""

import sys
from pathlib import Path

from loguru import logger


DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[module]} | {message}"


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    serialize: bool = False,
) -> None:
    """
    Configure Loguru handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file, rotated at 10 MB.
        serialize: Emit JSON records instead of formatted text.
    """
    # Remove default handler
    logger.remove()
    logger.configure(extra={"module": "gradeaid"})

    logger.add(
        sys.stderr,
        serialize=serialize,
        format=DEFAULT_FORMAT,
        level=level,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            serialize=serialize,
            format=DEFAULT_FORMAT,
            level="DEBUG",  # Always debug to file
            rotation="10 MB",
            retention="30 days",
        )


def get_logger(name: str):
    """
    Get a logger bound to a module name.

    Args:
        name: Module name (usually __name__)

    Returns:
        Loguru logger with ``module`` in its extra context.
    """
    return logger.bind(module=name)
