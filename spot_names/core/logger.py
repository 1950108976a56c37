"""
Logging configuration for spot-names.

Standard output is reserved for converted lines, so every log record goes
to standard error:

    - Console: coloured level prefix, written through click.echo(err=True)
    - Optional log file: complete log of all events (DEBUG and above)

Usage:
    from spot_names.core.logger import setup_logging, get_logger

    setup_logging(logging.WARNING)   # Call once at startup
    logger = get_logger(__name__)    # Get logger for each module

    logger.warning("no matching track URI found")
"""

import logging
from pathlib import Path

import click


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Root of this package's logger hierarchy
LOGGER_NAME = "spot_names"


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class ClickEchoHandler(logging.Handler):
    """
    Logging handler that writes to stderr through click.echo().

    click.echo() resolves the stream at call time and strips ANSI codes
    when stderr is not a terminal, so colored records stay readable when
    redirected to a file.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            click.echo(msg, err=True)
        except Exception:
            self.handleError(record)


def setup_logging(level: int = logging.WARNING, log_file: Path | None = None) -> None:
    """
    Configure the package logger.

    Call once at application startup, after the configuration is loaded.

    Args:
        level: Console log level. WARNING by default so only diagnostics
               reach stderr; INFO/DEBUG with --verbose or $DEBUG.
        log_file: Optional path of a DEBUG-level log file (overwritten).

    Behavior:
        1. Remove any existing handlers (setup may run once per CLI call)
        2. Set the package logger to DEBUG and stop propagation
        3. Add the coloured console handler at the given level
        4. Add the file handler if log_file is given
    """
    shutdown_logging()

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False

    console_handler = ClickEchoHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    package_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
        package_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'spot_names.spotify.client'.

    Note:
        Loggers obtained before setup_logging() is called propagate to the
        root logger, so warnings still reach stderr via logging's last
        resort handler.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush, close and detach all handlers, handing records back to the root logger."""
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        handler.flush()
        handler.close()
        package_logger.removeHandler(handler)
    package_logger.propagate = True
