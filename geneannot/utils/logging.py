"""
Logging utilities for geneannot

Log records go to stderr: annotation tables are written to stdout and must
stay machine readable.
"""

import functools
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, TextIO, Union

import colorlog

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(
    format_string: str, use_colors: bool, stream: TextIO
) -> logging.Handler:
    if use_colors:
        handler = colorlog.StreamHandler(stream)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s" + format_string,
                datefmt=DATE_FORMAT,
                log_colors=LOG_COLORS,
            )
        )
    else:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))

    return handler


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Set up logging for geneannot

    Replaces any handlers on the root logger, so calling it again (for
    example from the CLI and then from a pipeline) reconfigures rather
    than duplicates output.

    Args:
        level: Logging level name or number
        log_file: Optional file receiving the same records without colors
        format_string: Custom format string
        use_colors: Colorize console output with colorlog
        stream: Console stream, stderr when not given

    Returns:
        The ``geneannot`` package logger
    """
    # Convert string level to logging constant
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    format_string = format_string or DEFAULT_FORMAT

    # Clear existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Console handler, colored unless disabled
    handlers = [_console_handler(format_string, use_colors, stream or sys.stderr)]

    # File handler without colors
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        root_logger.addHandler(handler)

    root_logger.setLevel(level)

    # Package logger
    package_logger = logging.getLogger("geneannot")
    package_logger.setLevel(level)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``geneannot`` namespace"""
    if name == "geneannot" or name.startswith("geneannot."):
        return logging.getLogger(name)
    return logging.getLogger(f"geneannot.{name}")


def log_execution_time(func):
    """Decorator logging how long a call took, or how long until it failed"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed = time.perf_counter() - start_time
            logger.error(
                f"{func.__qualname__} failed after {elapsed:.2f} seconds: "
                f"{type(e).__name__}: {e}"
            )
            raise

        elapsed = time.perf_counter() - start_time
        logger.info(f"{func.__qualname__} completed in {elapsed:.2f} seconds")
        return result

    return wrapper


@contextmanager
def timed(step: str, timings: Dict[str, float]) -> Iterator[None]:
    """
    Record the wall time of a pipeline step

    The elapsed seconds are stored in ``timings[step]`` even when the step
    raises.
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        timings[step] = time.perf_counter() - start_time
        get_logger(__name__).debug(f"{step} took {timings[step]:.2f} seconds")
