"""
Logging utilities for the configuration layer.

Provides root logger setup with rich console output or a plain formatter,
plus a context manager that logs how long an operation took.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


class ConfigFormatter(logging.Formatter):
    """Formatter whose fields depend on the requested detail level."""

    def __init__(self, include_module: bool = True, include_function: bool = False):
        format_parts = ["%(asctime)s"]
        if include_module:
            format_parts.append("%(name)s")
        format_parts.append("%(levelname)s")
        if include_function:
            format_parts.append("%(funcName)s")
        format_parts.append("%(message)s")

        super().__init__(" - ".join(format_parts), datefmt="%Y-%m-%d %H:%M:%S")
        self.include_module = include_module
        self.include_function = include_function


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    use_rich: bool = True,
    format_style: str = "detailed"
) -> logging.Logger:
    """
    Set up logging for applications embedding the configuration layer.

    Args:
        level: Logging level
        log_file: Optional log file path
        use_rich: Whether to use rich console output
        format_style: Format style ('simple', 'detailed', 'minimal')

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if isinstance(level, str):
        level = getattr(logging, level.upper())
    root_logger.setLevel(level)

    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=format_style == "detailed",
            markup=False,
            rich_tracebacks=True
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stderr)

        if format_style == "minimal":
            formatter = ConfigFormatter(include_module=False, include_function=False)
        elif format_style == "simple":
            formatter = ConfigFormatter(include_module=True, include_function=False)
        else:  # detailed
            formatter = ConfigFormatter(include_module=True, include_function=True)

        console_handler.setFormatter(formatter)

    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(ConfigFormatter(include_module=True, include_function=True))
        file_handler.setLevel(logging.DEBUG)  # More verbose in file
        root_logger.addHandler(file_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


@contextmanager
def log_operation(
    operation: str,
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG
) -> Generator[Dict[str, Any], None, None]:
    """
    Context manager logging the start, duration and failure of an operation.

    Args:
        operation: Description of the operation
        logger: Logger instance (uses root if None)
        level: Logging level for start and completion messages

    Yields:
        Dictionary for extra details reported on completion
    """
    if logger is None:
        logger = logging.getLogger()

    details: Dict[str, Any] = {}
    start_time = time.perf_counter()
    logger.log(level, f"Starting {operation}")

    try:
        yield details
    except Exception as e:
        duration = time.perf_counter() - start_time
        logger.log(level, f"Failed {operation} after {duration * 1000:.1f}ms: {type(e).__name__}")
        raise

    duration = time.perf_counter() - start_time
    extra = "".join(f", {k}={v}" for k, v in details.items())
    logger.log(level, f"Completed {operation} in {duration * 1000:.1f}ms{extra}")
