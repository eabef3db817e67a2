"""
Custom exceptions for the Kreuzberg configuration layer.

Provides a hierarchy of exceptions for the failures that can occur while
locating, reading, decoding and validating an extraction configuration.
Every public operation raises only these types.
"""

from enum import IntEnum
from pathlib import Path
from typing import Any, List, Optional, Sequence, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .config.validation import FieldViolation


class ErrorCode(IntEnum):
    """Error codes shared by every language binding of the extraction engine."""
    VALIDATION = 0
    PARSING = 1
    OCR = 2
    MISSING_DEPENDENCY = 3
    IO = 4
    PLUGIN = 5
    UNSUPPORTED_FORMAT = 6
    INTERNAL = 7


class KreuzbergConfigError(Exception):
    """Base exception for all configuration errors."""

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} (Details: {details_str})"
        return self.message


class ConfigurationError(KreuzbergConfigError):
    """Raised when a configuration cannot be produced or written."""

    code = ErrorCode.VALIDATION


class ConfigNotFoundError(ConfigurationError):
    """Raised when discovery reaches the top of the tree without a match."""

    code = ErrorCode.IO

    def __init__(self, start_dir: Union[str, Path], candidates: Sequence[str]) -> None:
        super().__init__(
            f"No configuration file ({', '.join(candidates)}) found in {start_dir} "
            f"or any parent directory"
        )
        self.start_dir = Path(start_dir)
        self.candidates = tuple(candidates)


class ConfigIOError(ConfigurationError):
    """Raised when a configuration file is missing or cannot be read."""

    code = ErrorCode.IO

    def __init__(self, message: str, path: Union[str, Path]) -> None:
        super().__init__(message)
        self.path = Path(path)


class UnsupportedFormatError(ConfigurationError):
    """Raised when a configuration format name is not recognised."""

    code = ErrorCode.UNSUPPORTED_FORMAT


class ConfigParseError(ConfigurationError):
    """Raised when a document is not syntactically valid for its format."""

    code = ErrorCode.PARSING

    def __init__(self, format: str, message: str, location: Optional[str] = None,
                 path: Optional[Union[str, Path]] = None) -> None:
        text = f"Invalid {format.upper()} configuration"
        if path is not None:
            text += f" in {path}"
        if location:
            text += f" at {location}"
        super().__init__(f"{text}: {message}")
        self.format = format
        self.reason = message
        self.location = location
        self.path = Path(path) if path is not None else None


class ConfigValidationError(ConfigurationError):
    """Raised when a document is well formed but violates the schema."""

    code = ErrorCode.VALIDATION

    def __init__(self, violations: Sequence["FieldViolation"],
                 source: Optional[Union[str, Path]] = None) -> None:
        header = "Configuration validation failed"
        if source is not None:
            header += f" for {source}"
        lines = [f"  {violation}" for violation in violations]
        super().__init__(f"{header}:\n" + "\n".join(lines))
        self.violations: List["FieldViolation"] = list(violations)
        self.source = source

    @property
    def paths(self) -> List[str]:
        """Dotted field paths of every violation, in report order."""
        return [violation.path for violation in self.violations]
