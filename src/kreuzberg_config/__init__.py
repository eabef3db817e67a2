"""Configuration backbone for the Kreuzberg document-extraction engine."""

__version__ = "1.0.0"
__author__ = "Kreuzberg Team"

from .api import discover, from_file, from_map, to_map, validate
from .config import (
    DiscoveryContext,
    ExtractionConfig,
    FieldViolation,
    collect_violations,
    find_config_file,
    get_default_config,
    save_config,
    validate_config_file,
)
from .exceptions import (
    ConfigIOError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    ConfigurationError,
    ErrorCode,
    KreuzbergConfigError,
    UnsupportedFormatError,
)

__all__ = [
    "discover",
    "from_file",
    "from_map",
    "to_map",
    "validate",
    "DiscoveryContext",
    "ExtractionConfig",
    "FieldViolation",
    "collect_violations",
    "find_config_file",
    "get_default_config",
    "save_config",
    "validate_config_file",
    "ConfigIOError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "ConfigurationError",
    "ErrorCode",
    "KreuzbergConfigError",
    "UnsupportedFormatError",
]
