"""
Configuration loader with support for multiple formats and validation.

Reads TOML, YAML and JSON configuration files, validates them against the
extraction schema and writes configurations back out in any of the formats.
"""

import logging
import stat
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..exceptions import (
    ConfigIOError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigurationError,
)
from .discovery import CANDIDATE_FILENAMES, DiscoveryContext, find_config_file
from .formats import ConfigFormat, decode, decode_auto, encode
from .models import ExtractionConfig
from .validation import validate_config

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_config(config_path: PathLike) -> ExtractionConfig:
    """
    Load configuration from file with automatic format detection.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated configuration object

    Raises:
        ConfigIOError: If the file is missing or unreadable
        ConfigParseError: If the file is not a valid document
        ConfigValidationError: If the document violates the schema
    """
    path = Path(config_path)
    text = _read_text(path)

    fmt = ConfigFormat.from_path(path)
    if fmt is None:
        logger.debug(f"Unrecognised extension for {path}, detecting format from content")
        config_data = decode_auto(text, source=path)
    else:
        config_data = decode(text, fmt, source=path)

    config = validate_config(config_data, source=path)
    logger.info(f"Loaded configuration from {path} ({fmt.value if fmt else 'auto-detected'})")
    return config


def load_config_from_dict(config_data: Mapping[str, Any]) -> ExtractionConfig:
    """
    Load configuration from dictionary.

    Args:
        config_data: Configuration mapping, e.g. built by a language binding

    Returns:
        Validated configuration object

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    return validate_config(config_data)


def discover_config(context: Optional[DiscoveryContext] = None) -> ExtractionConfig:
    """
    Find and load the configuration for the current context.

    Args:
        context: Discovery inputs; defaults to the current process state

    Returns:
        Validated configuration object

    Raises:
        ConfigNotFoundError: If no configuration file exists
        ConfigIOError, ConfigParseError, ConfigValidationError: As for load_config
    """
    if context is None:
        context = DiscoveryContext.from_process()

    path = find_config_file(context)
    if path is None:
        raise ConfigNotFoundError(context.start_dir, CANDIDATE_FILENAMES)
    return load_config(path)


def save_config(config: ExtractionConfig, output_path: PathLike,
                format_type: Optional[Union[str, ConfigFormat]] = None) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration object to save
        output_path: Output file path
        format_type: Format to save in ('json', 'yaml', 'toml'). Auto-detected if None.

    Returns:
        Path that was written

    Raises:
        ConfigurationError: If configuration cannot be saved
    """
    path = Path(output_path)

    if format_type is None:
        fmt = ConfigFormat.from_path(path)
        if fmt is None:
            raise ConfigurationError(f"Cannot infer configuration format from {path}")
    else:
        fmt = ConfigFormat.parse(format_type)

    text = encode(config.to_map(), fmt)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ConfigIOError(f"Error saving configuration to {path}: {e}", path) from e

    logger.info(f"Saved configuration to {path} ({fmt.value})")
    return path


def get_default_config() -> ExtractionConfig:
    """
    Get default configuration object.

    Returns:
        Configuration with engine defaults and no sub-configurations
    """
    return ExtractionConfig()


def validate_config_file(config_path: PathLike) -> bool:
    """
    Validate configuration file.

    Args:
        config_path: Path to configuration file

    Returns:
        True if configuration is valid

    Raises:
        ConfigurationError: If configuration is invalid
    """
    load_config(config_path)
    return True


def _read_text(path: Path) -> str:
    """Read a configuration file as UTF-8 text."""
    try:
        mode = path.stat().st_mode
    except (FileNotFoundError, NotADirectoryError):
        raise ConfigIOError(f"Configuration file not found: {path}", path) from None
    except OSError as e:
        raise ConfigIOError(f"Cannot access configuration file {path}: {e.strerror or e}", path) from e

    if not stat.S_ISREG(mode):
        raise ConfigIOError(f"Configuration path is not a file: {path}", path)

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        fmt = ConfigFormat.from_path(path)
        raise ConfigParseError(
            fmt.value if fmt else "unknown", "file is not valid UTF-8", path=path
        ) from e
    except OSError as e:
        raise ConfigIOError(f"Error reading configuration file {path}: {e.strerror or e}", path) from e
