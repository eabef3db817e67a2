"""
Public entry points used by the extraction engine and the language bindings.

Each operation either returns a validated, frozen ExtractionConfig or raises
one of the exceptions in ``kreuzberg_config.exceptions``.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .config.discovery import DiscoveryContext
from .config.loader import discover_config, load_config, load_config_from_dict
from .config.models import ExtractionConfig
from .config.validation import validate_config
from .utils.logging_utils import get_logger, log_operation

logger = get_logger(__name__)


def discover(context: Optional[DiscoveryContext] = None) -> ExtractionConfig:
    """
    Locate and load the configuration without an explicit path.

    Consults KREUZBERG_CONFIG_PATH first, then walks from the working
    directory (or ``context.start_dir``) up to the filesystem root.

    Raises:
        ConfigNotFoundError: If no configuration file exists
        ConfigIOError: If the file found cannot be read
        ConfigParseError: If the file is not a valid document
        ConfigValidationError: If the document violates the schema
    """
    with log_operation("configuration discovery", logger):
        return discover_config(context)


def from_file(path: Union[str, Path]) -> ExtractionConfig:
    """
    Load a configuration file, inferring the format from its extension.

    Raises:
        ConfigIOError, ConfigParseError, ConfigValidationError
    """
    with log_operation(f"configuration load from {path}", logger) as details:
        config = load_config(path)
        details["sections"] = len(config.enabled_sections())
        return config


def from_map(value: Mapping[str, Any]) -> ExtractionConfig:
    """
    Validate a mapping a binding has already built from its host structures.

    Raises:
        ConfigValidationError
    """
    return load_config_from_dict(value)


def validate(config: Union[ExtractionConfig, Mapping[str, Any]]) -> ExtractionConfig:
    """
    Check a configuration object (or mapping) against every rule.

    Raises:
        ConfigValidationError: With the full list of violations
    """
    return validate_config(config)


def to_map(config: ExtractionConfig) -> Dict[str, Any]:
    """Serialize a configuration to plain mappings, lists and scalars."""
    return config.to_map()
