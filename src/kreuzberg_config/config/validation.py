"""
Validation of configuration documents against the extraction schema.

Every violation in a document is collected in a single pass so a config
file can be fixed in one edit. Unknown keys are ignored.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..exceptions import ConfigValidationError
from .models import ExtractionConfig

logger = logging.getLogger(__name__)

ROOT_PATH = "<root>"

ConfigInput = Union[ExtractionConfig, Mapping[str, Any]]


@dataclass(frozen=True)
class FieldViolation:
    """A single failed rule."""

    path: str
    rule: str
    value: Any = None
    kind: str = "value_error"

    def __str__(self) -> str:
        return f"{self.path}: {self.rule} (got {self.value!r})"


def format_location(loc: Tuple[Union[str, int], ...]) -> str:
    """Render a pydantic error location as a dotted path."""
    if not loc:
        return ROOT_PATH
    return ".".join(str(part) for part in loc)


def violations_from_error(error: ValidationError) -> List[FieldViolation]:
    """Convert a pydantic ValidationError into field violations."""
    violations = []
    for detail in error.errors(include_url=False):
        rule = detail["msg"]
        if rule.startswith("Value error, "):
            rule = rule[len("Value error, "):]
        violations.append(FieldViolation(
            path=format_location(detail["loc"]),
            rule=rule,
            value=detail.get("input"),
            kind=detail["type"],
        ))
    return violations


def _as_input(value: ConfigInput) -> Any:
    if isinstance(value, ExtractionConfig):
        # Re-check objects that may have been built without validation.
        return value.model_dump(warnings=False)
    if isinstance(value, Mapping) and not isinstance(value, dict):
        return dict(value)
    return value


def validate_config(value: ConfigInput, source: Optional[Any] = None) -> ExtractionConfig:
    """
    Validate a decoded document or an existing configuration object.

    Args:
        value: Mapping produced by a format adapter or a binding, or an
            ExtractionConfig to re-check
        source: Optional origin (file path) used in the error message

    Returns:
        A new, frozen ExtractionConfig

    Raises:
        ConfigValidationError: With every violation found
    """
    try:
        config = ExtractionConfig.model_validate(_as_input(value))
    except ValidationError as e:
        violations = violations_from_error(e)
        logger.debug(f"Validation found {len(violations)} violation(s)")
        raise ConfigValidationError(violations, source=source) from None

    logger.debug(f"Validated configuration with sections: {config.enabled_sections()}")
    return config


def collect_violations(value: ConfigInput) -> List[FieldViolation]:
    """
    Return every violation in ``value`` without raising.

    An empty list means the configuration is valid.
    """
    try:
        validate_config(value)
    except ConfigValidationError as e:
        return e.violations
    return []
