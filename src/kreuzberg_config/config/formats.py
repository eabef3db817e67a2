"""
Format adapters for configuration documents.

Decodes TOML, YAML and JSON text into plain Python values (dicts, lists and
scalars) and encodes such values back to text. Parser failures surface as
ConfigParseError carrying the format name and, when the parser reports one,
the position of the problem.
"""

import json
import logging
import re
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import tomli_w
import yaml

from ..exceptions import ConfigParseError, ConfigurationError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Decoded documents: None, bool, int, float, str, list or dict of the same.
GenericValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

_TOML_POSITION = re.compile(r"\s*\(at line (\d+), column (\d+)\)\s*$")


class ConfigFormat(str, Enum):
    """Supported configuration document formats."""
    TOML = "toml"
    YAML = "yaml"
    JSON = "json"

    @classmethod
    def from_path(cls, path: PathLike) -> Optional["ConfigFormat"]:
        """Infer the format from a file extension, or None when unknown."""
        return _EXTENSIONS.get(Path(path).suffix.lower())

    @classmethod
    def parse(cls, name: Union[str, "ConfigFormat"]) -> "ConfigFormat":
        """Resolve a format name such as 'yml' or 'TOML'."""
        if isinstance(name, ConfigFormat):
            return name
        key = str(name).strip().lower().lstrip(".")
        if key == "yml":
            key = "yaml"
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported configuration format: {name}") from None


_EXTENSIONS = {
    ".toml": ConfigFormat.TOML,
    ".yaml": ConfigFormat.YAML,
    ".yml": ConfigFormat.YAML,
    ".json": ConfigFormat.JSON,
}


def decode(text: str, format: Union[str, ConfigFormat],
           source: Optional[PathLike] = None) -> GenericValue:
    """
    Decode a configuration document.

    Args:
        text: Document text
        format: Document format
        source: Optional file the text came from, used in error messages

    Returns:
        Decoded value; an empty YAML document decodes to an empty mapping

    Raises:
        ConfigParseError: If the text is not valid for the format
    """
    fmt = ConfigFormat.parse(format)

    if fmt is ConfigFormat.JSON:
        return _decode_json(text, source)
    if fmt is ConfigFormat.YAML:
        return _decode_yaml(text, source)
    return _decode_toml(text, source)


def encode(value: GenericValue, format: Union[str, ConfigFormat]) -> str:
    """
    Encode a plain value as a configuration document.

    Args:
        value: Mapping/sequence/scalar tree to encode
        format: Target format

    Returns:
        Document text

    Raises:
        ConfigurationError: If the value cannot be expressed in the format
    """
    fmt = ConfigFormat.parse(format)

    if fmt is ConfigFormat.JSON:
        return json.dumps(value, indent=2, ensure_ascii=False) + "\n"
    if fmt is ConfigFormat.YAML:
        return yaml.safe_dump(
            value, default_flow_style=False, allow_unicode=True, indent=2, sort_keys=False
        )

    if not isinstance(value, dict):
        raise ConfigurationError("TOML documents must be a table at the top level")
    try:
        return tomli_w.dumps(_drop_nulls(value))
    except TypeError as e:
        raise ConfigurationError(f"Value cannot be encoded as TOML: {e}") from e


def decode_auto(text: str, source: Optional[PathLike] = None) -> GenericValue:
    """
    Decode a document whose format is not known in advance.

    Tries JSON when the text looks like an object, then YAML, then TOML.

    Raises:
        ConfigParseError: If no format accepts the text
    """
    content = text.strip()

    if content.startswith("{"):
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            pass

    try:
        data = yaml.safe_load(content)
        if isinstance(data, dict):
            return data
    except yaml.YAMLError:
        pass

    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError:
        pass

    raise ConfigParseError("unknown", "unable to detect the document format", path=source)


def _decode_json(text: str, source: Optional[PathLike]) -> GenericValue:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(
            ConfigFormat.JSON.value, e.msg, f"line {e.lineno}, column {e.colno}", source
        ) from e


def _decode_yaml(text: str, source: Optional[PathLike]) -> GenericValue:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        location = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            location = f"line {mark.line + 1}, column {mark.column + 1}"
        problem = getattr(e, "problem", None) or str(e).splitlines()[0]
        raise ConfigParseError(ConfigFormat.YAML.value, problem, location, source) from e
    return {} if data is None else data


def _decode_toml(text: str, source: Optional[PathLike]) -> GenericValue:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        message = str(e).splitlines()[0]
        location = None
        match = _TOML_POSITION.search(message)
        if match:
            location = f"line {match.group(1)}, column {match.group(2)}"
            message = message[:match.start()]
        raise ConfigParseError(ConfigFormat.TOML.value, message, location, source) from e


def _drop_nulls(value: Any) -> Any:
    """Remove None entries, which TOML cannot represent."""
    if isinstance(value, dict):
        return {key: _drop_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_drop_nulls(item) for item in value if item is not None]
    return value
