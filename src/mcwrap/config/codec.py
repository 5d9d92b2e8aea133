"""
YAML codec for the wrapper config document.

encode() and decode() are inverses for every document the package can
produce. Decoding is stricter than constructing a model: keys that are
missing from the file are an error rather than silently defaulted, except for
optional keys, which decode to None. Values must already have the right YAML
type; a quoted number or flag is a schema mismatch, not a conversion.
"""

from __future__ import annotations

import types
import typing
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ValidationError

from mcwrap.config.errors import MalformedConfigError, SchemaMismatchError

if TYPE_CHECKING:
    from mcwrap.config.app import WrapperConfig

__all__ = ["encode", "decode"]


def encode(config: WrapperConfig) -> bytes:
    """
    Serialize a config document to YAML bytes.

    Args:
        config: Document to serialize

    Returns:
        UTF-8 encoded YAML, sections in declaration order
    """
    # Drop None values so optional keys and sections are simply absent
    config_dict = config.model_dump(mode="json", exclude_none=True)
    text = yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False)
    return text.encode("utf-8")


def decode(data: bytes | str, path: Path | str | None = None) -> WrapperConfig:
    """
    Parse YAML bytes into a config document.

    Args:
        data: Raw file contents
        path: Source file, used only for error messages

    Returns:
        Validated WrapperConfig

    Raises:
        MalformedConfigError: If the data is not valid UTF-8 or not valid YAML
        SchemaMismatchError: If keys are missing or values have the wrong shape
    """
    from mcwrap.config.app import WrapperConfig

    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedConfigError(f"Config is not valid UTF-8: {e}", path) from e

    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise MalformedConfigError(f"Invalid YAML in config file: {e}", path) from e

    if not isinstance(raw, dict):
        raise SchemaMismatchError(
            f"Config must be a mapping of sections, got {type(raw).__name__}", path
        )

    missing = _fill_optional_keys(WrapperConfig, raw, prefix="")
    if missing:
        raise SchemaMismatchError(f"Missing required config keys: {', '.join(missing)}", path)

    try:
        return WrapperConfig.model_validate(raw)
    except ValidationError as e:
        raise SchemaMismatchError(f"Configuration validation failed: {e}", path) from e


def _fill_optional_keys(model: type[BaseModel], data: dict[str, Any], prefix: str) -> list[str]:
    """
    Set absent optional keys to None and collect absent required keys.

    Recurses into nested sections that are present as mappings. Shape errors
    (a section that is not a mapping) are left for model validation.

    Returns:
        Dotted names of required keys missing from data
    """
    missing: list[str] = []
    for name, field in model.model_fields.items():
        key = field.alias or name
        if key not in data:
            if _allows_none(field.annotation):
                data[key] = None
            else:
                missing.append(f"{prefix}{key}")
            continue

        section = _section_model(field.annotation)
        if section is not None and isinstance(data[key], dict):
            missing.extend(_fill_optional_keys(section, data[key], prefix=f"{prefix}{key}."))
    return missing


def _allows_none(annotation: Any) -> bool:
    return type(None) in typing.get_args(annotation)


def _section_model(annotation: Any) -> type[BaseModel] | None:
    """Return the BaseModel type behind a section annotation, if any."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        candidates = typing.get_args(annotation)
    else:
        candidates = (annotation,)
    for candidate in candidates:
        # Parameterized generics such as list[int] are not classes
        if typing.get_origin(candidate) is not None:
            continue
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None
