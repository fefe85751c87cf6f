"""Shared schema validation utilities.

Schemas are JSON Schema documents stored as YAML under
``overlaykit.data/schemas/`` and loaded in a single, consistent way.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator

from overlaykit.core.utils.io import read_yaml
from overlaykit.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


@lru_cache(maxsize=16)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema by name (``.schema.yaml`` suffix optional).

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def _format_error(error: jsonschema.ValidationError) -> str:
    location = ".".join(str(p) for p in error.absolute_path) or "<root>"
    return f"{location}: {error.message}"


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return error messages (empty if valid)."""
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    return [_format_error(e) for e in errors]


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    errors = validate_payload_safe(payload, schema_name)
    if errors:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': " + "; ".join(errors),
            errors,
        )


__all__ = ["SchemaValidationError", "load_schema", "validate_payload", "validate_payload_safe"]
