# artmarket/schemas/forms.py
"""
Helpers for multipart endpoints.

Multipart bodies can only carry strings, so structured fields (addresses,
id lists, pricing tables) arrive JSON-encoded. They are validated into
typed values here, before any service code sees them.
"""

import re
from typing import Any

from pydantic import TypeAdapter, ValidationError

from artmarket.core.errors import InvalidArgument

LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_json_field(raw: str | None, type_: Any, field_name: str, *, required: bool = False):
    """
    Decode and validate a JSON-encoded form field.

    Returns None for a missing/blank optional field.

    Raises:
        InvalidArgument: missing required field, bad JSON or wrong shape.
    """
    if raw is None or not raw.strip():
        if required:
            raise InvalidArgument(f"{field_name} is required")
        return None

    try:
        return TypeAdapter(type_).validate_json(raw)
    except ValidationError as exc:
        raise InvalidArgument(
            {
                "message": f"Invalid {field_name} format",
                "errors": exc.errors(include_url=False, include_context=False),
            }
        ) from exc


def parse_bool_field(raw: str | bool | None) -> bool:
    """Form checkbox semantics: "true"/"1"/"yes"/"on" are truthy."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def parse_int_field(raw: Any) -> int | None:
    """
    Parse an optional integer form value from its leading digits.

    "2500.00" -> 2500, "3 people" -> 3. Absent values and values that
    do not start with an integer become None.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    match = LEADING_INT.match(str(raw))
    if match is None:
        return None
    return int(match.group(1))


def validate_form(model: Any, **data: Any):
    """
    Build a schema from decoded form values.

    Raises:
        InvalidArgument: the values do not satisfy the schema.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgument(
            {
                "message": "Validation failed",
                "errors": exc.errors(include_url=False, include_context=False),
            }
        ) from exc
