"""
Payload validation against schema types.

Mutation inputs are checked for non-null fields before anything is
written. Only presence is checked here; value types are the GraphQL
layer's concern.

Invariants:
    - Fields are checked in schema declaration order (inherited first)
    - Only the first missing field is reported
    - The excluded field is never reported
"""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import MissingValueError
from .types import Schema


def ensure_non_nulls(
    schema: Schema,
    type_name: str,
    obj: Mapping[str, Any],
    exclusion: str = "",
) -> None:
    """Check that every non-null field of a type has a value in `obj`.

    Args:
        schema: Schema the type belongs to
        type_name: Name of the type to check against
        obj: Object payload, keyed by field name
        exclusion: Field name to skip (typically the ID field)

    Raises:
        MissingValueError: For the first non-null field that is absent
            or null
        KeyError: If the type is not in the schema

    Example:
        >>> ensure_non_nulls(schema, "T", {"req": "here", "alsoReq": "here"})
    """
    for f in schema.effective_fields(type_name):
        if not f.non_null or f.name == exclusion:
            continue
        if obj.get(f.name) is None:
            raise MissingValueError(type_name, f.name)
