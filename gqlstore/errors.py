"""
Error types for the gqlstore GraphQL core.

This module defines the closed set of error kinds raised by the core:
- GqlStoreError: Base exception
- MissingValueError: Non-null field absent from a mutation payload
- VariableNotFoundError: Template or URL references an unknown variable
- TemplateUnmarshalError: Rewritten body template is not valid JSON
- InvalidCharacterError: Body template contains a disallowed character
- UnmatchedBracesError: Body template braces do not balance
- SchemaLoadError: SDL could not be turned into a schema

Invariants:
    - All errors inherit from GqlStoreError
    - The identity of an error is its ErrorKind plus its context fields
    - Message text is rendered from MESSAGES only, never built ad hoc

How to change safely:
    - Add a new ErrorKind together with its MESSAGES entry
    - Never reword an existing message: callers match on them
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Closed set of failure conditions."""

    MISSING_FIELD = "MISSING_FIELD"
    MISSING_VARIABLE = "MISSING_VARIABLE"
    MALFORMED_TEMPLATE = "MALFORMED_TEMPLATE"
    INVALID_CHARACTER = "INVALID_CHARACTER"
    UNBALANCED_BRACES = "UNBALANCED_BRACES"
    SCHEMA_LOAD = "SCHEMA_LOAD"


MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.MISSING_FIELD: (
        "type {type_name} requires a value for field {field_name}, but no value present"
    ),
    ErrorKind.MISSING_VARIABLE: "couldn't find variable: {token} in variables map",
    ErrorKind.MALFORMED_TEMPLATE: "couldn't unmarshal HTTP body: {rewritten} as JSON",
    ErrorKind.INVALID_CHARACTER: "invalid character: {char} while parsing body template",
    ErrorKind.UNBALANCED_BRACES: "found unmatched curly braces while parsing body template",
    ErrorKind.SCHEMA_LOAD: "couldn't load schema: {detail}",
}


def render_message(kind: ErrorKind, **context: Any) -> str:
    """Render the user-facing message for an error kind.

    Args:
        kind: The error kind
        **context: Values for the placeholders of the kind's template

    Returns:
        The rendered message
    """
    return MESSAGES[kind].format(**context)


class GqlStoreError(Exception):
    """Base exception for all gqlstore errors.

    Attributes:
        message: Rendered error message
        code: Error code for programmatic handling
        details: Structured error context
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or (self.kind.value if self.kind else "GQLSTORE_ERROR")
        self.details = details or {}

    @classmethod
    def _from_context(cls, **context: Any) -> Dict[str, Any]:
        assert cls.kind is not None
        return {
            "message": render_message(cls.kind, **context),
            "details": dict(context),
        }


class MissingValueError(GqlStoreError):
    """A non-null field has no value in an object payload.

    Raised when:
    - The field key is absent
    - The field key is present with a null value
    """

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(
            **self._from_context(type_name=type_name, field_name=field_name)
        )
        self.type_name = type_name
        self.field_name = field_name


class VariableNotFoundError(GqlStoreError):
    """A variable token has no entry in the variables map.

    Attributes:
        token: The token as written, marker included (e.g. "$id")
        variable: The variable name without the marker
    """

    kind = ErrorKind.MISSING_VARIABLE

    def __init__(self, token: str) -> None:
        super().__init__(**self._from_context(token=token))
        self.token = token
        self.variable = token[1:]


class TemplateError(GqlStoreError):
    """Base class for body template parse failures."""


class TemplateUnmarshalError(TemplateError):
    """The rewritten template text could not be decoded as JSON."""

    kind = ErrorKind.MALFORMED_TEMPLATE

    def __init__(self, rewritten: str) -> None:
        super().__init__(**self._from_context(rewritten=rewritten))
        self.rewritten = rewritten


class InvalidCharacterError(TemplateError):
    """The template contains a character outside the allowed set."""

    kind = ErrorKind.INVALID_CHARACTER

    def __init__(self, char: str, position: Optional[int] = None) -> None:
        super().__init__(**self._from_context(char=char))
        self.char = char
        self.position = position


class UnmatchedBracesError(TemplateError):
    """Curly braces in the template do not balance."""

    kind = ErrorKind.UNBALANCED_BRACES

    def __init__(self) -> None:
        super().__init__(**self._from_context())


class SchemaLoadError(GqlStoreError):
    """The schema definition could not be loaded."""

    kind = ErrorKind.SCHEMA_LOAD

    def __init__(self, detail: str) -> None:
        super().__init__(**self._from_context(detail=detail))
        self.detail = detail
