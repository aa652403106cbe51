"""
Schema module for gqlstore.

This module provides the schema model and everything derived from it:
- Type definitions (TypeDef, FieldDef, TypeRef, directives)
- SDL loading
- Predicate resolution (PredicateMap)
- Published schema state with atomic reload
- Non-null payload validation

Invariants:
    - A schema is immutable once loaded
    - Predicate maps are rebuilt, never edited, on reload
    - Inherited fields keep their interface's predicate

How to change safely:
    - Add new directives to types.py and sdl.py together
    - Check predicate fingerprints before and after resolution changes
"""

from .predicates import PredicateMap, resolve_predicates
from .sdl import load_schema
from .state import SchemaSnapshot, SchemaState, compute_fingerprint
from .types import (
    DgraphDirective,
    FieldDef,
    HasInverseDirective,
    Schema,
    SearchDirective,
    TypeDef,
    TypeKind,
    TypeRef,
)
from .validation import ensure_non_nulls

__all__ = [
    # Types
    "TypeRef",
    "TypeKind",
    "FieldDef",
    "TypeDef",
    "Schema",
    "DgraphDirective",
    "SearchDirective",
    "HasInverseDirective",
    # Loading
    "load_schema",
    # Predicates
    "PredicateMap",
    "resolve_predicates",
    # State
    "SchemaState",
    "SchemaSnapshot",
    "compute_fingerprint",
    # Validation
    "ensure_non_nulls",
]
