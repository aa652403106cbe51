"""
Predicate resolution for the gqlstore schema model.

Every GraphQL field that is stored maps to a storage predicate. This
module compiles a loaded Schema into a PredicateMap:

    type name -> field name -> predicate

Resolution rules, applied per field:
    1. An explicit @dgraph(pred: "...") on the field wins verbatim.
    2. Otherwise, if the declaring type carries @dgraph(type: "..."),
       the predicate is "<type override>.<field>".
    3. Otherwise it is "<declaring type name>.<field>".

Interfaces are resolved first. An object's inherited field reuses the
interface's predicate unchanged unless the object re-declares the field
with its own @dgraph(pred: ...). Identifier fields are never mapped.

Invariants:
    - Resolution is a pure, deterministic function of the schema
    - A PredicateMap is never mutated after construction
    - Update/Delete payload entries equal their base type's entry

Example:
    >>> pm = resolve_predicates(load_schema(sdl))
    >>> pm.predicate("Post", "postType")
    'Post.postType'
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from .types import FieldDef, Schema, TypeDef

logger = logging.getLogger(__name__)

UPDATE_PAYLOAD_PATTERN = "Update{type}Payload"
DELETE_PAYLOAD_PATTERN = "Delete{type}Payload"


class PredicateMap(Mapping[str, Mapping[str, str]]):
    """Immutable type -> field -> predicate table.

    Each per-type mapping is its own read-only view over its own dict,
    so payload entries are equal to, but never shared with, the entry
    of their base type.
    """

    def __init__(self, entries: Mapping[str, Mapping[str, str]]) -> None:
        self._entries: Dict[str, Mapping[str, str]] = {
            type_name: MappingProxyType(dict(fields))
            for type_name, fields in entries.items()
        }

    def __getitem__(self, type_name: str) -> Mapping[str, str]:
        return self._entries[type_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.to_dict() == {k: dict(v) for k, v in other.items()}

    def __hash__(self) -> int:
        return hash(tuple(sorted((t, tuple(sorted(f.items()))) for t, f in self.items())))

    def __repr__(self) -> str:
        return f"PredicateMap({self.to_dict()!r})"

    def predicate(self, type_name: str, field_name: str) -> Optional[str]:
        """Predicate for a field, or None if the field is not stored."""
        fields = self._entries.get(type_name)
        if fields is None:
            return None
        return fields.get(field_name)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        """Plain nested dicts, independent of this map."""
        return {type_name: dict(fields) for type_name, fields in self._entries.items()}


def _own_predicate(owner: TypeDef, f: FieldDef) -> str:
    if f.pred_override:
        return f.pred_override
    prefix = owner.type_override or owner.name
    return f"{prefix}.{f.name}"


def _resolve_interface(schema: Schema, iface: TypeDef) -> Dict[str, str]:
    return {
        f.name: _own_predicate(iface, f)
        for f in iface.fields
        if not f.is_id(schema.id_type)
    }


def _resolve_object(
    schema: Schema,
    obj: TypeDef,
    interface_preds: Mapping[str, Mapping[str, str]],
) -> Dict[str, str]:
    preds: Dict[str, str] = {}
    for f in schema.effective_fields(obj.name):
        if f.is_id(schema.id_type):
            continue
        own = obj.get_field(f.name)
        iface = schema.inherited_from(obj.name, f.name)
        if iface is not None and (own is None or not own.pred_override):
            preds[f.name] = interface_preds[iface.name][f.name]
        else:
            preds[f.name] = _own_predicate(obj, f)
    return preds


def resolve_predicates(
    schema: Schema,
    update_pattern: str = UPDATE_PAYLOAD_PATTERN,
    delete_pattern: str = DELETE_PAYLOAD_PATTERN,
) -> PredicateMap:
    """Compile a schema into its PredicateMap.

    Args:
        schema: The loaded schema
        update_pattern: Name pattern of generated update payload types
        delete_pattern: Name pattern of generated delete payload types

    Returns:
        PredicateMap covering every object and interface type and the
        payload types of those that get mutations
    """
    entries: Dict[str, Dict[str, str]] = {}

    for iface in schema.interfaces():
        entries[iface.name] = _resolve_interface(schema, iface)

    for obj in schema.objects():
        entries[obj.name] = _resolve_object(schema, obj, entries)

    for type_name in list(entries):
        if not schema.has_mutations(type_name):
            continue
        for pattern in (update_pattern, delete_pattern):
            entries[pattern.format(type=type_name)] = dict(entries[type_name])

    logger.debug(f"Resolved predicates for {len(entries)} types")
    return PredicateMap(entries)
