"""
Core type definitions for the gqlstore schema model.

This module defines the GraphQL-side view of a schema as the storage
layer needs it:
- TypeRef: A field's type, with list and non-null wrappers
- DgraphDirective / SearchDirective / HasInverseDirective: directive values
- FieldDef: A field declared on an object or interface
- TypeDef: An object, interface or enum type
- Schema: All types, with interface inheritance resolved on demand

Invariants:
    - Every definition is immutable once the schema is loaded
    - TypeDef.fields holds only the fields declared on that type;
      inherited fields are computed by Schema.effective_fields
    - Field names are unique within a TypeDef

How to change safely:
    - Add new directives as new optional FieldDef / TypeDef attributes
    - Keep effective_fields ordering stable: validation relies on it

Example:
    >>> from gqlstore.schema.types import FieldDef, TypeDef, TypeKind, TypeRef
    >>> Post = TypeDef(
    ...     name="Post",
    ...     kind=TypeKind.OBJECT,
    ...     fields=(
    ...         FieldDef("postID", TypeRef.named("ID", non_null=True)),
    ...         FieldDef("title", TypeRef.named("String")),
    ...     ),
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from ..custom.http_config import HTTPResolverConfig

ID_TYPE = "ID"


class TypeKind(Enum):
    """Kinds of schema types the storage layer maps."""

    OBJECT = "object"
    INTERFACE = "interface"
    ENUM = "enum"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a type, possibly wrapped in list / non-null.

    Attributes:
        name: Named type for a leaf reference, None for a list wrapper
        of_type: Wrapped reference when this is a list
        non_null: Whether this level carries the non-null (!) marker

    Example:
        >>> TypeRef.list_of(TypeRef.named("Post", non_null=True))  # [Post!]
    """

    name: str | None = None
    of_type: TypeRef | None = None
    non_null: bool = False

    def __post_init__(self) -> None:
        if (self.name is None) == (self.of_type is None):
            raise ValueError("TypeRef must be either a named type or a list")

    @classmethod
    def named(cls, name: str, non_null: bool = False) -> TypeRef:
        return cls(name=name, non_null=non_null)

    @classmethod
    def list_of(cls, of_type: TypeRef, non_null: bool = False) -> TypeRef:
        return cls(of_type=of_type, non_null=non_null)

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def named_type(self) -> str:
        """Innermost named type, unwrapping every list level."""
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        assert ref.name is not None
        return ref.name

    def __str__(self) -> str:
        inner = self.name if self.of_type is None else f"[{self.of_type}]"
        return f"{inner}!" if self.non_null else str(inner)


@dataclass(frozen=True)
class DgraphDirective:
    """Value of an @dgraph directive.

    On a type only `type` is meaningful, on a field only `pred`.
    """

    type: str | None = None
    pred: str | None = None


@dataclass(frozen=True)
class SearchDirective:
    """Value of an @search directive; `by` lists index names."""

    by: tuple[str, ...] = ()


@dataclass(frozen=True)
class HasInverseDirective:
    """Value of an @hasInverse directive."""

    field: str


@dataclass(frozen=True)
class FieldDef:
    """Definition of a single field on an object or interface type.

    Attributes:
        name: GraphQL field name
        type: Type reference, including wrappers
        dgraph: @dgraph(pred: ...) override, if any
        search: @search directive, if any
        has_inverse: @hasInverse directive, if any
        custom: @custom(http: ...) resolver config, if any

    Search and inverse directives never influence predicate naming.
    """

    name: str
    type: TypeRef
    dgraph: DgraphDirective | None = None
    search: SearchDirective | None = None
    has_inverse: HasInverseDirective | None = None
    custom: HTTPResolverConfig | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name cannot be empty")

    @property
    def non_null(self) -> bool:
        return self.type.non_null

    @property
    def pred_override(self) -> str | None:
        return self.dgraph.pred if self.dgraph else None

    def is_id(self, id_type: str = ID_TYPE) -> bool:
        """Whether this is the identifier (primary key) field."""
        return not self.type.is_list and self.type.named_type == id_type


@dataclass(frozen=True)
class TypeDef:
    """Definition of an object, interface or enum type.

    Attributes:
        name: GraphQL type name
        kind: Object, interface or enum
        fields: Fields declared directly on this type, in declaration order
        interfaces: Names of implemented interfaces, in declaration order
        dgraph: @dgraph(type: ...) override, if any
        enum_values: Values, for enum types
    """

    name: str
    kind: TypeKind
    fields: tuple[FieldDef, ...] = dataclass_field(default_factory=tuple)
    interfaces: tuple[str, ...] = dataclass_field(default_factory=tuple)
    dgraph: DgraphDirective | None = None
    enum_values: tuple[str, ...] = dataclass_field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")
        field_names = [f.name for f in self.fields]
        if len(field_names) != len(set(field_names)):
            raise ValueError(f"Duplicate field name in type '{self.name}'")

    @property
    def type_override(self) -> str | None:
        return self.dgraph.type if self.dgraph else None

    def get_field(self, name: str) -> FieldDef | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_id_field(self, id_type: str = ID_TYPE) -> bool:
        return any(f.is_id(id_type) for f in self.fields)


@dataclass(frozen=True)
class Schema:
    """A loaded schema: every type definition, keyed by name.

    Attributes:
        types: Type definitions in declaration order
        id_type: Name of the identifier scalar
    """

    types: tuple[TypeDef, ...] = dataclass_field(default_factory=tuple)
    id_type: str = ID_TYPE

    def __post_init__(self) -> None:
        names = [t.name for t in self.types]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate type name in schema")

    def get_type(self, name: str) -> TypeDef | None:
        for t in self.types:
            if t.name == name:
                return t
        return None

    def __getitem__(self, name: str) -> TypeDef:
        typ = self.get_type(name)
        if typ is None:
            raise KeyError(name)
        return typ

    def objects(self) -> Iterator[TypeDef]:
        return (t for t in self.types if t.kind == TypeKind.OBJECT)

    def interfaces(self) -> Iterator[TypeDef]:
        return (t for t in self.types if t.kind == TypeKind.INTERFACE)

    def effective_fields(self, type_name: str) -> tuple[FieldDef, ...]:
        """Fields of a type including those inherited from interfaces.

        Interface fields come first, in `implements` order (first
        declaration wins), then the type's own fields. A type's own
        re-declaration of an inherited field replaces it in place.
        """
        typ = self[type_name]
        merged: dict[str, FieldDef] = {}
        for iface_name in typ.interfaces:
            for f in self[iface_name].fields:
                merged.setdefault(f.name, f)
        for f in typ.fields:
            merged[f.name] = f
        return tuple(merged.values())

    def inherited_from(self, type_name: str, field_name: str) -> TypeDef | None:
        """Interface that first declares `field_name` for `type_name`, if any."""
        for iface_name in self[type_name].interfaces:
            iface = self[iface_name]
            if iface.get_field(field_name) is not None:
                return iface
        return None

    def has_mutations(self, type_name: str) -> bool:
        """Whether Update/Delete mutations are generated for a type.

        Every object type gets them; an interface only when it declares
        an identifier field.
        """
        typ = self[type_name]
        if typ.kind == TypeKind.OBJECT:
            return True
        if typ.kind == TypeKind.INTERFACE:
            return typ.has_id_field(self.id_type)
        return False

    def to_dict(self) -> dict[str, Any]:
        """Summary representation, used for logging and fingerprints."""
        return {
            "id_type": self.id_type,
            "types": [
                {
                    "name": t.name,
                    "kind": t.kind.value,
                    "interfaces": list(t.interfaces),
                    "fields": {f.name: str(f.type) for f in t.fields},
                }
                for t in self.types
            ],
        }
