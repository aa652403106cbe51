"""
SDL loading for the gqlstore schema model.

Turns GraphQL SDL text into a Schema. Only the document AST is used, so
storage directives (@dgraph, @search, @hasInverse, @custom) need no
declarations in the SDL. Object, interface and enum definitions are
read; everything else (scalars, inputs, schema blocks) is ignored.

Invariants:
    - Loading is pure: the same SDL always yields an equal Schema
    - Every interface named in an `implements` list is declared
    - @dgraph carries `type` on types and `pred` on fields

Example:
    >>> schema = load_schema('''
    ...     type Post @dgraph(type: "dgraph.Post") {
    ...         postID: ID!
    ...         title: String! @search(by: [term])
    ...     }
    ... ''')
    >>> schema["Post"].type_override
    'dgraph.Post'
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from graphql import GraphQLError, parse
from graphql.language import (
    DirectiveNode,
    EnumTypeDefinitionNode,
    FieldDefinitionNode,
    InterfaceTypeDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    TypeNode,
)
from graphql.utilities import value_from_ast_untyped
from pydantic import ValidationError

from ..custom.http_config import HTTPResolverConfig
from ..errors import SchemaLoadError
from .types import (
    ID_TYPE,
    DgraphDirective,
    FieldDef,
    HasInverseDirective,
    Schema,
    SearchDirective,
    TypeDef,
    TypeKind,
    TypeRef,
)

logger = logging.getLogger(__name__)

TypeDefinitionNode = Union[ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode]


def _directive_args(directives: Optional[Sequence[DirectiveNode]], name: str) -> Optional[Dict[str, Any]]:
    """Arguments of the first directive called `name`, or None if absent."""
    for directive in directives or ():
        if directive.name.value == name:
            return {
                arg.name.value: value_from_ast_untyped(arg.value)
                for arg in directive.arguments or ()
            }
    return None


def _type_ref(node: TypeNode, non_null: bool = False) -> TypeRef:
    if isinstance(node, NonNullTypeNode):
        return _type_ref(node.type, non_null=True)
    if isinstance(node, ListTypeNode):
        return TypeRef.list_of(_type_ref(node.type), non_null=non_null)
    assert isinstance(node, NamedTypeNode)
    return TypeRef.named(node.name.value, non_null=non_null)


def _field(owner: str, node: FieldDefinitionNode) -> FieldDef:
    name = node.name.value

    dgraph = None
    dgraph_args = _directive_args(node.directives, "dgraph")
    if dgraph_args is not None:
        if not dgraph_args.get("pred"):
            raise SchemaLoadError(f"field {owner}.{name}: @dgraph requires a pred argument")
        dgraph = DgraphDirective(pred=dgraph_args["pred"])

    search = None
    search_args = _directive_args(node.directives, "search")
    if search_args is not None:
        by = search_args.get("by") or ()
        search = SearchDirective(by=tuple(by) if isinstance(by, list) else (by,))

    has_inverse = None
    inverse_args = _directive_args(node.directives, "hasInverse")
    if inverse_args is not None and inverse_args.get("field"):
        has_inverse = HasInverseDirective(field=inverse_args["field"])

    custom = None
    custom_args = _directive_args(node.directives, "custom")
    if custom_args is not None and custom_args.get("http") is not None:
        try:
            custom = HTTPResolverConfig.model_validate(custom_args["http"])
        except ValidationError as e:
            raise SchemaLoadError(f"field {owner}.{name}: invalid @custom directive: {e}") from e

    return FieldDef(
        name=name,
        type=_type_ref(node.type),
        dgraph=dgraph,
        search=search,
        has_inverse=has_inverse,
        custom=custom,
    )


def _composite(node: TypeDefinitionNode, kind: TypeKind) -> TypeDef:
    name = node.name.value

    dgraph = None
    dgraph_args = _directive_args(node.directives, "dgraph")
    if dgraph_args is not None:
        if not dgraph_args.get("type"):
            raise SchemaLoadError(f"type {name}: @dgraph requires a type argument")
        dgraph = DgraphDirective(type=dgraph_args["type"])

    try:
        return TypeDef(
            name=name,
            kind=kind,
            fields=tuple(_field(name, f) for f in node.fields or ()),
            interfaces=tuple(i.name.value for i in node.interfaces or ()),
            dgraph=dgraph,
        )
    except ValueError as e:
        raise SchemaLoadError(str(e)) from e


def load_schema(sdl: str, id_type: str = ID_TYPE) -> Schema:
    """Load a Schema from GraphQL SDL.

    Args:
        sdl: Schema definition text
        id_type: Name of the identifier scalar

    Returns:
        The loaded Schema

    Raises:
        SchemaLoadError: On a syntax error, a duplicate type, an unknown
            interface, or a malformed @dgraph / @custom directive
    """
    try:
        document = parse(sdl)
    except GraphQLError as e:
        raise SchemaLoadError(e.message) from e

    types: List[TypeDef] = []
    seen: Dict[str, TypeDef] = {}
    for definition in document.definitions:
        if isinstance(definition, ObjectTypeDefinitionNode):
            typ = _composite(definition, TypeKind.OBJECT)
        elif isinstance(definition, InterfaceTypeDefinitionNode):
            typ = _composite(definition, TypeKind.INTERFACE)
        elif isinstance(definition, EnumTypeDefinitionNode):
            typ = TypeDef(
                name=definition.name.value,
                kind=TypeKind.ENUM,
                enum_values=tuple(v.name.value for v in definition.values or ()),
            )
        else:
            continue

        if typ.name in seen:
            raise SchemaLoadError(f"type {typ.name} is defined more than once")
        seen[typ.name] = typ
        types.append(typ)
        logger.debug(f"Loaded {typ.kind.value} type: {typ.name} ({len(typ.fields)} fields)")

    for typ in types:
        for iface_name in typ.interfaces:
            iface = seen.get(iface_name)
            if iface is None or iface.kind != TypeKind.INTERFACE:
                raise SchemaLoadError(
                    f"type {typ.name} implements {iface_name}, which is not a declared interface"
                )

    return Schema(types=tuple(types), id_type=id_type)
