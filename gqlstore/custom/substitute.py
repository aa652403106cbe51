"""
Variable substitution for custom HTTP resolver requests.

Two substitutors share the $name token syntax but differ on missing
values:

- Body (substitute_vars_in_body): every referenced variable must be in
  the map. Values are inserted with their native type.
- URL (substitute_vars_in_url): path tokens must resolve, like the body.
  A query pair `key=$name` is dropped when `name` is absent from the
  map, emitted as `key=` when its value is None, and URL-encoded
  (spaces as +) otherwise.

Invariants:
    - A failed substitution reports the first unresolved token
    - Query pair order is preserved among retained pairs
    - No I/O, no shared state
"""

from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import quote, quote_plus, urlsplit, urlunsplit

from ..errors import VariableNotFoundError
from .template import VARIABLE_MARKER, VARIABLE_PATTERN, TemplateValue, variable_name


def _lookup(name: str, variables: Mapping[str, Any]) -> Any:
    if name not in variables:
        raise VariableNotFoundError(f"{VARIABLE_MARKER}{name}")
    return variables[name]


def _substitute_leaf(value: TemplateValue, variables: Mapping[str, Any]) -> TemplateValue:
    if isinstance(value, (dict, list)):
        substitute_vars_in_body(value, variables)
        return value
    name = variable_name(value)
    if name is None:
        return value
    return _lookup(name, variables)


def substitute_vars_in_body(
    tree: TemplateValue, variables: Mapping[str, Any]
) -> TemplateValue:
    """Replace variable references in a parsed body template.

    Objects and arrays are updated in place; callers that cache a parsed
    template must pass a copy.

    Args:
        tree: Parsed template (see parse_body_template)
        variables: Variable values keyed by name, without the marker

    Returns:
        The substituted tree. This is `tree` itself unless `tree` is a
        single variable reference.

    Raises:
        VariableNotFoundError: A referenced variable is not in the map
    """
    if isinstance(tree, dict):
        for key, value in tree.items():
            tree[key] = _substitute_leaf(value, variables)
        return tree
    if isinstance(tree, list):
        for i, value in enumerate(tree):
            tree[i] = _substitute_leaf(value, variables)
        return tree
    return _substitute_leaf(tree, variables)


def format_url_value(value: Any) -> str:
    """Text form of a variable value inside a URL, before encoding."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def _substitute_path(path: str, variables: Mapping[str, Any]) -> str:
    def replace(match: Any) -> str:
        value = _lookup(match.group(1), variables)
        return quote(format_url_value(value), safe="")

    return VARIABLE_PATTERN.sub(replace, path)


def _substitute_query(query: str, variables: Mapping[str, Any]) -> str:
    pairs: list[str] = []
    for pair in query.split("&"):
        key, sep, value = pair.partition("=")
        name = variable_name(value) if sep else None
        if name is None:
            if pair:
                pairs.append(pair)
            continue
        if name not in variables:
            continue
        var = variables[name]
        if var is None:
            pairs.append(f"{key}=")
        else:
            pairs.append(f"{key}={quote_plus(format_url_value(var))}")
    return "&".join(pairs)


def substitute_vars_in_url(url: str, variables: Mapping[str, Any]) -> str:
    """Replace variable tokens in a URL's path and query.

    Args:
        url: URL template, e.g. "http://api/movies/$id?name=$name"
        variables: Variable values keyed by name, without the marker

    Returns:
        The substituted URL; "?" is omitted when no query pairs remain

    Raises:
        VariableNotFoundError: A path token has no entry in the map

    Example:
        >>> substitute_vars_in_url(
        ...     "http://host/x/$id?name=$name&num=$num", {"id": "0x9", "num": 10}
        ... )
        'http://host/x/0x9?num=10'
    """
    parts = urlsplit(url)
    path = _substitute_path(parts.path, variables)
    query = _substitute_query(parts.query, variables)
    return urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))
