"""
Body template parsing for custom HTTP resolvers.

A body template is a small JSON-like language:

    { author: $id, post: { id: $postID, tags: ["a", "b"] }, limit: 10 }

Keys may be bare identifiers, values may be objects, arrays, quoted
strings, numbers, true/false/null, or variable tokens ($name). Bare
identifiers and variable tokens are not JSON, so the template is first
rewritten into JSON (bare words quoted, whitespace dropped) and then
decoded with the json module.

Checks run in this order, the first failure wins:
    1. Every character is in the allowed set (InvalidCharacterError)
    2. Curly braces balance (UnmatchedBracesError)
    3. The rewritten text decodes as JSON (TemplateUnmarshalError)

Invariants:
    - A variable reference is a string leaf of the exact form $name
    - Object keys are never variable references
    - parse_body_template never mutates shared state

Example:
    >>> tree, names = parse_body_template("{ author: $id, post: { id: $postID }}")
    >>> tree
    {'author': '$id', 'post': {'id': '$postID'}}
    >>> sorted(names)
    ['id', 'postID']
"""

from __future__ import annotations

import json
import re
import string
from typing import Any, Iterator, Set, Tuple, Union

from ..errors import InvalidCharacterError, TemplateUnmarshalError, UnmatchedBracesError

VARIABLE_MARKER = "$"

# Variable tokens written in templates and URLs. Names coming from
# hand-built trees may also contain underscores.
VARIABLE_PATTERN = re.compile(r"\$([A-Za-z0-9_]+)")

_WORD_CHARS = frozenset(string.ascii_letters + string.digits + VARIABLE_MARKER)
_PUNCTUATION = frozenset(':,{}[]"')
_LITERALS = frozenset({"true", "false", "null"})

TemplateValue = Union[
    str, int, float, bool, None, "dict[str, TemplateValue]", "list[TemplateValue]"
]


def variable_name(value: Any) -> str | None:
    """Variable name if `value` is a variable reference, else None."""
    if not isinstance(value, str):
        return None
    match = VARIABLE_PATTERN.fullmatch(value)
    return match.group(1) if match else None


def _is_allowed(ch: str) -> bool:
    return ch in _WORD_CHARS or ch in _PUNCTUATION or ch.isspace()


def _check_characters(template: str) -> None:
    for pos, ch in enumerate(template):
        if not _is_allowed(ch):
            raise InvalidCharacterError(ch, pos)


def _check_braces(template: str) -> None:
    depth = 0
    in_string = False
    for ch in template:
        if ch == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise UnmatchedBracesError()
    if depth != 0:
        raise UnmatchedBracesError()


def _render_word(word: str, is_key: bool) -> str:
    if not is_key:
        if word in _LITERALS:
            return word
        if word.isdigit() and (word == "0" or not word.startswith("0")):
            return word
    return f'"{word}"'


def _rewrite(template: str) -> str:
    """Rewrite a template into JSON text."""
    out: list[str] = []
    i, n = 0, len(template)
    while i < n:
        ch = template[i]
        if ch.isspace():
            i += 1
        elif ch == '"':
            end = template.find('"', i + 1)
            end = n if end == -1 else end + 1
            out.append(template[i:end])
            i = end
        elif ch in _WORD_CHARS:
            start = i
            while i < n and template[i] in _WORD_CHARS:
                i += 1
            word = template[start:i]
            j = i
            while j < n and template[j].isspace():
                j += 1
            out.append(_render_word(word, is_key=j < n and template[j] == ":"))
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def iter_variables(tree: TemplateValue) -> Iterator[str]:
    """Yield the name of every variable reference in a tree, depth first."""
    if isinstance(tree, dict):
        for value in tree.values():
            yield from iter_variables(value)
    elif isinstance(tree, list):
        for value in tree:
            yield from iter_variables(value)
    else:
        name = variable_name(tree)
        if name is not None:
            yield name


def parse_body_template(template: str) -> Tuple[TemplateValue, Set[str]]:
    """Parse a body template into a value tree.

    Args:
        template: Template text

    Returns:
        Tuple of (value tree, names of referenced variables)

    Raises:
        InvalidCharacterError: A character outside the allowed set
        UnmatchedBracesError: Curly braces do not balance
        TemplateUnmarshalError: The rewritten text is not valid JSON
    """
    _check_characters(template)
    _check_braces(template)

    rewritten = _rewrite(template)
    try:
        tree = json.loads(rewritten)
    except json.JSONDecodeError as e:
        raise TemplateUnmarshalError(rewritten) from e

    return tree, set(iter_variables(tree))
