"""
Unit tests for variable substitution.

Tests cover:
- Body substitution with native value types
- Missing body variables
- URL path and query substitution
- Query parameter dropping and null handling
"""

import pytest

from gqlstore.custom.substitute import (
    format_url_value,
    substitute_vars_in_body,
    substitute_vars_in_url,
)
from gqlstore.custom.template import iter_variables, parse_body_template
from gqlstore.errors import ErrorKind, VariableNotFoundError


class TestSubstituteVarsInBody:
    """Tests for substitute_vars_in_body."""

    def test_substitutes_variables(self):
        """Variables are replaced in nested objects."""
        template = {"author": "$id", "post": {"id": "$postID"}}

        substitute_vars_in_body(template, {"id": "0x3", "postID": "0x9"})

        assert template == {"author": "0x3", "post": {"id": "0x9"}}

    def test_substitutes_variables_with_array(self):
        """Variables inside arrays are replaced, keeping native types."""
        template = {
            "author": "$id",
            "admin": "$admin",
            "post": {"id": "$postID", "comments": [{"text": "$text"}]},
            "age": "$age",
        }
        variables = {
            "id": "0x3",
            "admin": False,
            "postID": "0x9",
            "text": "Random comment",
            "age": 28,
        }

        substitute_vars_in_body(template, variables)

        assert template == {
            "author": "0x3",
            "admin": False,
            "post": {"id": "0x9", "comments": [{"text": "Random comment"}]},
            "age": 28,
        }

    def test_variable_not_found(self):
        """A missing variable fails naming the token."""
        template = {"author": "$id", "post": {"id": "$postID"}}

        with pytest.raises(
            VariableNotFoundError,
            match=r"^couldn't find variable: \$id in variables map$",
        ) as exc_info:
            substitute_vars_in_body(template, {"postID": "0x9"})

        assert exc_info.value.token == "$id"
        assert exc_info.value.variable == "id"
        assert exc_info.value.kind == ErrorKind.MISSING_VARIABLE

    def test_null_variable_is_substituted(self):
        """A variable present with None becomes null."""
        template = {"name": "$name"}

        substitute_vars_in_body(template, {"name": None})

        assert template == {"name": None}

    def test_structured_values_inserted_as_is(self):
        """Dict and list values are inserted unchanged."""
        template = {"filter": "$filter", "ids": "$ids"}

        substitute_vars_in_body(template, {"filter": {"a": 1}, "ids": [1, 2]})

        assert template == {"filter": {"a": 1}, "ids": [1, 2]}

    def test_non_variable_leaves_unchanged(self):
        """Plain strings and literals pass through."""
        template = {"a": "plain", "b": 1, "c": True, "d": None, "e": "a$b"}

        substitute_vars_in_body(template, {})

        assert template == {"a": "plain", "b": 1, "c": True, "d": None, "e": "a$b"}

    def test_top_level_array(self):
        """Arrays are substituted in place."""
        template = ["$a", {"b": "$b"}]

        result = substitute_vars_in_body(template, {"a": 1, "b": 2})

        assert result is template
        assert template == [1, {"b": 2}]

    def test_top_level_variable(self):
        """A bare variable tree returns its value."""
        assert substitute_vars_in_body("$a", {"a": 7}) == 7

    def test_parse_then_substitute_leaves_no_tokens(self):
        """Substituting every collected variable leaves no variable tokens."""
        tree, names = parse_body_template(
            "{ author: $id, post: { id: $postID, comments: [{ text: $text }] } }"
        )

        substitute_vars_in_body(tree, {name: f"value-{name}" for name in names})

        assert list(iter_variables(tree)) == []


class TestSubstituteVarsInURL:
    """Tests for substitute_vars_in_url."""

    URL = "http://myapi.com/favMovies/$id?name=$name&num=$num"

    def test_query_params_with_space(self):
        """Spaces in query values are encoded as +."""
        url = substitute_vars_in_url(
            self.URL, {"id": "0x9", "name": "Michael Compton", "num": 10}
        )

        assert url == "http://myapi.com/favMovies/0x9?name=Michael+Compton&num=10"

    def test_null_query_param_is_empty(self):
        """A null variable keeps the key with an empty value."""
        url = substitute_vars_in_url(self.URL, {"id": "0x9", "name": None, "num": 10})

        assert url == "http://myapi.com/favMovies/0x9?name=&num=10"

    def test_missing_query_param_is_dropped(self):
        """An absent variable drops the whole pair."""
        url = substitute_vars_in_url(self.URL, {"id": "0x9", "num": 10})

        assert url == "http://myapi.com/favMovies/0x9?num=10"

    def test_all_query_params_dropped(self):
        """The ? separator is omitted when no pairs remain."""
        url = substitute_vars_in_url(self.URL, {"id": "0x9"})

        assert url == "http://myapi.com/favMovies/0x9"

    def test_missing_path_variable(self):
        """An absent path variable fails."""
        with pytest.raises(
            VariableNotFoundError,
            match=r"^couldn't find variable: \$id in variables map$",
        ):
            substitute_vars_in_url(self.URL, {"name": "x", "num": 1})

    def test_path_value_is_percent_encoded(self):
        """Path values are percent-encoded, slashes included."""
        url = substitute_vars_in_url("http://api/users/$id/posts", {"id": "a b/c"})

        assert url == "http://api/users/a%20b%2Fc/posts"

    def test_reserved_characters_in_query(self):
        """Reserved characters in query values are encoded."""
        url = substitute_vars_in_url("http://api/search?q=$q", {"q": "a&b=c"})

        assert url == "http://api/search?q=a%26b%3Dc"

    def test_literal_query_params_kept_in_order(self):
        """Pairs without variables keep their position."""
        url = substitute_vars_in_url(
            "http://api/x?first=1&name=$name&flag&last=2", {"name": "n"}
        )

        assert url == "http://api/x?first=1&name=n&flag&last=2"

    def test_boolean_and_number_values(self):
        """Non-string values are rendered as JSON scalars."""
        url = substitute_vars_in_url(
            "http://api/x?active=$active&ratio=$ratio", {"active": True, "ratio": 0.5}
        )

        assert url == "http://api/x?active=true&ratio=0.5"

    def test_fragment_preserved(self):
        """URL fragments are kept."""
        url = substitute_vars_in_url("http://api/x/$id?a=$a#top", {"id": "1"})

        assert url == "http://api/x/1#top"

    def test_url_without_variables_unchanged(self):
        """A URL without tokens is returned unchanged."""
        url = "http://api/x/y?a=1&b=2"

        assert substitute_vars_in_url(url, {}) == url


class TestFormatURLValue:
    """Tests for format_url_value."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("text", "text"),
            (10, "10"),
            (False, "false"),
            (None, ""),
            ([1, 2], "[1,2]"),
        ],
    )
    def test_format(self, value, expected):
        """Values are rendered as text before encoding."""
        assert format_url_value(value) == expected
