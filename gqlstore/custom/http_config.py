"""
Custom HTTP resolver configuration.

A field annotated with

    @custom(http: {
        url: "http://api/movies/$id?name=$name",
        method: POST,
        body: "{ author: $id }",
        forwardHeaders: ["X-App-Token"]
    })

is resolved by calling an external HTTP API. HTTPResolverConfig holds
that directive argument, parses the body template once, and builds the
outbound request for each invocation. Sending the request is the
transport layer's job.

Invariants:
    - The parsed body tree is never handed out for substitution; each
      build_request call substitutes into its own deep copy
    - Only headers listed in forward_headers are copied from the
      incoming request
"""

from __future__ import annotations

import copy
import json
import logging
from enum import Enum
from typing import Any, Mapping, Optional, Set, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..errors import TemplateError
from .substitute import substitute_vars_in_body, substitute_vars_in_url
from .template import VARIABLE_PATTERN, TemplateValue, parse_body_template

logger = logging.getLogger(__name__)


class HTTPMethod(str, Enum):
    """HTTP methods a custom resolver may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class HTTPResolverConfig(BaseModel):
    """The `http` argument of an @custom directive.

    Attributes:
        url: URL template, may contain $name tokens
        method: HTTP method
        body: Body template, see parse_body_template
        forward_headers: Incoming header names copied to the request
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    method: HTTPMethod = HTTPMethod.GET
    body: Optional[str] = None
    forward_headers: Tuple[str, ...] = Field(default=(), alias="forwardHeaders")

    _body_tree: Any = PrivateAttr(default=None)
    _body_variables: Set[str] = PrivateAttr(default_factory=set)

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("body")
    @classmethod
    def _check_body(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                parse_body_template(value)
            except TemplateError as e:
                raise ValueError(str(e)) from e
        return value

    def model_post_init(self, __context: Any) -> None:
        if self.body is not None:
            self._body_tree, self._body_variables = parse_body_template(self.body)

    @property
    def required_variables(self) -> Set[str]:
        """Variables the body template references."""
        return set(self._body_variables)

    @property
    def url_variables(self) -> Set[str]:
        """Variables the URL template references."""
        return set(VARIABLE_PATTERN.findall(self.url))

    def build_body(self, variables: Mapping[str, Any]) -> TemplateValue:
        """Substituted body tree for one invocation, or None without a body."""
        if self.body is None:
            return None
        return substitute_vars_in_body(copy.deepcopy(self._body_tree), variables)

    def build_request(
        self,
        variables: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ) -> httpx.Request:
        """Build the outbound request for one resolver invocation.

        Args:
            variables: Variable values keyed by name
            headers: Headers of the incoming GraphQL request
            timeout: Timeout in seconds, recorded in the request extensions
            user_agent: User-Agent header value, if any

        Returns:
            An unsent httpx.Request

        Raises:
            VariableNotFoundError: A body or path variable is missing
        """
        url = substitute_vars_in_url(self.url, variables)

        out_headers: dict[str, str] = {}
        if user_agent:
            out_headers["User-Agent"] = user_agent
        incoming = httpx.Headers(headers or {})
        for name in self.forward_headers:
            if name in incoming:
                out_headers[name] = incoming[name]

        content = None
        if self.body is not None:
            content = json.dumps(self.build_body(variables), separators=(",", ":"))
            out_headers["Content-Type"] = "application/json"

        extensions = {}
        if timeout is not None:
            extensions["timeout"] = httpx.Timeout(timeout).as_dict()

        logger.debug(f"Built custom resolver request: {self.method.value} {url}")
        return httpx.Request(
            self.method.value,
            url,
            headers=out_headers,
            content=content,
            extensions=extensions,
        )
