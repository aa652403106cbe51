"""
Custom HTTP resolvers for gqlstore.

Fields annotated with @custom(http: ...) are resolved by an external
HTTP API. This module builds those requests:
- Body template parsing (parse_body_template)
- Body and URL variable substitution
- HTTPResolverConfig, which turns variables into an httpx.Request
"""

from .http_config import HTTPMethod, HTTPResolverConfig
from .substitute import substitute_vars_in_body, substitute_vars_in_url
from .template import parse_body_template

__all__ = [
    "HTTPMethod",
    "HTTPResolverConfig",
    "parse_body_template",
    "substitute_vars_in_body",
    "substitute_vars_in_url",
]
