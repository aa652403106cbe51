"""
gqlstore - GraphQL-over-graph-database service core.

This package holds the pieces of a GraphQL layer over a graph database
that everything else builds on:
- A schema model loaded from SDL, with storage directives
- Predicate resolution: GraphQL type/field -> storage predicate
- Non-null validation of mutation payloads
- Custom HTTP resolvers: body templates and URL substitution

Architecture:
    ┌──────────┐     ┌────────────┐     ┌──────────────────────┐
    │   SDL    │────▶│   Schema   │────▶│ SchemaState          │
    │  (text)  │     │  (loaded)  │     │ (predicates, swapped │
    └──────────┘     └─────┬──────┘     │  atomically)         │
                           │            └──────────────────────┘
                           ▼
                  ┌──────────────────┐     ┌────────────────────┐
                  │ @custom(http: …) │────▶│ httpx.Request      │
                  │ template + URL   │     │ (built, not sent)  │
                  └──────────────────┘     └────────────────────┘

Invariants:
    - The predicate map is built once per schema load and never mutated
    - Parsing and substitution hold no shared mutable state
    - No component performs network I/O

How to change safely:
    - Predicate names are storage identifiers: changing resolution rules
      changes where existing data lives
    - Error messages are part of the contract (see errors.py)
"""

from ._version import __version__

__all__ = ["__version__"]
