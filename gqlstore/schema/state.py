"""
Published schema state for gqlstore.

SchemaState owns the snapshot every request handler reads: the loaded
Schema, its PredicateMap, and a fingerprint of that map. A (re)load
builds a complete new snapshot and publishes it with a single reference
swap, so readers see either the old snapshot or the new one, never a
partially built map.

Invariants:
    - A published SchemaSnapshot is never mutated
    - Loads are serialized; reads never take the lock
    - Fingerprint changes when the predicate mapping changes

How to change safely:
    - Build everything a snapshot needs before the swap in load()
    - Never hand out anything from a snapshot that can be mutated

Example:
    >>> state = SchemaState()
    >>> state.load(load_schema(sdl))
    >>> state.predicate("Post", "postType")
    'Post.postType'
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from ..errors import SchemaLoadError
from .predicates import DELETE_PAYLOAD_PATTERN, UPDATE_PAYLOAD_PATTERN, PredicateMap, resolve_predicates
from .types import Schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaSnapshot:
    """One published generation of the schema.

    Attributes:
        schema: The loaded schema
        predicates: Resolved type -> field -> predicate map
        fingerprint: SHA-256 of the canonical predicate map
        generation: Load counter, starting at 1
    """

    schema: Schema
    predicates: PredicateMap
    fingerprint: str
    generation: int


def compute_fingerprint(predicates: PredicateMap) -> str:
    """Fingerprint a predicate map as 'sha256:<hash>'.

    Computed from canonical JSON with sorted keys, so it does not depend
    on declaration order.
    """
    canonical = json.dumps(predicates.to_dict(), sort_keys=True, separators=(',', ':'))
    hash_bytes = hashlib.sha256(canonical.encode('utf-8')).hexdigest()
    return f"sha256:{hash_bytes}"


class SchemaState:
    """Holder of the currently published schema snapshot.

    Thread-safety:
        - load() is serialized by an internal lock
        - snapshot reads are lock-free: they read one attribute
    """

    def __init__(
        self,
        update_pattern: str = UPDATE_PAYLOAD_PATTERN,
        delete_pattern: str = DELETE_PAYLOAD_PATTERN,
    ) -> None:
        self._update_pattern = update_pattern
        self._delete_pattern = delete_pattern
        self._snapshot: Optional[SchemaSnapshot] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> SchemaSnapshot:
        """The current snapshot.

        Raises:
            SchemaLoadError: If no schema has been loaded yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise SchemaLoadError("no schema loaded")
        return snapshot

    @property
    def schema(self) -> Schema:
        return self.snapshot.schema

    @property
    def predicates(self) -> PredicateMap:
        return self.snapshot.predicates

    def predicate(self, type_name: str, field_name: str) -> Optional[str]:
        """Predicate for a field in the current snapshot."""
        return self.snapshot.predicates.predicate(type_name, field_name)

    def load(self, schema: Schema) -> SchemaSnapshot:
        """Resolve and publish a new schema.

        Args:
            schema: The newly loaded schema

        Returns:
            The published snapshot
        """
        with self._lock:
            predicates = resolve_predicates(
                schema,
                update_pattern=self._update_pattern,
                delete_pattern=self._delete_pattern,
            )
            previous = self._snapshot
            snapshot = SchemaSnapshot(
                schema=schema,
                predicates=predicates,
                fingerprint=compute_fingerprint(predicates),
                generation=previous.generation + 1 if previous else 1,
            )
            self._snapshot = snapshot

        if previous is not None and previous.fingerprint != snapshot.fingerprint:
            logger.info(
                f"Predicate map changed: {previous.fingerprint} -> {snapshot.fingerprint}"
            )
        logger.info(
            f"Schema published with {len(schema.types)} types, "
            f"{len(predicates)} mapped types, generation={snapshot.generation}, "
            f"fingerprint={snapshot.fingerprint}"
        )
        return snapshot
