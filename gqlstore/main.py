"""
gqlstore startup helpers.

Wires configuration, logging and the initial schema load together:

    >>> config = ServiceConfig.from_env()
    >>> setup_logging(config)
    >>> state = bootstrap(config)

Invariants:
    - Logging is configured before the schema is loaded
    - A schema load failure leaves no snapshot published

How to change safely:
    - Reload by calling state.load() with a new schema; never mutate
      the published snapshot
"""

from __future__ import annotations

import logging
from pathlib import Path

import json_log_formatter

from .config import ServiceConfig
from .schema import SchemaState, load_schema

logger = logging.getLogger(__name__)


def setup_logging(config: ServiceConfig) -> None:
    """Configure logging based on configuration.

    Args:
        config: Service configuration
    """
    level = getattr(logging, config.observability.log_level.upper(), logging.INFO)

    if config.observability.log_format == "json":
        formatter: logging.Formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def bootstrap(config: ServiceConfig) -> SchemaState:
    """Create the schema state and load the configured schema, if any.

    Args:
        config: Service configuration

    Returns:
        SchemaState, loaded when config.schema.schema_path is set

    Raises:
        SchemaLoadError: If the configured schema cannot be loaded
        OSError: If the configured schema file cannot be read
    """
    config.log_config()
    state = SchemaState(
        update_pattern=config.schema.update_payload_pattern,
        delete_pattern=config.schema.delete_payload_pattern,
    )

    if config.schema.schema_path:
        sdl = Path(config.schema.schema_path).read_text(encoding="utf-8")
        state.load(load_schema(sdl, id_type=config.schema.id_type))
    else:
        logger.warning("No GRAPHQL_SCHEMA_PATH configured; starting without a schema")

    return state
