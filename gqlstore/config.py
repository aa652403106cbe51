"""
Configuration management for gqlstore.

All configuration is done via environment variables.
This module provides typed configuration classes with validation.

Invariants:
    - All settings have sensible defaults for local development
    - Payload type name patterns always contain the {type} placeholder

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
    - Changing the payload patterns changes generated type names
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from .schema.predicates import DELETE_PAYLOAD_PATTERN, UPDATE_PAYLOAD_PATTERN
from .schema.types import ID_TYPE

logger = logging.getLogger(__name__)

LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "json"),
        )


@dataclass(frozen=True)
class SchemaConfig:
    """Schema loading configuration.

    Attributes:
        schema_path: Path of the GraphQL SDL file loaded at startup
        id_type: Name of the identifier scalar (never mapped to a predicate)
        update_payload_pattern: Name of generated update payload types
        delete_payload_pattern: Name of generated delete payload types
    """

    schema_path: str | None = None
    id_type: str = ID_TYPE
    update_payload_pattern: str = UPDATE_PAYLOAD_PATTERN
    delete_payload_pattern: str = DELETE_PAYLOAD_PATTERN

    @classmethod
    def from_env(cls) -> SchemaConfig:
        """Load configuration from environment variables."""
        return cls(
            schema_path=os.getenv("GRAPHQL_SCHEMA_PATH"),
            id_type=os.getenv("GRAPHQL_ID_TYPE", ID_TYPE),
            update_payload_pattern=os.getenv("GRAPHQL_UPDATE_PAYLOAD", UPDATE_PAYLOAD_PATTERN),
            delete_payload_pattern=os.getenv("GRAPHQL_DELETE_PAYLOAD", DELETE_PAYLOAD_PATTERN),
        )


@dataclass(frozen=True)
class CustomHTTPConfig:
    """Outbound request settings for custom HTTP resolvers.

    Attributes:
        timeout_seconds: Timeout attached to every built request
        user_agent: User-Agent header for built requests (None = omit)
    """

    timeout_seconds: float = 30.0
    user_agent: str | None = None

    @classmethod
    def from_env(cls) -> CustomHTTPConfig:
        """Load configuration from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("CUSTOM_HTTP_TIMEOUT", "30")),
            user_agent=os.getenv("CUSTOM_HTTP_USER_AGENT"),
        )


@dataclass
class ServiceConfig:
    """Complete service configuration.

    Attributes:
        schema: Schema loading configuration
        custom_http: Custom resolver request configuration
        observability: Logging configuration
    """

    schema: SchemaConfig = field(default_factory=SchemaConfig)
    custom_http: CustomHTTPConfig = field(default_factory=CustomHTTPConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> ServiceConfig:
        """Load complete configuration from environment variables.

        Raises:
            ValueError: If configuration is invalid.
        """
        config = cls(
            schema=SchemaConfig.from_env(),
            custom_http=CustomHTTPConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.observability.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid LOG_FORMAT '{self.observability.log_format}'. "
                f"Must be one of: {', '.join(LOG_FORMATS)}"
            )

        if self.custom_http.timeout_seconds <= 0:
            raise ValueError(
                f"CUSTOM_HTTP_TIMEOUT must be positive, got {self.custom_http.timeout_seconds}"
            )

        for name, pattern in (
            ("GRAPHQL_UPDATE_PAYLOAD", self.schema.update_payload_pattern),
            ("GRAPHQL_DELETE_PAYLOAD", self.schema.delete_payload_pattern),
        ):
            if "{type}" not in pattern:
                raise ValueError(f"{name} must contain '{{type}}', got '{pattern}'")

        if self.schema.schema_path and not os.path.exists(self.schema.schema_path):
            logger.warning(f"Schema file does not exist: {self.schema.schema_path}")

    def log_config(self) -> None:
        """Log configuration."""
        logger.info(
            "Service configuration loaded",
            extra={
                "schema_path": self.schema.schema_path,
                "id_type": self.schema.id_type,
                "custom_http_timeout": self.custom_http.timeout_seconds,
                "log_level": self.observability.log_level,
                "log_format": self.observability.log_format,
            },
        )
