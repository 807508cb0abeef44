"""Importer configuration loaded from environment variables.

All configuration values have sensible defaults except the PostgreSQL
connection string, which is required only when the ``postgis`` store is
selected.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad configuration is caught before a run
    touches the store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from course_map.core.constants import DEFAULT_ARTIFACTS_DIR, DEFAULT_SIMPLIFY_EPSILON_M
from course_map.core.exceptions import PipelineError

POSTGIS_BACKEND = "postgis"
MEMORY_BACKEND = "memory"
STORE_BACKENDS = (POSTGIS_BACKEND, MEMORY_BACKEND)


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ImporterConfig:
    """Immutable importer configuration.

    Built once per process and passed explicitly to the store factory,
    the importer, the validator, and the query service.

    Attributes:
        connection_string: PostgreSQL connection string (libpq DSN or URI).
        store_backend: Spatial store adapter (``postgis`` or ``memory``).
        schema_name: Database schema holding the features table.
        table_name: Features table name.
        simplifier: Line simplifier adapter name.
        simplify_epsilon_m: Simplification tolerance in metres.
        artifacts_dir: Directory receiving the validation report.
    """

    connection_string: str = ""
    store_backend: str = POSTGIS_BACKEND
    schema_name: str = "public"
    table_name: str = "course_features"
    simplifier: str = "douglas_peucker"
    simplify_epsilon_m: float = DEFAULT_SIMPLIFY_EPSILON_M
    artifacts_dir: str = DEFAULT_ARTIFACTS_DIR

    @classmethod
    def from_env(cls, **overrides: object) -> ImporterConfig:
        """Load and validate configuration from environment variables.

        Args:
            **overrides: Field values that replace the environment's
                (e.g. from command-line flags).  Applied before validation,
                so ``store_backend="memory"`` needs no connection string.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required value is empty.
            ValueError: If ``COURSEMAP_SIMPLIFY_EPSILON_M`` cannot be parsed.
        """
        config = cls(
            connection_string=os.getenv("COURSEMAP_CONNECTION_STRING", ""),
            store_backend=os.getenv("COURSEMAP_STORE", POSTGIS_BACKEND),
            schema_name=os.getenv("COURSEMAP_SCHEMA", "public"),
            table_name=os.getenv("COURSEMAP_TABLE", "course_features"),
            simplifier=os.getenv("COURSEMAP_SIMPLIFIER", "douglas_peucker"),
            simplify_epsilon_m=float(
                os.getenv("COURSEMAP_SIMPLIFY_EPSILON_M", str(DEFAULT_SIMPLIFY_EPSILON_M))
            ),
            artifacts_dir=os.getenv("COURSEMAP_ARTIFACTS_DIR", DEFAULT_ARTIFACTS_DIR),
        )
        if overrides:
            config = replace(config, **overrides)  # type: ignore[arg-type]
        validate_config(config)
        return config


def validate_config(config: ImporterConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.store_backend not in STORE_BACKENDS:
        raise ConfigValidationError(
            "COURSEMAP_STORE",
            config.store_backend,
            f"must be one of {', '.join(STORE_BACKENDS)}",
        )

    if config.store_backend == POSTGIS_BACKEND and not config.connection_string:
        raise ConfigValidationError(
            "COURSEMAP_CONNECTION_STRING",
            config.connection_string,
            "must not be empty when COURSEMAP_STORE=postgis",
        )

    if config.simplify_epsilon_m < 0:
        raise ConfigValidationError(
            "COURSEMAP_SIMPLIFY_EPSILON_M",
            config.simplify_epsilon_m,
            "must be >= 0 (metres)",
        )

    if not config.table_name:
        raise ConfigValidationError("COURSEMAP_TABLE", config.table_name, "must not be empty")

    if not config.schema_name:
        raise ConfigValidationError("COURSEMAP_SCHEMA", config.schema_name, "must not be empty")

    if not config.artifacts_dir:
        raise ConfigValidationError(
            "COURSEMAP_ARTIFACTS_DIR",
            config.artifacts_dir,
            "must not be empty",
        )
