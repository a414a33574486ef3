from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.column_scheme import ColumnScheme

"""Config loader for the catalog import.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate against the bundled JSON schema (unknown keys rejected)
- Apply defaults (column labels, placeholder category, image cap)
- Resolve database settings, environment variables taking precedence
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")
DEFAULT_TABLE = "products"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None
    table: str = DEFAULT_TABLE

    def resolve_dsn(self) -> str | None:
        """DSN for psycopg2, or None when nothing is configured.

        Precedence: DATABASE_URL / PGDSN, then the configured dsn, then the
        PG* variables falling back to the individual config fields.
        """
        dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or self.dsn
        if dsn:
            return dsn
        host = os.getenv("PGHOST", self.host or "")
        database = os.getenv("PGDATABASE", self.database or "")
        if not host and not database:
            return None
        port = os.getenv("PGPORT", str(self.port) if self.port else "5432")
        user = os.getenv("PGUSER", self.user or "postgres")
        password = os.getenv("PGPASSWORD", self.password or "")
        dsn = f"host={host or 'localhost'} port={port} user={user} dbname={database or 'postgres'}"
        if password:
            dsn += f" password={password}"
        return dsn


@dataclass(frozen=True)
class ImportConfig:
    columns: ColumnScheme = field(default_factory=ColumnScheme)
    error_log_dir: str = "logs"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_from_dict(data: dict[str, Any]) -> ImportConfig:
    _validate_config_schema(data)

    overrides: dict[str, Any] = dict(data.get("columns") or {})
    if "category_placeholder" in data:
        overrides["category_placeholder"] = data["category_placeholder"]
    if "max_images" in data:
        overrides["max_images"] = data["max_images"]
    try:
        columns = ColumnScheme().with_overrides(overrides)
    except ValueError as e:
        raise ConfigError(f"config validation failed: {e}") from e

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
        table=db_raw.get("table", DEFAULT_TABLE),
    )
    return ImportConfig(
        columns=columns,
        error_log_dir=data.get("error_log_dir", "logs"),
        database=db,
    )


def load_config(path: Path | None = None) -> ImportConfig:
    """Load configuration from ``path``.

    Without a path the default location is tried and a missing file means
    defaults; an explicitly given path must exist.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ImportConfig()
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")
    return config_from_dict(data)
