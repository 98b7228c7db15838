from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.client import Client, ClientDirectory
from ..models.config_models import DatabaseConfig, ImportConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/invoices.yml by default)
- Validate against the packaged JSON schema (config_schema.json)
- Apply defaults (output_directory=./output, empty client directory)
- Build the ClientDirectory from the `clients` section
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "build_client_directory",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/invoices.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (missing required keys, wrong
            types, unknown keys).
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


def build_client_directory(raw: dict[str, list[dict[str, Any]]] | None) -> ClientDirectory:
    """Convert the `clients` config section into a ClientDirectory.

    A client's own `business` defaults to the key it is listed under. Ids are
    kept as strings; clients without an id get an empty one.
    """
    directory: ClientDirectory = {}
    for business_key, entries in (raw or {}).items():
        clients: list[Client] = []
        for entry in entries or []:
            raw_id = entry.get("id")
            clients.append(
                Client(
                    id="" if raw_id is None else str(raw_id),
                    name=entry["name"],
                    business=entry.get("business") or business_key,
                    locations=entry.get("locations") or "",
                )
            )
        directory[business_key] = clients
    return directory


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return ImportConfig(
        source_directory=data["source_directory"],
        output_directory=data.get("output_directory", "./output"),
        clients=build_client_directory(data.get("clients")),
        database=db,
    )
