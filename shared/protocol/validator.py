from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

import jsonschema

from .errors import ConfigError

SCHEMA_DIR = Path(__file__).parent / "schemas"

# Mapping schema name -> schema filename (relative to SCHEMA_DIR)
SCHEMA_REGISTRY = {
    "server.config": "server.config.json",
}


def _schema_path(name: str) -> Optional[Path]:
    filename = SCHEMA_REGISTRY.get(name)
    if not filename:
        return None
    path = SCHEMA_DIR / filename
    return path if path.exists() else None


@lru_cache(maxsize=16)
def load_schema(name: str) -> Optional[dict]:
    """Load JSON schema by registry name if present."""
    path = _schema_path(name)
    if not path:
        return None
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


def validate_config(config: Mapping[str, Any]) -> None:
    """Validate an in-process server configuration mapping."""
    schema = load_schema("server.config")
    if not schema:
        return
    # Path values are accepted wherever the schema asks for a string
    instance = {key: str(value) if isinstance(value, Path) else value for key, value in config.items()}
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"Invalid server configuration: {exc.message}") from exc


__all__ = ["load_schema", "validate_config"]
