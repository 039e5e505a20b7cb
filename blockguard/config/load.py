"""Load schema configuration from JSON or TOML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ConfigError
from .store import RuleStore


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ConfigError(f"Duplicate key `{key}` in configuration")
        result[key] = value
    return result


def parse_config_text(text: str) -> dict[str, Any]:
    """Decode JSON configuration text."""
    if not text or not text.strip():
        raise ConfigError("Configuration data is empty")
    try:
        data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Configuration is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be an object")
    return data


def load_config(path: Path) -> dict[str, Any]:
    """
    Load schema configuration from a `.json` or `.toml` file.

    Both formats share one shape: a `tools` table of rule sets keyed by block
    type, and an optional `customTags` table.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e

    if path.suffix.lower() == ".toml":
        import tomllib

        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse configuration TOML: {e}") from e

    return parse_config_text(text)


def load_rule_store(path: Path) -> RuleStore:
    return RuleStore.from_config(load_config(path))
