from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, SheetTitles

"""Config loader.

Responsibilities:
- Load YAML config (default config/cellmark.yml)
- Validate against config_schema.json (no unknown keys)
- Apply defaults for absent keys
- Apply CELLMARK_* environment overrides
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/cellmark.yml")

ENV_SECTION_PREFIX = "CELLMARK_SECTION_PREFIX"
ENV_SEARCH_DEBOUNCE_MS = "CELLMARK_SEARCH_DEBOUNCE_MS"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data violating the schema
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


def config_from_dict(data: Mapping[str, Any]) -> AppConfig:
    defaults = AppConfig()
    sheets_raw = data.get("sheets") or {}
    return AppConfig(
        section_prefix=data.get("section_prefix", defaults.section_prefix),
        search_debounce_ms=data.get("search_debounce_ms", defaults.search_debounce_ms),
        output_prefix=data.get("output_prefix", defaults.output_prefix),
        sheets=SheetTitles(
            primary_title=sheets_raw.get("primary_title", defaults.sheets.primary_title),
            red_extract_title=sheets_raw.get("red_extract_title", defaults.sheets.red_extract_title),
        ),
        comment_author=data.get("comment_author", defaults.comment_author),
    )


def apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    merged = dict(data)
    prefix = env.get(ENV_SECTION_PREFIX)
    if prefix:
        merged["section_prefix"] = prefix
    debounce = env.get(ENV_SEARCH_DEBOUNCE_MS)
    if debounce:
        try:
            merged["search_debounce_ms"] = int(debounce)
        except ValueError as e:
            raise ConfigError(f"{ENV_SEARCH_DEBOUNCE_MS} must be an integer: {debounce!r}") from e
    return merged


def load_config(path: Path, environ: Mapping[str, str] | None = None) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    data = apply_env_overrides(data, environ)
    _validate_config_schema(data)
    return config_from_dict(data)


def default_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Defaults plus environment overrides, for runs without a config file."""
    data = apply_env_overrides({}, environ)
    _validate_config_schema(data)
    return config_from_dict(data)
