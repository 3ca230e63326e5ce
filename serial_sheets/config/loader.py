from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, DuplicatePolicy, GroupingMode, PipelineConfig
from ..models.output_record import IdentityMode

"""Config loader.

Responsibilities:
- Load the YAML config (default config/serial_sheets.yml)
- Validate it against config_schema.json (unknown keys are rejected)
- Apply defaults for missing keys
- Apply environment overrides (SERIAL_SHEETS_OUTPUT, SERIAL_SHEETS_MAPPING_STORE)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/serial_sheets.yml")

ENV_OUTPUT = "SERIAL_SHEETS_OUTPUT"
ENV_MAPPING_STORE = "SERIAL_SHEETS_MAPPING_STORE"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: if the schema file is missing or invalid, or the config
            data violates it (wrong types, unknown keys, bad enum values)
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


def build_config(data: dict[str, Any]) -> AppConfig:
    """Build an AppConfig from validated data, applying defaults and env overrides."""
    defaults = AppConfig()
    pipeline = PipelineConfig(
        mode=IdentityMode(data.get("identity_mode", defaults.pipeline.mode.value)),
        grouping=GroupingMode(data.get("grouping", defaults.pipeline.grouping.value)),
        validate=data.get("validate", defaults.pipeline.validate),
        duplicate_policy=DuplicatePolicy(
            data.get("duplicate_policy", defaults.pipeline.duplicate_policy.value)
        ),
    )
    return AppConfig(
        output_path=os.getenv(ENV_OUTPUT) or data.get("output_path", defaults.output_path),
        pipeline=pipeline,
        has_header=data.get("has_header", defaults.has_header),
        column_index=data.get("column_index", defaults.column_index),
        mapping_store=os.getenv(ENV_MAPPING_STORE) or data.get("mapping_store", defaults.mapping_store),
        mismatch_log_dir=data.get("mismatch_log_dir", defaults.mismatch_log_dir),
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)
    return build_config(data)
