from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..excel.reader import DEFAULT_DATE_FORMAT
from ..excel.writer import DEFAULT_EXPORT_FILE_NAME, DEFAULT_EXPORT_SHEET_NAME, DEFAULT_WIDTH_PADDING
from ..services.pipeline import DEFAULT_PAGE_SIZE

"""Config loader.

Responsibilities:
- Load the optional YAML file (default ``config/sheetview.yml``)
- Validate it against ``config_schema.json`` shipped next to this module
- Apply defaults for every missing key
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "ExportConfig",
    "ViewerConfig",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/sheetview.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ExportConfig:
    file_name: str = DEFAULT_EXPORT_FILE_NAME
    sheet_name: str = DEFAULT_EXPORT_SHEET_NAME
    width_padding: int = DEFAULT_WIDTH_PADDING


@dataclass(frozen=True)
class ViewerConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    date_format: str = DEFAULT_DATE_FORMAT
    skip_blank_rows: bool = True
    export: ExportConfig = field(default_factory=ExportConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the data
            violates the schema (unknown keys, wrong types, bad ranges)
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


def load_config(path: Path | None = None) -> ViewerConfig:
    """Load viewer settings.

    With ``path=None`` the default location is used and a missing file means
    "all defaults". An explicitly given path must exist.
    """
    explicit = path is not None
    path = Path(path) if explicit else DEFAULT_CONFIG_PATH
    if not path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {path}")
        return ViewerConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    export_raw = data.get("export") or {}
    export = ExportConfig(
        file_name=export_raw.get("file_name", DEFAULT_EXPORT_FILE_NAME),
        sheet_name=export_raw.get("sheet_name", DEFAULT_EXPORT_SHEET_NAME),
        width_padding=export_raw.get("width_padding", DEFAULT_WIDTH_PADDING),
    )
    return ViewerConfig(
        page_size=data.get("page_size", DEFAULT_PAGE_SIZE),
        date_format=data.get("date_format", DEFAULT_DATE_FORMAT),
        skip_blank_rows=data.get("skip_blank_rows", True),
        export=export,
    )
