from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class KvfsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    temp_dir: str | None = None
    create_temp_dir: bool = False

    @field_validator("temp_dir")
    @classmethod
    def validate_temp_dir(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            raise ValueError("temp_dir must not be empty")
        return normalized

    def resolve_temp_dir(self) -> Path | None:
        """Return the override directory, or None to use the system temp dir."""
        if self.temp_dir is None:
            return None

        directory = Path(self.temp_dir).expanduser()
        if self.create_temp_dir:
            directory.mkdir(parents=True, exist_ok=True)
        return directory


def load_config(path: str | Path) -> KvfsConfig:
    """Load temp-dir settings from a JSON or YAML file."""
    config_path = Path(path)
    payload = _read_settings(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(
            f"kvfs config at {config_path} must be a mapping of settings "
            "(temp_dir, create_temp_dir)"
        )

    try:
        return KvfsConfig.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid kvfs config at {config_path}: {exc}") from exc


def _read_settings(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ValueError(f"kvfs config is neither JSON nor YAML: {exc}") from exc
