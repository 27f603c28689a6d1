"""Configuration loading from YAML + environment variables (.env included)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from platerelay.types import RecordFormat

DEFAULT_EVIDENCE_LABELS = ["label", "nameplate", "signage", "material property"]


class RelayConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Inbound auth (empty = disabled)
    relay_api_key: str = ""

    # OCR / label detection
    google_credentials_file: str = ""  # empty = application default credentials
    annotate_timeout: float = 10.0

    # Structured formatting
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_model: str = "gpt-4o-mini"
    record_format: RecordFormat = RecordFormat.JSON
    format_timeout: float = 20.0

    # Content gate
    evidence_labels: list[str] = Field(default_factory=lambda: list(DEFAULT_EVIDENCE_LABELS))

    @classmethod
    def from_yaml(cls, path: str | Path = "platerelay.yaml") -> RelayConfig:
        """Load config from YAML file, with env vars taking precedence."""
        yaml_path = Path(path)
        yaml_data: dict[str, Any] = {}

        if yaml_path.exists():
            with yaml_path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            yaml_data = _flatten_yaml(raw.get("platerelay", {}))

        # init kwargs outrank env and .env in pydantic-settings, so keep only keys neither sets
        dotenv_keys = {key.lower() for key in dotenv_values(".env")}
        env_keys = {name for name in cls.model_fields if _env_has(name) or name in dotenv_keys}
        return cls(**{k: v for k, v in yaml_data.items() if k not in env_keys})


def _env_has(field_name: str) -> bool:
    return field_name.upper() in os.environ or field_name in os.environ


def _flatten_yaml(data: dict, prefix: str = "") -> dict:
    """Flatten nested YAML into flat key-value pairs for Pydantic.

    ``openai: {model: x}`` becomes ``openai_model: x``.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(_flatten_yaml(value, full_key))
        else:
            flat[full_key] = value
    return flat
