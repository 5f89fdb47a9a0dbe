"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:           str = "memoria"
    db_url:             str = "sqlite:///memoria.db"
    owner_id:           str = Field(default="local",     min_length=1, description="Owner all CLI reads/writes are scoped to")
    max_documents:      int = Field(default=10,          ge=1, le=10, description="Per-owner document ceiling")
    max_document_bytes: int = Field(default=800 * 1024,  ge=1, description="Max stored body size in bytes")
    search_limit:       int = Field(default=5,           ge=1, le=10, description="Default number of search results")
    default_max_bytes:  int = Field(default=64 * 1024,   ge=1, description="Default body cap for get")
    log_level:          str = Field(default="WARNING",   pattern="^(DEBUG|INFO|WARNING|ERROR)$", description="Logging level")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MEMORIA_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MEMORIA_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
