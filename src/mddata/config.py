"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:       str  = "mddata"
    url_base:       str  = Field(default="",      description="Link header text to <url_base>/<header path>")
    numbered:       bool = Field(default=False,   description="Number headers even without a .nh command")
    include_text:   bool = Field(default=True,    description="Fold paragraphs into _text in data output")
    max_key_length: int  = Field(default=64, ge=1, description="Longer normalized keys degrade to ''")
    output_dir:     str  = Field(default="dist",  description="Directory for rendered HTML + data files")
    output_format:  str  = Field(default="html", pattern="^(html|json|yaml)$", description="html, json or yaml")
    log_level:      str  = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDDATA_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDDATA_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
