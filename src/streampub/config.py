"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "STREAMPUB_"


class Settings(BaseModel):
    app_name:        str = "streampub"
    db_url:          str = "sqlite:///streampub.db"
    chunk_size:      int = Field(default=64,   ge=1, description="Characters per chunk when streaming a file")
    chunk_delay:     float = Field(default=0.0, ge=0, description="Seconds between streamed file chunks")
    visual_slots:    int = Field(default=3,    ge=1, le=3, description="Visual anchor slots to fetch")
    render_interval: float = Field(default=0.0, ge=0, description="Min seconds between intermediate renders; 0 renders every chunk")
    fetch_timeout:   float = Field(default=60.0, gt=0, description="Seconds before an image fetch is abandoned")
    image_dir:       Optional[str] = Field(default=None, description="Directory served by the directory image fetcher")
    output_format:   str = Field(default="json", pattern="^(json|md|html)$", description="json, md or html")
    output_dir:      str = Field(default="dist", description="Directory for rendered output files")
    credential_env:  Optional[str] = Field(default=None, description="Env var that must hold an API credential")
    log_level:       str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then STREAMPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
