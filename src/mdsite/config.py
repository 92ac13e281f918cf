"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    site_title:    str = "mdsite"
    source_dir:    str = Field(default="chapters", description="Root directory scanned for chapters")
    pattern:       str = Field(default="**/*.md",  description="Glob pattern relative to source_dir")
    output_dir:    str = Field(default="docs",     description="Directory for rendered HTML pages")
    mode:          str = Field(default="production", pattern="^(preview|production)$", description="preview or production")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    max_workers:   int = Field(default=4, ge=1,    description="Concurrent page render/write workers")
    strict:        bool = Field(default=False,     description="Abort the build on any frontmatter violation")
    base_href:     str | None = Field(default=None, description="<base href> emitted in production pages")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
