"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    site_title:       str = "mdsite"
    site_description: str = Field(default="", description="Channel description for the RSS feed")
    site_url:         str = Field(default="http://localhost:8000", description="Absolute URL used in feed links")
    author:           str = ""
    language:         str = "en-gb"
    base_path:        str = Field(default="", description="URL prefix when served from a sub-path, e.g. /blog")
    content_dir:      str = Field(default="content", description="Directory of source .md files")
    output_dir:       str = Field(default="site",    description="Directory the generated site is written to")
    ffmpeg_path:      str = Field(default="ffmpeg",  description="ffmpeg executable for thumbnails/waveforms")
    ffmpeg_timeout:   int = Field(default=60,  ge=1, description="Seconds before an ffmpeg call is abandoned")
    rss_limit:        int = Field(default=20,  ge=1, description="Max articles in feed.xml")
    words_per_minute: int = Field(default=200, ge=1, description="Reading speed for reading-time estimates")
    about_text:       str = Field(default="",  description="Paragraphs for the about page, separated by blank lines")
    newsletter_url:   str = Field(default="",  description="Form action of the newsletter signup on the subscribe page")


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
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
