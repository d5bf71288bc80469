# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SLIDECRAFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote module / data origin used by the configuration sandbox
    CDN_BASE: str = "https://esm.sh/"
    FETCH_TIMEOUT_S: float = 30.0

    # CSS engine
    CUSTOM_CSS_LAYER: str = "slides"

    # Layouts
    DEFAULT_LAYOUT: str = "default"
    LAYOUTS_DIR: Optional[str] = Field(default=None, description="Extra directory scanned for *.html layouts")

    # Lazy slide component
    LOADING_DELAY_MS: int = 300


@lru_cache()
def get_settings() -> Settings:
    return Settings()
