"""Runtime settings, read from POKER_UI_* environment variables."""
from __future__ import annotations
import logging
import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "POKER_UI_"


class Settings(BaseModel):
    engine_url: str = Field(default="http://127.0.0.1:1420", min_length=1)
    engine_timeout: float = Field(default=5.0, gt=0)
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    hero_index: int = Field(default=0, ge=0)   # seat drawn nearest the action panel
    max_tables: int = Field(default=16, ge=1)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment; unknown variables are ignored."""
    environ = os.environ if environ is None else environ
    values = {}
    for name in Settings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = environ[key]
    return Settings.model_validate(values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
