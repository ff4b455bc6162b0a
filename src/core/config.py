"""
Application settings.

Defaults live on the model, environment variables prefixed with REFORGED_ override them:
ex) REFORGED_DATABASE_URL=sqlite:///./other.db
"""

import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "REFORGED_"


class Settings(BaseModel):
    database_url: str = "sqlite:///./reforged.db"
    log_level: str = "INFO"
    # cosmetic "thinking" pause before the bot replies
    bot_move_delay: float = Field(default=0.5, ge=0)
    win_reward: int = Field(default=200, ge=0)
    consolation_reward: int = Field(default=100, ge=0)
    base_budget: int = Field(default=38, ge=0)
    # raise instead of falling back to the standard position when a custom FEN is broken
    strict_fen: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Pick up every REFORGED_<FIELD> variable that is set. Pydantic does the type conversion/validation."""
        environ = os.environ if environ is None else environ
        overrides = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(overrides)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
