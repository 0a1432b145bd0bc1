from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "SKINSIM_"


class Settings(BaseModel):
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    jpeg_quality: int = Field(default=90, ge=1, le=100)
    region_stride: int = Field(default=4, ge=1)
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
