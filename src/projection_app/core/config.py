from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECTION_START_YEAR = 2023
PROJECTION_END_YEAR = 2052
MIN_YEAR = PROJECTION_START_YEAR
MAX_YEAR = PROJECTION_END_YEAR

NPV_START_YEAR = 2028
NPV_END_YEAR = 2052
NPV_BASE_YEAR = 2027

ALLOWED_ROUNDING_MODES = {
    "ROUND_HALF_UP",
    "ROUND_HALF_EVEN",
    "ROUND_HALF_DOWN",
    "ROUND_UP",
    "ROUND_DOWN",
    "ROUND_CEILING",
    "ROUND_FLOOR",
}


class EngineSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PROJECTION_", env_file=".env", extra="ignore")

    app_name: str = "School Projection Engine"
    decimal_precision: int = Field(20, ge=20, description="Significant digits used by every calculation")
    decimal_rounding: str = Field("ROUND_HALF_UP", description="Name of a decimal module rounding mode")
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    @field_validator("decimal_rounding")
    @classmethod
    def _known_rounding(cls, value: str) -> str:
        value = value.upper()
        if value not in ALLOWED_ROUNDING_MODES:
            raise ValueError(f"Unknown rounding mode: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    return EngineSettings()
