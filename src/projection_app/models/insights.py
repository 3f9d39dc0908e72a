from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class InsightType(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    OPTIMAL = "optimal"


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: InsightType
    title: str
    message: str
    recommendation: str
