from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .models.projection import ProjectionInput
from .models.results import ProjectionResult


class ProjectionRunRequest(BaseModel):
    projection: ProjectionInput


class ProjectionRunResponse(BaseModel):
    result: ProjectionResult


class NamedProjection(BaseModel):
    name: str
    projection: ProjectionInput


class ProjectionCompareRequest(BaseModel):
    projections: List[NamedProjection] = Field(..., min_length=1)

    @field_validator("projections")
    @classmethod
    def _unique_names(cls, projections: List[NamedProjection]) -> List[NamedProjection]:
        names = [item.name for item in projections]
        if len(set(names)) != len(names):
            raise ValueError("Projection names must be unique")
        return projections


class ProjectionComparison(BaseModel):
    name: str
    npv_rent: Decimal
    npv_cash_flow: Decimal
    total_ebitda: Decimal
    avg_rent_load: Decimal


class ProjectionCompareResponse(BaseModel):
    comparisons: List[ProjectionComparison]


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
