from __future__ import annotations

from typing import Dict

from fastapi import FastAPI, HTTPException

from .core.config import get_settings
from .core.logging import configure_logging, get_logger
from .core.result import ErrorCode, Result
from .models.projection import ProjectionInput
from .models.rent import RentModel
from .sample_data import build_sample_projection
from .schemas import (
    ErrorDetail,
    ProjectionCompareRequest,
    ProjectionCompareResponse,
    ProjectionComparison,
    ProjectionRunRequest,
    ProjectionRunResponse,
)
from .services.calculator import ProjectionCalculator

settings = get_settings()
configure_logging(settings)
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")

calculator = ProjectionCalculator()

UNPROCESSABLE_CODES = {ErrorCode.MISSING_CURRICULUM_PLAN, ErrorCode.MISSING_RENT_PLAN}


def status_for(code: ErrorCode) -> int:
    if code in UNPROCESSABLE_CODES:
        return 422
    if code == ErrorCode.CALCULATION_ERROR:
        return 500
    return 400


def raise_for_failure(result: Result, name: str | None = None) -> None:
    if result.is_success:
        return
    detail = ErrorDetail(**result.error.to_dict())
    if name is not None:
        detail.details["projection"] = name
    logger.info("projection_rejected", code=detail.code, projection=name)
    raise HTTPException(status_code=status_for(result.error.code), detail=detail.model_dump())


@app.post("/projections/run", response_model=ProjectionRunResponse)
def run_projection(payload: ProjectionRunRequest) -> ProjectionRunResponse:
    result = calculator.run(payload.projection)
    raise_for_failure(result)
    return ProjectionRunResponse(result=result.data)


@app.post("/projections/compare", response_model=ProjectionCompareResponse)
def compare_projections(payload: ProjectionCompareRequest) -> ProjectionCompareResponse:
    results = calculator.compare({item.name: item.projection for item in payload.projections})
    comparisons = []
    for name, result in results.items():
        raise_for_failure(result, name)
        summary = result.data.summary
        comparisons.append(
            ProjectionComparison(
                name=name,
                npv_rent=summary.npv_rent,
                npv_cash_flow=summary.npv_cash_flow,
                total_ebitda=summary.total_ebitda,
                avg_rent_load=summary.avg_rent_load,
            )
        )
    return ProjectionCompareResponse(comparisons=comparisons)


@app.get("/projections/sample", response_model=ProjectionInput)
def sample_projection(rent_model: RentModel = RentModel.FIXED_ESCALATION) -> ProjectionInput:
    return build_sample_projection(rent_model)


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
