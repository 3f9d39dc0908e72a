from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from ..core.config import NPV_BASE_YEAR, NPV_END_YEAR, NPV_START_YEAR, PROJECTION_END_YEAR, PROJECTION_START_YEAR
from ..core.decimals import HUNDRED, ZERO, DecimalKernel, resolve_kernel
from ..core.logging import get_logger
from ..core.result import ErrorCode, Result, guarded
from ..models.admin import AdminSettings
from ..models.capex import CapexItem
from ..models.curriculum import PRIMARY_CURRICULUM
from ..models.projection import ProjectionInput
from ..models.results import CashFlowYear, EbitdaYear, ProjectionResult, ProjectionSummary, YearlyProjection
from .capex import calculate_capex_from_rules
from .cashflow import calculate_cash_flow
from .ebitda import calculate_ebitda
from .escalation import calculate_tuition_growth
from .insights import calculate_cost_insights
from .npv import calculate_npv
from .opex import calculate_opex
from .rent import build_rent_params, calculate_rent
from .revenue import bucket_other_revenue, calculate_revenue
from .staff_costs import calculate_staff_cost_base_from_curriculum, calculate_staff_costs
from .zakat import validate_zakat_rate

logger = get_logger(__name__)

YEARS = range(PROJECTION_START_YEAR, PROJECTION_END_YEAR + 1)


@dataclass
class RevenueState:
    total_by_year: Dict[int, Decimal]
    tuition_by_year: Dict[int, Dict[str, Decimal]] = field(default_factory=lambda: defaultdict(dict))
    students_by_year: Dict[int, Dict[str, int]] = field(default_factory=lambda: defaultdict(dict))


class _StepFailed(Exception):
    def __init__(self, step: str, result: Result):
        super().__init__(result.message)
        self.step = step
        self.result = result


class ProjectionCalculator:
    def __init__(self, kernel: Optional[DecimalKernel] = None):
        self.kernel = resolve_kernel(kernel)

    @guarded("run projection")
    def run(self, projection: ProjectionInput) -> Result[ProjectionResult]:
        started = time.perf_counter()
        log = logger.bind(
            curriculum_plans=len(projection.curriculum_plans),
            rent_model=projection.rent_plan.rent_model.value if projection.rent_plan else None,
        )
        log.info("projection_started")
        try:
            self._validate(projection)
            revenue = self._compute_revenue(projection)
            staff_cost_by_year = self._compute_staff_costs(projection)
            rent_by_year = self._compute_rent(projection, revenue.total_by_year)
            opex_by_year = self._compute_opex(projection, revenue.total_by_year)
            ebitda_rows = self._step(
                "ebitda",
                calculate_ebitda(revenue.total_by_year, staff_cost_by_year, rent_by_year, opex_by_year, self.kernel),
            )
            cash_flow_rows = self._step(
                "cash_flow",
                calculate_cash_flow(
                    {row.year: row.ebitda for row in ebitda_rows},
                    self._compute_capex(projection),
                    projection.interest_by_year,
                    self._tax_rate(projection.admin_settings),
                    kernel=self.kernel,
                ),
            )
            years = self._assemble_years(ebitda_rows, cash_flow_rows, revenue)
            summary = self._summarize(years, rent_by_year, projection)
            insights = self._step("insights", calculate_cost_insights(years, kernel=self.kernel))
        except _StepFailed as exc:
            log.warning("projection_step_failed", step=exc.step, code=exc.result.code.value, message=exc.result.message)
            return exc.result.propagate()

        duration_ms = (time.perf_counter() - started) * 1000
        log.info("projection_completed", years=len(years), duration_ms=round(duration_ms, 2))
        return Result.success(ProjectionResult(years=years, summary=summary, insights=insights, duration_ms=duration_ms))

    def _step(self, step: str, result: Result):
        if result.is_failure:
            raise _StepFailed(step, result)
        return result.data

    def _validate(self, projection: ProjectionInput) -> None:
        plans = projection.curriculum_plans
        if not plans:
            raise _StepFailed(
                "validate",
                Result.failure(
                    "At least one curriculum plan is required",
                    ErrorCode.MISSING_CURRICULUM_PLAN,
                    field="curriculum_plans",
                ),
            )
        if not any(plan.curriculum_type == PRIMARY_CURRICULUM for plan in plans):
            raise _StepFailed(
                "validate",
                Result.failure(
                    f"{PRIMARY_CURRICULUM.value} curriculum plan is required",
                    ErrorCode.MISSING_CURRICULUM_PLAN,
                    field="curriculum_plans",
                ),
            )
        for plan in plans:
            if not plan.students_projection:
                raise _StepFailed(
                    "validate",
                    Result.failure(
                        f"Students projection is required for curriculum {plan.curriculum_type.value}",
                        ErrorCode.MISSING_DATA,
                        field="students_projection",
                    ),
                )
        if projection.rent_plan is None:
            raise _StepFailed(
                "validate",
                Result.failure("Rent plan is required", ErrorCode.MISSING_RENT_PLAN, field="rent_plan"),
            )

    def _compute_revenue(self, projection: ProjectionInput) -> RevenueState:
        kernel = self.kernel
        state = RevenueState(total_by_year={year: ZERO for year in YEARS})
        cpi_rate = projection.admin_settings.cpi_rate

        for plan in projection.curriculum_plans:
            curriculum = plan.curriculum_type.value
            students = {year: count for year, count in plan.students_by_year().items() if year in YEARS}
            tuition = self._step(
                "tuition",
                calculate_tuition_growth(
                    plan.tuition_base,
                    cpi_rate,
                    plan.cpi_frequency,
                    PROJECTION_START_YEAR,
                    PROJECTION_START_YEAR,
                    PROJECTION_END_YEAR,
                    kernel=kernel,
                ),
            )
            tuition = [row for row in tuition if row.year in students]
            if not tuition:
                logger.warning("curriculum_without_students_in_horizon", curriculum=curriculum)
                continue
            rows = self._step("revenue", calculate_revenue(tuition, students, kernel=kernel))
            for row in rows:
                state.total_by_year[row.year] = kernel.add(state.total_by_year[row.year], row.revenue)
                state.tuition_by_year[row.year][curriculum] = row.tuition
                state.students_by_year[row.year][curriculum] = row.students

        other_revenue = self._step("other_revenue", bucket_other_revenue(projection.other_revenue, kernel=kernel))
        for year, amount in other_revenue.items():
            if year in state.total_by_year:
                state.total_by_year[year] = kernel.add(state.total_by_year[year], amount)
        return state

    def _tax_rate(self, settings: AdminSettings) -> Decimal:
        if settings.tax_rate is not None:
            return settings.tax_rate
        return self._step("zakat", validate_zakat_rate(settings.effective_tax_rate(), kernel=self.kernel))

    def _compute_staff_costs(self, projection: ProjectionInput) -> Dict[int, Decimal]:
        base = projection.staff_cost_base
        if base is None:
            base = self._step(
                "staff_cost_base",
                calculate_staff_cost_base_from_curriculum(
                    projection.curriculum_plans, projection.staff_cost_base_year, kernel=self.kernel
                ),
            )
        rows = self._step(
            "staff_costs",
            calculate_staff_costs(
                base,
                projection.admin_settings.cpi_rate,
                projection.staff_cost_cpi_frequency,
                projection.staff_cost_base_year,
                PROJECTION_START_YEAR,
                PROJECTION_END_YEAR,
                kernel=self.kernel,
            ),
        )
        return {row.year: row.staff_cost for row in rows}

    def _compute_rent(self, projection: ProjectionInput, revenue_by_year: Mapping[int, Decimal]) -> Dict[int, Decimal]:
        params = self._step(
            "rent",
            build_rent_params(
                projection.rent_plan,
                PROJECTION_START_YEAR,
                PROJECTION_END_YEAR,
                revenue_by_year,
                kernel=self.kernel,
            ),
        )
        rows = self._step("rent", calculate_rent(params, kernel=self.kernel))
        rent_by_year = {year: params.transition_rent for year in YEARS}
        for row in rows:
            rent_by_year[row.year] = row.rent
        return rent_by_year

    def _compute_capex(self, projection: ProjectionInput) -> List[CapexItem]:
        if not projection.capex_rules:
            return list(projection.capex_items)
        generated = self._step(
            "capex_rules",
            calculate_capex_from_rules(projection.capex_rules, projection.admin_settings.cpi_rate, kernel=self.kernel),
        )
        return list(projection.capex_items) + generated

    def _compute_opex(self, projection: ProjectionInput, revenue_by_year: Mapping[int, Decimal]) -> Dict[int, Decimal]:
        rows = self._step(
            "opex", calculate_opex(revenue_by_year, projection.opex_sub_accounts, kernel=self.kernel)
        )
        return {row.year: row.total_opex for row in rows}

    def _assemble_years(
        self,
        ebitda_rows: List[EbitdaYear],
        cash_flow_rows: List[CashFlowYear],
        revenue: RevenueState,
    ) -> List[YearlyProjection]:
        kernel = self.kernel
        cash_flow_by_year = {row.year: row for row in cash_flow_rows}
        years: List[YearlyProjection] = []
        for row in ebitda_rows:
            cash_flow = cash_flow_by_year[row.year]
            years.append(
                YearlyProjection(
                    year=row.year,
                    revenue=row.revenue,
                    staff_cost=row.staff_cost,
                    rent=row.rent,
                    opex=row.opex,
                    ebitda=row.ebitda,
                    ebitda_margin=row.ebitda_margin,
                    capex=cash_flow.capex,
                    interest=cash_flow.interest,
                    taxes=cash_flow.taxes,
                    cash_flow=cash_flow.cash_flow,
                    rent_load=kernel.multiply(kernel.divide(row.rent, row.revenue), HUNDRED),
                    tuition_by_curriculum=dict(revenue.tuition_by_year.get(row.year, {})),
                    students_by_curriculum=dict(revenue.students_by_year.get(row.year, {})),
                )
            )
        return years

    def _summarize(
        self, years: List[YearlyProjection], rent_by_year: Mapping[int, Decimal], projection: ProjectionInput
    ) -> ProjectionSummary:
        kernel = self.kernel
        discount_rate = projection.admin_settings.discount_rate
        npv_window = [row for row in years if NPV_START_YEAR <= row.year <= NPV_END_YEAR]

        npv_rent = self._step(
            "npv_rent",
            calculate_npv(rent_by_year, discount_rate, NPV_START_YEAR, NPV_END_YEAR, NPV_BASE_YEAR, kernel=kernel),
        )
        npv_cash_flow = self._step(
            "npv_cash_flow",
            calculate_npv(
                {row.year: row.cash_flow for row in years},
                discount_rate,
                NPV_START_YEAR,
                NPV_END_YEAR,
                NPV_BASE_YEAR,
                kernel=kernel,
            ),
        )

        def total(attribute: str) -> Decimal:
            return kernel.sum(getattr(row, attribute) for row in years)

        return ProjectionSummary(
            total_revenue=total("revenue"),
            total_staff_cost=total("staff_cost"),
            total_rent=total("rent"),
            total_opex=total("opex"),
            total_ebitda=total("ebitda"),
            total_capex=total("capex"),
            total_interest=total("interest"),
            total_taxes=total("taxes"),
            total_cash_flow=total("cash_flow"),
            avg_ebitda_margin=kernel.divide(total("ebitda_margin"), len(years)),
            avg_rent_load=kernel.divide(kernel.sum(row.rent_load for row in npv_window), len(npv_window)),
            npv_rent=npv_rent.npv,
            npv_cash_flow=npv_cash_flow.npv,
        )

    def compare(self, projections: Mapping[str, ProjectionInput]) -> Dict[str, Result[ProjectionResult]]:
        return {name: self.run(projection) for name, projection in projections.items()}
