from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from ..core.config import NPV_END_YEAR, NPV_START_YEAR
from ..core.decimals import HUNDRED, DecimalKernel, resolve_kernel
from ..core.result import ErrorCode, Result, guarded
from ..models.insights import Insight, InsightType
from ..models.results import YearlyProjection

OPTIMAL_RENT_LOAD = (Decimal(20), Decimal(30))
CRITICAL_RENT_LOAD = Decimal(40)
STAFF_SHARE_WARNING = Decimal(50)
OPEX_SHARE_WARNING = Decimal(40)
RENT_LOAD_TREND_WARNING = Decimal(5)
MIN_YEARS_FOR_TREND = 5


def _average(values: Sequence[Decimal], kernel: DecimalKernel) -> Decimal:
    return kernel.divide(kernel.sum(values), len(values))


def _rent_load_insight(avg_rent_load: Decimal, kernel: DecimalKernel) -> Insight:
    low, high = OPTIMAL_RENT_LOAD
    shown = f"{kernel.round(avg_rent_load, 1)}%"
    if avg_rent_load > CRITICAL_RENT_LOAD:
        return Insight(
            type=InsightType.CRITICAL,
            title="High Rent Load",
            message=f"Rent load is {shown}, exceeding optimal range (20-30%)",
            recommendation="Consider renegotiating rent terms, increasing revenue, or exploring alternative rent models",
        )
    if avg_rent_load > high:
        return Insight(
            type=InsightType.WARNING,
            title="Elevated Rent Load",
            message=f"Rent load is {shown}, above optimal range (20-30%)",
            recommendation="Monitor rent load trends and consider revenue optimization strategies",
        )
    if avg_rent_load >= low:
        return Insight(
            type=InsightType.OPTIMAL,
            title="Optimal Rent Load",
            message=f"Rent load is {shown}, within optimal range (20-30%)",
            recommendation="Maintain current rent model and revenue strategy",
        )
    return Insight(
        type=InsightType.OPTIMAL,
        title="Low Rent Load",
        message=f"Rent load is {shown}, below optimal range (20-30%)",
        recommendation="Rent load is manageable. Consider opportunities for growth or investment",
    )


@guarded("calculate cost insights")
def calculate_cost_insights(
    years: Sequence[YearlyProjection], kernel: Optional[DecimalKernel] = None
) -> Result[List[Insight]]:
    kernel = resolve_kernel(kernel)
    if not years:
        return Result.failure("Invalid projection data", ErrorCode.MISSING_DATA, field="years")
    window = [row for row in years if NPV_START_YEAR <= row.year <= NPV_END_YEAR]
    if not window:
        return Result.failure(
            f"No data in NPV period ({NPV_START_YEAR}-{NPV_END_YEAR})", ErrorCode.NO_DATA_IN_RANGE, field="years"
        )

    rent_loads = [row.rent_load for row in window]
    insights = [_rent_load_insight(_average(rent_loads, kernel), kernel)]

    total_staff = kernel.sum(row.staff_cost for row in window)
    total_opex = kernel.sum(row.opex for row in window)
    total_costs = kernel.sum([total_staff, total_opex, kernel.sum(row.rent for row in window)])
    if total_costs.is_zero():
        return Result.success(insights)

    staff_share = kernel.multiply(kernel.divide(total_staff, total_costs), HUNDRED)
    if staff_share > STAFF_SHARE_WARNING:
        insights.append(
            Insight(
                type=InsightType.WARNING,
                title="High Staff Costs",
                message=f"Staff costs represent {kernel.round(staff_share, 1)}% of total costs",
                recommendation="Review staffing ratios, salary structures, and consider efficiency improvements",
            )
        )

    opex_share = kernel.multiply(kernel.divide(total_opex, total_costs), HUNDRED)
    if opex_share > OPEX_SHARE_WARNING:
        insights.append(
            Insight(
                type=InsightType.WARNING,
                title="High Operating Expenses",
                message=f"Operating expenses represent {kernel.round(opex_share, 1)}% of total costs",
                recommendation="Review opex sub-accounts and identify optimization opportunities",
            )
        )

    if len(window) >= MIN_YEARS_FOR_TREND:
        middle = len(window) // 2
        trend = kernel.subtract(_average(rent_loads[middle:], kernel), _average(rent_loads[:middle], kernel))
        if trend > RENT_LOAD_TREND_WARNING:
            insights.append(
                Insight(
                    type=InsightType.WARNING,
                    title="Increasing Rent Load Trend",
                    message=f"Rent load is increasing by {kernel.round(trend, 1)}% over the projection period",
                    recommendation="Monitor rent escalation rates and consider revenue growth strategies",
                )
            )
    return Result.success(insights)
