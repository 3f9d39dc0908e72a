from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from .core.config import PROJECTION_END_YEAR, PROJECTION_START_YEAR
from .models.admin import AdminSettings
from .models.capex import CapexItem
from .models.curriculum import CurriculumPlan, CurriculumType, StudentsProjection
from .models.opex import OpexSubAccount
from .models.projection import ProjectionInput
from .models.rent import RentModel, RentPlan
from .models.revenue import OtherRevenue

SAMPLE_RENT_PLANS: Dict[RentModel, RentPlan] = {
    RentModel.FIXED_ESCALATION: RentPlan(
        rent_model=RentModel.FIXED_ESCALATION,
        parameters={
            "base_rent": "10000000",
            "escalation_rate": "0.04",
            "frequency": 1,
            "start_year": 2028,
            "transition_rent": "8000000",
        },
    ),
    RentModel.REVENUE_SHARE: RentPlan(
        rent_model=RentModel.REVENUE_SHARE,
        parameters={"revenue_share_percent": "0.08"},
    ),
    RentModel.PARTNER_MODEL: RentPlan(
        rent_model=RentModel.PARTNER_MODEL,
        parameters={
            "land_size": "10000",
            "land_price_per_sqm": "5000",
            "bua_size": "8000",
            "construction_cost_per_sqm": "3000",
            "yield_base": "0.045",
            "growth_rate": "0.02",
            "frequency": 3,
            "start_year": 2028,
            "transition_rent": "2500000",
        },
    ),
}


def _ramp(first_year: int, start: int, step: int, cap: int) -> List[StudentsProjection]:
    return [
        StudentsProjection(year=year, students=min(cap, start + step * (year - first_year)))
        for year in range(first_year, PROJECTION_END_YEAR + 1)
    ]


def build_sample_projection(rent_model: RentModel = RentModel.FIXED_ESCALATION) -> ProjectionInput:
    french = CurriculumPlan(
        curriculum_type=CurriculumType.FR,
        capacity=1850,
        tuition_base=Decimal("50000"),
        cpi_frequency=2,
        students_projection=_ramp(PROJECTION_START_YEAR, 1200, 60, 1850),
        teacher_ratio=Decimal("0.0714"),
        non_teacher_ratio=Decimal("0.0385"),
        teacher_monthly_salary=Decimal("20000"),
        non_teacher_monthly_salary=Decimal("12000"),
    )
    ib = CurriculumPlan(
        curriculum_type=CurriculumType.IB,
        capacity=500,
        tuition_base=Decimal("65000"),
        cpi_frequency=1,
        students_projection=_ramp(2028, 100, 50, 500),
        teacher_ratio=Decimal("0.0833"),
        non_teacher_ratio=Decimal("0.04"),
        teacher_monthly_salary=Decimal("24000"),
        non_teacher_monthly_salary=Decimal("13000"),
    )

    opex_sub_accounts = [
        OpexSubAccount(name="Marketing", is_fixed=False, percent_of_revenue=Decimal("3")),
        OpexSubAccount(name="Maintenance", is_fixed=False, percent_of_revenue=Decimal("2.5")),
        OpexSubAccount(name="Utilities", is_fixed=True, fixed_amount=Decimal("1200000")),
        OpexSubAccount(name="Insurance", is_fixed=True, fixed_amount=Decimal("350000")),
    ]

    capex_items = [
        CapexItem(year=2027, amount=Decimal("15000000"), category="Building fit-out"),
        CapexItem(year=2028, amount=Decimal("4000000"), category="IT equipment"),
        CapexItem(year=2028, amount=Decimal("2500000"), category="Furniture"),
        CapexItem(year=2035, amount=Decimal("5000000"), category="IT equipment"),
        CapexItem(year=2045, amount=Decimal("8000000"), category="Building refurbishment"),
    ]

    other_revenue = [
        OtherRevenue(year=year, amount=Decimal("1500000"))
        for year in range(PROJECTION_START_YEAR, PROJECTION_END_YEAR + 1)
    ]

    return ProjectionInput(
        curriculum_plans=[french, ib],
        rent_plan=SAMPLE_RENT_PLANS[rent_model],
        staff_cost_cpi_frequency=1,
        staff_cost_base_year=2028,
        opex_sub_accounts=opex_sub_accounts,
        capex_items=capex_items,
        other_revenue=other_revenue,
        interest_by_year={2028: Decimal("600000"), 2029: Decimal("450000"), 2030: Decimal("300000")},
        admin_settings=AdminSettings(
            cpi_rate=Decimal("0.03"),
            discount_rate=Decimal("0.08"),
            zakat_rate=Decimal("0.025"),
        ),
    )
