from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CurriculumType(str, Enum):
    FR = "FR"
    IB = "IB"


PRIMARY_CURRICULUM = CurriculumType.FR


class StudentsProjection(BaseModel):
    year: int
    students: int


class CurriculumPlan(BaseModel):
    curriculum_type: CurriculumType
    capacity: int = 0
    tuition_base: Decimal = Field(..., description="Tuition per student in the projection's first year")
    cpi_frequency: int = Field(1, description="Years between CPI escalations (1, 2 or 3)")
    students_projection: List[StudentsProjection] = Field(default_factory=list)
    teacher_ratio: Optional[Decimal] = Field(None, description="Teachers per student, e.g. 0.0714 for 1 per 14")
    non_teacher_ratio: Optional[Decimal] = None
    teacher_monthly_salary: Optional[Decimal] = None
    non_teacher_monthly_salary: Optional[Decimal] = None

    def students_by_year(self) -> Dict[int, int]:
        return {entry.year: entry.students for entry in self.students_projection}
