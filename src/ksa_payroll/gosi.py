"""GOSI social insurance contributions.

Saudi nationals: 10% employee, 12% employer (9% annuities, 2% occupational
hazards, 1% SANED). Non-Saudi: employer pays the 2% occupational hazards only.
The base is basic + housing, capped at the rate table's salary cap.
"""
from __future__ import annotations

from typing import Dict, Optional

from .logging import get_logger
from .models import Employee, GOSIResult, is_saudi_nationality
from .rate_tables import RateTable, default_rate_table

logger = get_logger(__name__)


class GOSICalculator:
    def __init__(self, rate_table: Optional[RateTable] = None):
        self.rate_table = rate_table or default_rate_table()

    def is_saudi(self, nationality: Optional[str]) -> bool:
        return is_saudi_nationality(nationality, tuple(self.rate_table.saudi_nationalities))

    def contribution_base(
        self,
        basic_salary: Optional[float],
        housing_allowance: Optional[float],
        gosi_applicable: bool = True,
        salary_basis: Optional[float] = None,
    ) -> float:
        if not gosi_applicable:
            return 0.0
        if salary_basis and salary_basis > 0:
            base = salary_basis
        else:
            base = (basic_salary or 0.0) + (housing_allowance or 0.0)
        return round(min(max(base, 0.0), self.rate_table.gosi_salary_cap), 2)

    def calculate(
        self,
        basic_salary: Optional[float],
        housing_allowance: Optional[float],
        is_saudi: bool,
        gosi_applicable: bool = True,
        salary_basis: Optional[float] = None,
    ) -> GOSIResult:
        base = self.contribution_base(basic_salary, housing_allowance, gosi_applicable, salary_basis)
        rates = self.rate_table.contribution_rates(is_saudi)

        breakdown: Dict[str, float] = {}
        for name, rate in rates.employee.items():
            breakdown[f"{name}_employee"] = round(base * rate, 2)
        for name, rate in rates.employer.items():
            breakdown[f"{name}_employer"] = round(base * rate, 2)

        return GOSIResult(
            calculation_base=base,
            employee_contribution=round(base * rates.employee_rate, 2),
            employer_contribution=round(base * rates.employer_rate, 2),
            is_saudi=is_saudi,
            breakdown=breakdown,
        )

    def calculate_for_employee(self, employee: Employee) -> GOSIResult:
        result = self.calculate(
            employee.basic_salary,
            employee.housing_allowance,
            bool(employee.is_saudi),
            gosi_applicable=employee.gosi_applicable,
            salary_basis=employee.gosi_salary_basis,
        )
        logger.debug(
            "gosi_calculated",
            employee_id=employee.id,
            base=result.calculation_base,
            is_saudi=result.is_saudi,
        )
        return result
