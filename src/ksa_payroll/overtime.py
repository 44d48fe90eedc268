from __future__ import annotations

from typing import Optional

from .errors import CalculationValidationError
from .logging import get_logger
from .models import OvertimeResult
from .rate_tables import RateTable, default_rate_table

logger = get_logger(__name__)


class OvertimeCalculator:
    """Overtime at 150% of the hourly rate derived from the monthly basic salary.

    Exceeding the monthly limit (60h by default, i.e. 720h a year) is flagged on
    the result and logged, never rejected.
    """

    def __init__(self, rate_table: Optional[RateTable] = None):
        self.rate_table = rate_table or default_rate_table()

    @property
    def monthly_limit(self) -> float:
        return self.rate_table.overtime_setting("monthly_limit_hours", 60)

    def working_days(self, working_days_in_month: Optional[int] = None) -> int:
        days = working_days_in_month
        if days is None:
            days = int(self.rate_table.overtime_setting("working_days_in_month", 30))
        if days <= 0:
            raise CalculationValidationError("Working days in month must be positive", field="working_days_in_month")
        return days

    def hourly_rate(self, basic_salary: float, working_days_in_month: Optional[int] = None) -> float:
        days = self.working_days(working_days_in_month)
        hours_per_day = self.rate_table.overtime_setting("hours_per_day", 8)
        return (basic_salary or 0.0) / (days * hours_per_day)

    def calculate(
        self,
        basic_salary: float,
        overtime_hours: float,
        working_days_in_month: Optional[int] = None,
        employee_id: Optional[str] = None,
    ) -> OvertimeResult:
        if overtime_hours is None or overtime_hours < 0:
            raise CalculationValidationError("Overtime hours cannot be negative", field="overtime_hours")
        if basic_salary is not None and basic_salary < 0:
            raise CalculationValidationError("Basic salary cannot be negative", field="basic_salary")

        working_days = self.working_days(working_days_in_month)
        hourly_rate = self.hourly_rate(basic_salary, working_days)
        overtime_rate = hourly_rate * self.rate_table.overtime_setting("multiplier", 1.5)
        exceeds = overtime_hours > self.monthly_limit
        if exceeds:
            logger.warning(
                "overtime_limit_exceeded",
                employee_id=employee_id,
                hours=overtime_hours,
                limit=self.monthly_limit,
            )

        return OvertimeResult(
            hourly_rate=hourly_rate,
            overtime_rate=overtime_rate,
            overtime_pay=overtime_hours * overtime_rate,
            total_hours=overtime_hours,
            working_days_in_month=working_days,
            exceeds_monthly_limit=exceeds,
        )
