from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import CalculationValidationError

# date.weekday(): Friday and Saturday form the Saudi weekend
WEEKEND_DAYS = {4, 5}
AVERAGE_DAYS_PER_MONTH = 30.44


@dataclass(frozen=True)
class Holiday:
    day: date
    name: str = ""


@dataclass(frozen=True)
class LeaveDay:
    day: date
    day_type: str  # working, weekend or holiday
    holiday_name: Optional[str] = None


@dataclass(frozen=True)
class LeaveDaysBreakdown:
    start_date: date
    end_date: date
    days: Tuple[LeaveDay, ...]

    def _count(self, day_type: str) -> int:
        return sum(1 for d in self.days if d.day_type == day_type)

    @property
    def total_days(self) -> int:
        return len(self.days)

    @property
    def working_days(self) -> int:
        return self._count("working")

    @property
    def weekend_days(self) -> int:
        return self._count("weekend")

    @property
    def holiday_days(self) -> int:
        return self._count("holiday")

    @property
    def leave_days_to_deduct(self) -> int:
        return self.working_days

    def to_record(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
            "working_days": self.working_days,
            "weekend_days": self.weekend_days,
            "holiday_days": self.holiday_days,
            "leave_days_to_deduct": self.leave_days_to_deduct,
            "detailed_breakdown": [
                {
                    "date": d.day.isoformat(),
                    "day_of_week": calendar.day_name[d.day.weekday()],
                    "type": d.day_type,
                    "holiday_name": d.holiday_name,
                }
                for d in self.days
            ],
        }


def count_leave_days(start_date: date, end_date: date, holidays: Iterable[Holiday] = ()) -> LeaveDaysBreakdown:
    """Classify each day of an inclusive leave range; holidays win over weekends."""
    if end_date < start_date:
        raise CalculationValidationError("end_date must be after start_date", field="end_date")

    holiday_names: Dict[date, str] = {h.day: h.name for h in holidays}
    days: List[LeaveDay] = []
    current = start_date
    while current <= end_date:
        if current in holiday_names:
            days.append(LeaveDay(current, "holiday", holiday_names[current]))
        elif current.weekday() in WEEKEND_DAYS:
            days.append(LeaveDay(current, "weekend"))
        else:
            days.append(LeaveDay(current, "working"))
        current += timedelta(days=1)
    return LeaveDaysBreakdown(start_date=start_date, end_date=end_date, days=tuple(days))


@dataclass
class AccrualPolicy:
    leave_type: str
    monthly_accrual_rate: float
    probation_period_months: int = 0
    accrue_during_probation: bool = False
    prorate_for_new_hires: bool = True
    employment_types: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AccrualResult:
    leave_type: str
    status: str  # accrued, skipped or not_applicable
    days: float = 0.0
    is_prorated: bool = False
    proration_factor: float = 1.0
    reason: Optional[str] = None


def employment_months(hire_date: date, on_date: date) -> int:
    return math.floor((on_date - hire_date).days / AVERAGE_DAYS_PER_MONTH)


def monthly_accrual(
    policy: AccrualPolicy,
    hire_date: date,
    processing_date: date,
    employment_type: Optional[str] = None,
) -> AccrualResult:
    if policy.employment_types and employment_type not in policy.employment_types:
        return AccrualResult(policy.leave_type, "not_applicable", reason="Employment type not covered by policy")

    months = employment_months(hire_date, processing_date)
    if months < policy.probation_period_months and not policy.accrue_during_probation:
        return AccrualResult(policy.leave_type, "skipped", reason="Employee in probation period")

    days = policy.monthly_accrual_rate
    if policy.prorate_for_new_hires and months == 0:
        days_in_month = calendar.monthrange(processing_date.year, processing_date.month)[1]
        factor = (days_in_month - hire_date.day + 1) / days_in_month
        return AccrualResult(
            policy.leave_type,
            "accrued",
            days=round(days * factor, 2),
            is_prorated=True,
            proration_factor=factor,
        )
    return AccrualResult(policy.leave_type, "accrued", days=days)
