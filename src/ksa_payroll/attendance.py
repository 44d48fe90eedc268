from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

from .errors import CalculationValidationError
from .models import AttendanceRecord, LeaveRecord
from .rate_tables import RateTable

PRESENT_STATUSES = {"present", "late"}
ABSENT_STATUS = "absent"
UNPAID_LEAVE = "unpaid"


@dataclass(frozen=True)
class AttendanceSummary:
    present_days: int = 0
    absent_days: int = 0
    late_minutes: float = 0.0
    overtime_hours: float = 0.0
    unpaid_leave_days: int = 0


def month_bounds(month: str) -> Tuple[date, date]:
    try:
        year_text, month_text = month.split("-")
        year, month_num = int(year_text), int(month_text)
        last_day = calendar.monthrange(year, month_num)[1]
    except (AttributeError, ValueError) as exc:
        raise CalculationValidationError(f"Month must use the YYYY-MM format, got {month!r}", field="month") from exc
    return date(year, month_num, 1), date(year, month_num, last_day)


def unpaid_leave_days(leaves: Iterable[LeaveRecord], month: str, employee_id: Optional[str] = None) -> int:
    """Inclusive overlap of approved unpaid leaves with the calendar month."""
    month_start, month_end = month_bounds(month)
    total = 0
    for leave in leaves:
        if employee_id and leave.employee_id != employee_id:
            continue
        if leave.leave_type != UNPAID_LEAVE or leave.status != "approved":
            continue
        overlap_start = max(leave.start_date, month_start)
        overlap_end = min(leave.end_date, month_end)
        if overlap_start <= overlap_end:
            total += (overlap_end - overlap_start).days + 1
    return total


def summarize_attendance(
    employee_id: str,
    month: str,
    attendance: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRecord] = (),
) -> AttendanceSummary:
    month_start, month_end = month_bounds(month)
    present = absent = 0
    late_minutes = overtime_hours = 0.0
    for record in attendance:
        if record.employee_id != employee_id or not (month_start <= record.day <= month_end):
            continue
        if record.status in PRESENT_STATUSES:
            present += 1
        elif record.status == ABSENT_STATUS:
            absent += 1
        late_minutes += record.late_minutes or 0.0
        overtime_hours += record.overtime_hours or 0.0

    return AttendanceSummary(
        present_days=present,
        absent_days=absent,
        late_minutes=late_minutes,
        overtime_hours=overtime_hours,
        unpaid_leave_days=unpaid_leave_days(leaves, month, employee_id),
    )


def daily_rate(basic_salary: float, working_days: int) -> float:
    if working_days <= 0:
        raise CalculationValidationError("Working days must be positive", field="working_days")
    return (basic_salary or 0.0) / working_days


def absence_deduction(basic_salary: float, working_days: int, summary: AttendanceSummary) -> float:
    return daily_rate(basic_salary, working_days) * (summary.absent_days + summary.unpaid_leave_days)


def late_deduction(basic_salary: float, working_days: int, late_minutes: float, rate_table: RateTable) -> float:
    minutes_per_day = rate_table.attendance_setting("minutes_per_day", 480)
    penalty = rate_table.attendance_setting("late_penalty_factor", 0.5)
    return late_minutes * (daily_rate(basic_salary, working_days) / minutes_per_day) * penalty
