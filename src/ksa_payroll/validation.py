from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .models import PayrollRecord
from .rate_tables import RateTable, default_rate_table


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_payroll(record: PayrollRecord, rate_table: Optional[RateTable] = None) -> ValidationReport:
    """Check a calculated payroll record before it is approved."""
    table = rate_table or default_rate_table()
    max_overtime = table.validation_threshold("max_overtime_hours", 60)
    max_absent = table.validation_threshold("max_absent_days", 10)

    report = ValidationReport()
    if record.net_salary < 0:
        report.errors.append("Net salary cannot be negative")
    if record.overtime_hours > max_overtime:
        report.warnings.append(f"Unusual overtime hours detected (>{max_overtime:g} hours)")
    if record.absent_days > max_absent:
        report.warnings.append(f"High absence rate detected (>{max_absent:g} days)")
    return report
