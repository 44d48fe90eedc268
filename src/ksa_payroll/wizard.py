from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .calculator import PayrollCalculator
from .errors import PayrollError
from .logging import get_logger
from .models import MonthlyPayrollRequest, PayrollRecord
from .validation import ValidationReport, validate_payroll

logger = get_logger(__name__)


@dataclass
class RunFailure:
    employee_id: str
    employee_name: str
    error: str


@dataclass
class PayrollRunTotals:
    month: str
    employees: Dict[str, PayrollRecord] = field(default_factory=dict)
    validation: Dict[str, ValidationReport] = field(default_factory=dict)
    failures: List[RunFailure] = field(default_factory=list)
    total_gross: float = 0.0
    total_net: float = 0.0
    total_gosi_employee: float = 0.0
    total_gosi_employer: float = 0.0

    @property
    def processed_count(self) -> int:
        return len(self.employees)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    def summary(self) -> dict:
        return {
            "month": self.month,
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "total_gross": self.total_gross,
            "total_net": self.total_net,
            "total_gosi_employee": self.total_gosi_employee,
            "total_gosi_employer": self.total_gosi_employer,
            "errors": [failure.__dict__ for failure in self.failures],
            "warnings": {k: v.warnings for k, v in self.validation.items() if v.warnings},
        }


class PayrollRunWizard:
    def __init__(self, calculator: PayrollCalculator):
        self.calculator = calculator

    def preview(
        self,
        month: str,
        requests: Iterable[MonthlyPayrollRequest],
        employee_ids: Optional[List[str]] = None,
    ) -> PayrollRunTotals:
        totals = PayrollRunTotals(month=month)
        gross = net = gosi_employee = gosi_employer = 0.0

        for request in requests:
            employee = request.employee
            if employee.status != "active":
                continue
            if employee_ids and employee.id not in employee_ids:
                continue
            try:
                record = self.calculator.calculate_monthly(request)
            except PayrollError as exc:
                logger.warning("payroll_employee_failed", employee_id=employee.id, month=month, error=str(exc))
                totals.failures.append(RunFailure(employee.id, employee.name, str(exc)))
                continue

            totals.employees[employee.id] = record
            totals.validation[employee.id] = validate_payroll(record, self.calculator.rate_table)
            gross += record.gross_salary
            net += record.net_salary
            gosi_employee += record.deductions.gosi_employee
            gosi_employer += record.gosi_employer

        totals.total_gross = round(gross, 2)
        totals.total_net = round(net, 2)
        totals.total_gosi_employee = round(gosi_employee, 2)
        totals.total_gosi_employer = round(gosi_employer, 2)
        logger.info(
            "payroll_run_previewed",
            month=month,
            processed=totals.processed_count,
            failed=totals.error_count,
        )
        return totals
