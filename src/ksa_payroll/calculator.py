from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .attendance import AttendanceSummary, absence_deduction, late_deduction, summarize_attendance
from .gosi import GOSICalculator
from .logging import get_logger
from .models import (
    ExplanationLine,
    MonthlyPayrollRequest,
    PayrollDeductions,
    PayrollEarnings,
    PayrollRecord,
    PayrollStatus,
)
from .overtime import OvertimeCalculator
from .rate_tables import RateTable, RateTableRepository

logger = get_logger(__name__)

ACTIVE_LOAN_STATUSES = {"approved", "disbursed"}


def _round_lines(lines: dict) -> dict:
    return {name: round(value or 0.0, 2) for name, value in lines.items()}


def payroll_totals(earnings: PayrollEarnings, deductions: PayrollDeductions) -> Tuple[float, float, float]:
    """Return (gross, total deductions, net) on 2-decimal figures so net == gross - deductions."""
    gross = round(sum(_round_lines(earnings.lines()).values()), 2)
    total_deductions = round(sum(_round_lines(deductions.lines()).values()), 2)
    return gross, total_deductions, round(gross - total_deductions, 2)


def aggregate_payroll(
    employee_id: str,
    month: str,
    earnings: PayrollEarnings,
    deductions: PayrollDeductions,
    status: PayrollStatus = PayrollStatus.CALCULATED,
    **details,
) -> PayrollRecord:
    gross, total_deductions, net = payroll_totals(earnings, deductions)
    return PayrollRecord(
        employee_id=employee_id,
        month=month,
        earnings=PayrollEarnings(**_round_lines(earnings.lines())),
        deductions=PayrollDeductions(**_round_lines(deductions.lines())),
        gross_salary=gross,
        total_deductions=total_deductions,
        net_salary=net,
        status=status,
        **details,
    )


@dataclass
class PayrollContext:
    rate_table: RateTable
    working_days: int = 30


class PayrollCalculator:
    def __init__(self, rate_table_repo: Optional[RateTableRepository] = None, table_version: str = "2024_v1"):
        self.rate_table_repo = rate_table_repo or RateTableRepository()
        self.table_version = table_version
        self.rate_table = self.rate_table_repo.load(table_version)
        self.gosi = GOSICalculator(self.rate_table)
        self.overtime = OvertimeCalculator(self.rate_table)

    @staticmethod
    def _explain(lines: dict, prefix: str, explanations: List[ExplanationLine]) -> None:
        for name, amount in lines.items():
            if not amount:
                continue
            explanations.append(
                ExplanationLine(
                    code=f"{prefix}:{name}",
                    label=name.replace("_", " ").capitalize(),
                    amount=round(amount, 2),
                )
            )

    def _loan_and_other_deductions(self, request: MonthlyPayrollRequest) -> Tuple[float, float, float]:
        employee_id = request.employee.id
        loan = sum(
            loan.monthly_deduction or 0.0
            for loan in request.loans
            if loan.employee_id == employee_id and loan.status in ACTIVE_LOAN_STATUSES
        )
        advance = 0.0
        other = 0.0
        for deduction in request.deductions:
            if deduction.employee_id != employee_id or not deduction.applies_to(request.month):
                continue
            if deduction.deduction_type == "loan_repayment":
                loan += deduction.amount
            elif deduction.deduction_type == "advance_salary":
                advance += deduction.amount
            elif deduction.deduction_type != "gosi_employee":
                other += deduction.amount
        other += sum(
            b.employee_contribution or 0.0
            for b in request.benefits
            if b.employee_id == employee_id and b.status == "active"
        )
        return loan, advance, other

    def calculate_monthly(self, request: MonthlyPayrollRequest) -> PayrollRecord:
        employee = request.employee
        ctx = PayrollContext(rate_table=self.rate_table, working_days=request.working_days)
        summary: AttendanceSummary = summarize_attendance(employee.id, request.month, request.attendance, request.leaves)
        explanations: List[ExplanationLine] = []

        overtime = self.overtime.calculate(
            employee.basic_salary,
            summary.overtime_hours,
            working_days_in_month=ctx.working_days,
            employee_id=employee.id,
        )
        earnings = PayrollEarnings(
            basic_salary=employee.basic_salary,
            housing_allowance=employee.housing_allowance,
            transport_allowance=employee.transport_allowance,
            other_allowances=employee.other_allowances,
            overtime_pay=overtime.overtime_pay,
            bonus=request.bonus,
            commission=request.commission,
        )
        self._explain(earnings.lines(), "earning", explanations)

        gosi = self.gosi.calculate_for_employee(employee)
        loan, advance, other = self._loan_and_other_deductions(request)
        deductions = PayrollDeductions(
            gosi_employee=gosi.employee_contribution,
            loan_deduction=loan,
            advance_deduction=advance,
            absence_deduction=absence_deduction(employee.basic_salary, ctx.working_days, summary),
            late_deduction=late_deduction(employee.basic_salary, ctx.working_days, summary.late_minutes, ctx.rate_table),
            other_deductions=other,
        )
        self._explain(deductions.lines(), "deduction", explanations)

        record = aggregate_payroll(
            employee.id,
            request.month,
            earnings,
            deductions,
            gosi_employer=gosi.employer_contribution,
            gosi_calculation_base=gosi.calculation_base,
            working_days=ctx.working_days,
            present_days=summary.present_days,
            absent_days=summary.absent_days,
            unpaid_leave_days=summary.unpaid_leave_days,
            overtime_hours=summary.overtime_hours,
            late_minutes=summary.late_minutes,
            payment_method="bank_transfer" if employee.bank_account else "cash",
            explanations=tuple(explanations),
        )
        logger.info(
            "payroll_calculated",
            employee_id=employee.id,
            month=request.month,
            gross=record.gross_salary,
            net=record.net_salary,
        )
        return record
