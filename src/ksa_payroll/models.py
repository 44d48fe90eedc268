from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

SAUDI_NATIONALITIES = ("saudi", "saudi arabia", "ksa")


class TerminationType(str, Enum):
    RESIGNATION = "resignation"
    TERMINATION_WITH_CAUSE = "termination_with_cause"
    TERMINATION_WITHOUT_CAUSE = "termination_without_cause"
    CONTRACT_END = "contract_end"
    RETIREMENT = "retirement"
    DEATH = "death"


class EOSBStatus(str, Enum):
    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    CALCULATED = "calculated"
    APPROVED = "approved"
    PROCESSED = "processed"
    PAID = "paid"


def is_saudi_nationality(nationality: Optional[str], aliases: Tuple[str, ...] = SAUDI_NATIONALITIES) -> bool:
    if not nationality:
        return False
    return nationality.strip().lower() in aliases


def _money(value: float) -> float:
    return round(value, 2)


@dataclass
class Employee:
    id: str
    hire_date: Optional[date] = None
    basic_salary: float = 0.0
    housing_allowance: float = 0.0
    transport_allowance: float = 0.0
    other_allowances: float = 0.0
    nationality: str = ""
    is_saudi: Optional[bool] = None  # set at data entry; falls back to nationality text
    gosi_applicable: bool = True
    gosi_salary_basis: Optional[float] = None
    status: str = "active"
    bank_account: Optional[str] = None
    name: str = ""

    def __post_init__(self) -> None:
        if self.is_saudi is None:
            self.is_saudi = is_saudi_nationality(self.nationality)


@dataclass(frozen=True)
class ExplanationLine:
    code: str
    label: str
    amount: float
    details: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class EOSBCalculationInput:
    termination_type: TerminationType
    termination_date: date
    last_basic_salary: float
    include_housing_allowance: bool = False
    deductions: float = 0.0


@dataclass(frozen=True)
class EOSBResult:
    employee_id: Optional[str]
    termination_type: TerminationType
    hire_date: date
    termination_date: date
    years_of_service: int
    months_of_service: int
    days_of_service: int
    last_basic_salary: float
    include_housing_allowance: bool
    calculation_base: float
    years_0_to_5: int
    years_5_to_10: int
    years_above_10: int
    eosb_amount_0_to_5: float
    eosb_amount_5_to_10: float
    eosb_amount_above_10: float
    proportional_amount: float
    total_eosb_amount: float
    deductions: float
    net_eosb_amount: float
    calculation_date: date
    calculation_details: Tuple[ExplanationLine, ...] = ()
    status: EOSBStatus = EOSBStatus.CALCULATED

    @property
    def is_entitled(self) -> bool:
        return self.total_eosb_amount > 0

    def details_text(self) -> str:
        return "\n".join(f"{line.label} = {line.amount:,.2f} SAR" for line in self.calculation_details)

    def to_record(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "calculation_date": self.calculation_date.isoformat(),
            "termination_type": self.termination_type.value,
            "hire_date": self.hire_date.isoformat(),
            "termination_date": self.termination_date.isoformat(),
            "years_of_service": self.years_of_service,
            "months_of_service": self.months_of_service,
            "days_of_service": self.days_of_service,
            "last_basic_salary": _money(self.last_basic_salary),
            "include_housing_allowance": self.include_housing_allowance,
            "calculation_base": _money(self.calculation_base),
            "years_0_to_5": self.years_0_to_5,
            "years_5_to_10": self.years_5_to_10,
            "years_above_10": self.years_above_10,
            "eosb_amount_0_to_5": _money(self.eosb_amount_0_to_5),
            "eosb_amount_5_to_10": _money(self.eosb_amount_5_to_10),
            "eosb_amount_above_10": _money(self.eosb_amount_above_10),
            "proportional_amount": _money(self.proportional_amount),
            "total_eosb_amount": _money(self.total_eosb_amount),
            "deductions": _money(self.deductions),
            "net_eosb_amount": _money(self.net_eosb_amount),
            "calculation_details": self.details_text(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class GOSIResult:
    calculation_base: float
    employee_contribution: float
    employer_contribution: float
    is_saudi: bool
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def total_contribution(self) -> float:
        return _money(self.employee_contribution + self.employer_contribution)

    def to_record(self) -> dict:
        return {
            "calculation_base": self.calculation_base,
            "employee_contribution": self.employee_contribution,
            "employer_contribution": self.employer_contribution,
            "total_contribution": self.total_contribution,
            "is_saudi": self.is_saudi,
            "breakdown": dict(self.breakdown),
        }


@dataclass(frozen=True)
class OvertimeResult:
    hourly_rate: float
    overtime_rate: float
    overtime_pay: float
    total_hours: float
    working_days_in_month: int = 30
    exceeds_monthly_limit: bool = False

    def to_record(self) -> dict:
        return {
            "hourly_rate": _money(self.hourly_rate),
            "overtime_rate": _money(self.overtime_rate),
            "overtime_pay": _money(self.overtime_pay),
            "total_hours": self.total_hours,
            "working_days_in_month": self.working_days_in_month,
            "exceeds_monthly_limit": self.exceeds_monthly_limit,
        }


@dataclass
class AttendanceRecord:
    employee_id: str
    day: date
    status: str  # present, late, absent, ...
    overtime_hours: float = 0.0
    late_minutes: float = 0.0


@dataclass
class LeaveRecord:
    employee_id: str
    leave_type: str  # annual, sick, unpaid, ...
    start_date: date
    end_date: date
    status: str = "approved"


@dataclass
class LoanRecord:
    employee_id: str
    monthly_deduction: float
    status: str = "approved"


@dataclass
class RecurringDeduction:
    employee_id: str
    deduction_type: str  # loan_repayment, advance_salary, ...
    amount: float
    is_active: bool = True
    start_month: Optional[str] = None  # YYYY-MM
    end_month: Optional[str] = None

    def applies_to(self, month: str) -> bool:
        if not self.is_active:
            return False
        if self.start_month and self.start_month > month:
            return False
        if self.end_month and self.end_month < month:
            return False
        return True


@dataclass
class BenefitEnrollment:
    employee_id: str
    employee_contribution: float
    status: str = "active"


@dataclass
class MonthlyPayrollRequest:
    employee: Employee
    month: str  # YYYY-MM
    attendance: List[AttendanceRecord] = field(default_factory=list)
    leaves: List[LeaveRecord] = field(default_factory=list)
    loans: List[LoanRecord] = field(default_factory=list)
    deductions: List[RecurringDeduction] = field(default_factory=list)
    benefits: List[BenefitEnrollment] = field(default_factory=list)
    bonus: float = 0.0
    commission: float = 0.0
    working_days: int = 30


@dataclass(frozen=True)
class PayrollEarnings:
    basic_salary: float = 0.0
    housing_allowance: float = 0.0
    transport_allowance: float = 0.0
    other_allowances: float = 0.0
    overtime_pay: float = 0.0
    bonus: float = 0.0
    commission: float = 0.0

    def lines(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PayrollDeductions:
    gosi_employee: float = 0.0
    loan_deduction: float = 0.0
    advance_deduction: float = 0.0
    absence_deduction: float = 0.0
    late_deduction: float = 0.0
    other_deductions: float = 0.0

    def lines(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PayrollRecord:
    employee_id: str
    month: str
    earnings: PayrollEarnings
    deductions: PayrollDeductions
    gross_salary: float
    total_deductions: float
    net_salary: float
    gosi_employer: float = 0.0
    gosi_calculation_base: float = 0.0
    working_days: int = 30
    present_days: int = 0
    absent_days: int = 0
    unpaid_leave_days: int = 0
    overtime_hours: float = 0.0
    late_minutes: float = 0.0
    payment_method: str = "cash"
    status: PayrollStatus = PayrollStatus.CALCULATED
    explanations: Tuple[ExplanationLine, ...] = ()

    def to_record(self) -> dict:
        record = {"employee_id": self.employee_id, "month": self.month}
        record.update({k: _money(v) for k, v in self.earnings.lines().items()})
        record.update({k: _money(v) for k, v in self.deductions.lines().items()})
        record.update(
            {
                "gross_salary": self.gross_salary,
                "total_deductions": self.total_deductions,
                "net_salary": self.net_salary,
                "gosi_employer": self.gosi_employer,
                "gosi_calculation_base": self.gosi_calculation_base,
                "working_days": self.working_days,
                "present_days": self.present_days,
                "absent_days": self.absent_days,
                "unpaid_leave_days": self.unpaid_leave_days,
                "overtime_hours": self.overtime_hours,
                "late_minutes": self.late_minutes,
                "payment_method": self.payment_method,
                "status": self.status.value,
            }
        )
        return record
