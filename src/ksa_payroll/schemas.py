"""Data-entry models: validate JSON-shaped input and build the calculation inputs."""
from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import (
    AttendanceRecord,
    BenefitEnrollment,
    Employee,
    EOSBCalculationInput,
    LeaveRecord,
    LoanRecord,
    MonthlyPayrollRequest,
    RecurringDeduction,
    TerminationType,
)

Money = Annotated[float, Field(ge=0)]
Month = Annotated[str, Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")]


class EmployeeIn(BaseModel):
    id: str
    name: str = ""
    hire_date: date | None = None
    basic_salary: Money = 0
    housing_allowance: Money = 0
    transport_allowance: Money = 0
    other_allowances: Money = 0
    nationality: str = ""
    is_saudi: bool | None = None
    gosi_applicable: bool = True
    gosi_salary_basis: Money | None = None
    status: str = "active"
    bank_account: str | None = None

    def to_domain(self) -> Employee:
        return Employee(**self.model_dump())


class EOSBRequest(BaseModel):
    termination_type: TerminationType
    termination_date: date
    last_basic_salary: Money
    include_housing_allowance: bool = False
    deductions: Money = 0

    def to_domain(self) -> EOSBCalculationInput:
        return EOSBCalculationInput(**self.model_dump())


class AttendanceIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee_id: str
    day: date = Field(alias="date")
    status: str
    overtime_hours: Money = 0
    late_minutes: Money = 0

    def to_domain(self) -> AttendanceRecord:
        return AttendanceRecord(**self.model_dump())


class LeaveIn(BaseModel):
    employee_id: str
    leave_type: str
    start_date: date
    end_date: date
    status: str = "approved"

    @model_validator(mode="after")
    def check_range(self) -> "LeaveIn":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        return self

    def to_domain(self) -> LeaveRecord:
        return LeaveRecord(**self.model_dump())


class LoanIn(BaseModel):
    employee_id: str
    monthly_deduction: Money
    status: str = "approved"

    def to_domain(self) -> LoanRecord:
        return LoanRecord(**self.model_dump())


class DeductionIn(BaseModel):
    employee_id: str
    deduction_type: str
    amount: Money
    is_active: bool = True
    start_month: Month | None = None
    end_month: Month | None = None

    def to_domain(self) -> RecurringDeduction:
        return RecurringDeduction(**self.model_dump())


class BenefitIn(BaseModel):
    employee_id: str
    employee_contribution: Money
    status: str = "active"

    def to_domain(self) -> BenefitEnrollment:
        return BenefitEnrollment(**self.model_dump())


class PayrollRunInput(BaseModel):
    month: Month
    employees: list[EmployeeIn]
    attendance: list[AttendanceIn] = []
    leaves: list[LeaveIn] = []
    loans: list[LoanIn] = []
    deductions: list[DeductionIn] = []
    benefits: list[BenefitIn] = []
    bonuses: dict[str, Money] = {}
    commissions: dict[str, Money] = {}
    working_days: Annotated[int, Field(gt=0)] = 30

    @field_validator("employees")
    @classmethod
    def unique_employees(cls, value: list[EmployeeIn]) -> list[EmployeeIn]:
        ids = [employee.id for employee in value]
        if len(ids) != len(set(ids)):
            raise ValueError("employee ids must be unique")
        return value

    def requests(self) -> list[MonthlyPayrollRequest]:
        def owned(items, employee_id):
            return [item.to_domain() for item in items if item.employee_id == employee_id]

        return [
            MonthlyPayrollRequest(
                employee=employee.to_domain(),
                month=self.month,
                attendance=owned(self.attendance, employee.id),
                leaves=owned(self.leaves, employee.id),
                loans=owned(self.loans, employee.id),
                deductions=owned(self.deductions, employee.id),
                benefits=owned(self.benefits, employee.id),
                bonus=self.bonuses.get(employee.id, 0.0),
                commission=self.commissions.get(employee.id, 0.0),
                working_days=self.working_days,
            )
            for employee in self.employees
        ]
