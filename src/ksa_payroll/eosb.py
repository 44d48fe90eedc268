"""End of Service Benefit calculation under the Saudi labor law.

Service duration uses 365-day years and 30-day months, not calendar arithmetic.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from .errors import CalculationValidationError
from .logging import get_logger
from .models import EOSBCalculationInput, EOSBResult, Employee, ExplanationLine, TerminationType

logger = get_logger(__name__)

FIRST_BAND_YEARS = 5
SECOND_BAND_YEARS = 10
RESIGNATION_MIN_YEARS = 2


@dataclass(frozen=True)
class ServiceDuration:
    total_days: int
    years: int
    months: int
    days: int


def service_duration(hire_date: date, termination_date: date) -> ServiceDuration:
    total_days = (termination_date - hire_date).days
    years = total_days // 365
    remaining_days = total_days % 365
    return ServiceDuration(
        total_days=total_days,
        years=years,
        months=remaining_days // 30,
        days=remaining_days % 30,
    )


@dataclass
class _Bands:
    years_0_to_5: int = 0
    years_5_to_10: int = 0
    years_above_10: int = 0
    amount_0_to_5: float = 0.0
    amount_5_to_10: float = 0.0
    amount_above_10: float = 0.0

    @property
    def total(self) -> float:
        return self.amount_0_to_5 + self.amount_5_to_10 + self.amount_above_10


class EOSBCalculator:
    def calculate(
        self,
        hire_date: Optional[date],
        request: EOSBCalculationInput,
        housing_allowance: float = 0.0,
        employee_id: Optional[str] = None,
        calculation_date: Optional[date] = None,
    ) -> EOSBResult:
        self._validate(hire_date, request)
        duration = service_duration(hire_date, request.termination_date)
        housing = (housing_allowance or 0.0) if request.include_housing_allowance else 0.0
        base = request.last_basic_salary + housing
        resignation = request.termination_type == TerminationType.RESIGNATION

        if resignation:
            bands = self._resignation_bands(duration.years, base)
        else:
            bands = self._full_bands(duration.years, base)

        details = self._explain(bands, base, resignation)
        proportional = self._proportional_amount(duration, base, resignation)
        if proportional:
            details.append(
                ExplanationLine(
                    code="eosb_proportional",
                    label=f"Partial year: {duration.months}m {duration.days}d",
                    amount=proportional,
                    details={"months": duration.months, "days": duration.days},
                )
            )
        if resignation and duration.years < RESIGNATION_MIN_YEARS:
            details.append(
                ExplanationLine(
                    code="eosb_not_entitled",
                    label="No EOSB: service less than 2 years (resignation)",
                    amount=0.0,
                )
            )

        total = bands.total + proportional
        result = EOSBResult(
            employee_id=employee_id,
            termination_type=request.termination_type,
            hire_date=hire_date,
            termination_date=request.termination_date,
            years_of_service=duration.years,
            months_of_service=duration.months,
            days_of_service=duration.days,
            last_basic_salary=request.last_basic_salary,
            include_housing_allowance=request.include_housing_allowance,
            calculation_base=base,
            years_0_to_5=bands.years_0_to_5,
            years_5_to_10=bands.years_5_to_10,
            years_above_10=bands.years_above_10,
            eosb_amount_0_to_5=bands.amount_0_to_5,
            eosb_amount_5_to_10=bands.amount_5_to_10,
            eosb_amount_above_10=bands.amount_above_10,
            proportional_amount=proportional,
            total_eosb_amount=total,
            deductions=request.deductions,
            net_eosb_amount=total - request.deductions,
            calculation_date=calculation_date or date.today(),
            calculation_details=tuple(details),
        )
        logger.info(
            "eosb_calculated",
            employee_id=employee_id,
            termination_type=request.termination_type.value,
            years=duration.years,
            total=round(total, 2),
        )
        return result

    def calculate_for_employee(
        self, employee: Employee, request: EOSBCalculationInput, calculation_date: Optional[date] = None
    ) -> EOSBResult:
        return self.calculate(
            employee.hire_date,
            request,
            housing_allowance=employee.housing_allowance,
            employee_id=employee.id,
            calculation_date=calculation_date,
        )

    @staticmethod
    def _validate(hire_date: Optional[date], request: EOSBCalculationInput) -> None:
        if hire_date is None:
            raise CalculationValidationError("Hire date is required", field="hire_date")
        if request.termination_date is None:
            raise CalculationValidationError("Termination date is required", field="termination_date")
        if request.termination_date < hire_date:
            raise CalculationValidationError(
                "Termination date cannot be before hire date", field="termination_date"
            )
        if request.last_basic_salary < 0:
            raise CalculationValidationError("Last basic salary cannot be negative", field="last_basic_salary")
        if request.deductions < 0:
            raise CalculationValidationError("Deductions cannot be negative", field="deductions")

    @staticmethod
    def _resignation_bands(years: int, base: float) -> _Bands:
        half = base / 2
        if years < RESIGNATION_MIN_YEARS:
            return _Bands()
        if years < FIRST_BAND_YEARS:
            return _Bands(years_0_to_5=years, amount_0_to_5=years * half)
        if years < SECOND_BAND_YEARS:
            return _Bands(
                years_0_to_5=FIRST_BAND_YEARS,
                years_5_to_10=years - FIRST_BAND_YEARS,
                amount_0_to_5=FIRST_BAND_YEARS * half,
                amount_5_to_10=(years - FIRST_BAND_YEARS) * base,
            )
        return _Bands(
            years_0_to_5=FIRST_BAND_YEARS,
            years_5_to_10=SECOND_BAND_YEARS - FIRST_BAND_YEARS,
            years_above_10=years - SECOND_BAND_YEARS,
            amount_0_to_5=FIRST_BAND_YEARS * half,
            amount_5_to_10=(SECOND_BAND_YEARS - FIRST_BAND_YEARS) * base,
            amount_above_10=(years - SECOND_BAND_YEARS) * base,
        )

    @staticmethod
    def _full_bands(years: int, base: float) -> _Bands:
        if years <= FIRST_BAND_YEARS:
            return _Bands(years_0_to_5=years, amount_0_to_5=years * base)
        if years <= SECOND_BAND_YEARS:
            return _Bands(
                years_0_to_5=FIRST_BAND_YEARS,
                years_5_to_10=years - FIRST_BAND_YEARS,
                amount_0_to_5=FIRST_BAND_YEARS * base,
                amount_5_to_10=(years - FIRST_BAND_YEARS) * base,
            )
        return _Bands(
            years_0_to_5=FIRST_BAND_YEARS,
            years_5_to_10=SECOND_BAND_YEARS - FIRST_BAND_YEARS,
            years_above_10=years - SECOND_BAND_YEARS,
            amount_0_to_5=FIRST_BAND_YEARS * base,
            amount_5_to_10=(SECOND_BAND_YEARS - FIRST_BAND_YEARS) * base,
            amount_above_10=(years - SECOND_BAND_YEARS) * base,
        )

    @staticmethod
    def _proportional_amount(duration: ServiceDuration, base: float, resignation: bool) -> float:
        # A resignation inside the no-entitlement window earns nothing, partial year included.
        if resignation and duration.years < RESIGNATION_MIN_YEARS:
            return 0.0
        divisor = 2 if resignation and duration.years < FIRST_BAND_YEARS else 1
        return (duration.months / 12 + duration.days / 365) * (base / divisor)

    @staticmethod
    def _explain(bands: _Bands, base: float, resignation: bool) -> List[ExplanationLine]:
        first_rate = f"({base:,.2f} / 2)" if resignation else f"{base:,.2f}"
        lines: List[ExplanationLine] = []
        if bands.years_0_to_5:
            lines.append(
                ExplanationLine(
                    code="eosb_0_to_5",
                    label=f"Years 0-5: {bands.years_0_to_5} × {first_rate}",
                    amount=bands.amount_0_to_5,
                    details={"years": bands.years_0_to_5},
                )
            )
        if bands.years_5_to_10:
            lines.append(
                ExplanationLine(
                    code="eosb_5_to_10",
                    label=f"Years 5-10: {bands.years_5_to_10} × {base:,.2f}",
                    amount=bands.amount_5_to_10,
                    details={"years": bands.years_5_to_10},
                )
            )
        if bands.years_above_10:
            lines.append(
                ExplanationLine(
                    code="eosb_above_10",
                    label=f"Years 10+: {bands.years_above_10} × {base:,.2f}",
                    amount=bands.amount_above_10,
                    details={"years": bands.years_above_10},
                )
            )
        return lines
