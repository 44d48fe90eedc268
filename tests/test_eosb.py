from dataclasses import FrozenInstanceError
from datetime import date, timedelta

import pytest

from ksa_payroll.eosb import EOSBCalculator, service_duration
from ksa_payroll.errors import CalculationValidationError
from ksa_payroll.models import EOSBCalculationInput, Employee, TerminationType

HIRE = date(2010, 1, 1)


def after(days: int) -> date:
    return HIRE + timedelta(days=days)


def request(termination_type=TerminationType.RESIGNATION, days=0, salary=6000.0, **kwargs) -> EOSBCalculationInput:
    return EOSBCalculationInput(
        termination_type=termination_type,
        termination_date=after(days),
        last_basic_salary=salary,
        **kwargs,
    )


def test_service_duration_uses_365_and_30_day_units():
    duration = service_duration(HIRE, after(400))

    assert duration.total_days == 400
    assert duration.years == 1
    assert duration.months == 1
    assert duration.days == 5


@pytest.mark.parametrize("salary", [0, 3000, 25000, 90000])
@pytest.mark.parametrize("days", [0, 200, 364, 729])
def test_resignation_under_two_years_has_no_entitlement(salary, days):
    result = EOSBCalculator().calculate(HIRE, request(days=days, salary=salary))

    assert result.total_eosb_amount == 0
    assert result.proportional_amount == 0
    assert not result.is_entitled
    assert any(line.code == "eosb_not_entitled" for line in result.calculation_details)


@pytest.mark.parametrize(
    "termination_type",
    [
        TerminationType.TERMINATION_WITHOUT_CAUSE,
        TerminationType.TERMINATION_WITH_CAUSE,
        TerminationType.CONTRACT_END,
        TerminationType.RETIREMENT,
        TerminationType.DEATH,
    ],
)
def test_full_entitlement_is_continuous_at_band_boundaries(termination_type):
    calc = EOSBCalculator()

    at_five = calc.calculate(HIRE, request(termination_type, days=5 * 365, salary=8000))
    at_ten = calc.calculate(HIRE, request(termination_type, days=10 * 365, salary=8000))

    assert at_five.total_eosb_amount == 5 * 8000
    assert at_ten.total_eosb_amount == 10 * 8000
    assert at_ten.years_0_to_5 == 5
    assert at_ten.years_5_to_10 == 5


def test_resignation_seven_years_splits_half_and_full_month_bands():
    result = EOSBCalculator().calculate(HIRE, request(days=7 * 365, salary=6000))

    assert result.eosb_amount_0_to_5 == 15000
    assert result.eosb_amount_5_to_10 == 12000
    assert result.eosb_amount_above_10 == 0
    assert result.total_eosb_amount == 27000
    assert result.years_0_to_5 == 5
    assert result.years_5_to_10 == 2


def test_resignation_above_ten_years_uses_all_three_bands():
    result = EOSBCalculator().calculate(HIRE, request(days=12 * 365, salary=6000))

    assert result.eosb_amount_0_to_5 == 15000
    assert result.eosb_amount_5_to_10 == 30000
    assert result.eosb_amount_above_10 == 12000
    assert result.total_eosb_amount == 57000
    assert "Years 10+: 2" in result.details_text()


def test_partial_year_is_added_proportionally():
    days = 3 * 365 + 2 * 30 + 15
    calc = EOSBCalculator()

    full = calc.calculate(HIRE, request(TerminationType.CONTRACT_END, days=days, salary=6000))
    resigned = calc.calculate(HIRE, request(TerminationType.RESIGNATION, days=days, salary=6000))

    assert (full.years_of_service, full.months_of_service, full.days_of_service) == (3, 2, 15)
    assert full.proportional_amount == pytest.approx(1000 + 90000 / 365)
    assert full.total_eosb_amount == pytest.approx(18000 + 1000 + 90000 / 365)
    assert full.to_record()["total_eosb_amount"] == 19246.58
    # resignation under five years earns half a month per year, remainder included
    assert resigned.eosb_amount_0_to_5 == 9000
    assert resigned.proportional_amount == pytest.approx(500 + 45000 / 365)


def test_housing_allowance_only_counted_when_included():
    employee = Employee(id="emp1", hire_date=HIRE, basic_salary=5000, housing_allowance=1000)
    calc = EOSBCalculator()

    included = calc.calculate_for_employee(
        employee, request(TerminationType.RETIREMENT, days=365, salary=5000, include_housing_allowance=True)
    )
    excluded = calc.calculate_for_employee(employee, request(TerminationType.RETIREMENT, days=365, salary=5000))

    assert included.calculation_base == 6000
    assert excluded.calculation_base == 5000
    assert included.employee_id == "emp1"


def test_net_amount_subtracts_deductions():
    result = EOSBCalculator().calculate(HIRE, request(days=7 * 365, salary=6000, deductions=2000))

    assert result.net_eosb_amount == 25000
    assert result.to_record()["deductions"] == 2000


def test_missing_hire_date_is_rejected():
    with pytest.raises(CalculationValidationError) as excinfo:
        EOSBCalculator().calculate(None, request(days=100))

    assert excinfo.value.field == "hire_date"


def test_termination_before_hire_is_rejected():
    with pytest.raises(CalculationValidationError):
        EOSBCalculator().calculate(HIRE, request(days=-1))


def test_negative_deductions_are_rejected():
    with pytest.raises(CalculationValidationError) as excinfo:
        EOSBCalculator().calculate(HIRE, request(days=3000, deductions=-50))

    assert excinfo.value.field == "deductions"


def test_result_starts_calculated_and_is_immutable():
    result = EOSBCalculator().calculate(HIRE, request(days=3000), calculation_date=date(2024, 1, 1))

    assert result.status.value == "calculated"
    assert result.to_record()["calculation_date"] == "2024-01-01"
    with pytest.raises(FrozenInstanceError):
        result.total_eosb_amount = 0
