import pytest

from ksa_payroll.errors import CalculationValidationError
from ksa_payroll.overtime import OvertimeCalculator
from ksa_payroll.rate_tables import RateTable


def test_example_month_rounds_for_display():
    result = OvertimeCalculator().calculate(10000, 10, working_days_in_month=30)

    record = result.to_record()
    assert record["hourly_rate"] == 41.67
    assert record["overtime_rate"] == 62.5
    assert record["overtime_pay"] == 625.00
    assert record["total_hours"] == 10


@pytest.mark.parametrize("basic", [1, 4500, 10000, 123456.78])
def test_overtime_rate_is_exactly_one_and_a_half_hourly(basic):
    result = OvertimeCalculator().calculate(basic, 5)

    assert result.overtime_rate == result.hourly_rate * 1.5


def test_working_days_change_hourly_rate():
    result = OvertimeCalculator().calculate(10400, 4, working_days_in_month=26)

    assert result.hourly_rate == 50
    assert result.overtime_rate == 75
    assert result.overtime_pay == 300


def test_monthly_limit_is_advisory_only():
    calc = OvertimeCalculator()

    at_limit = calc.calculate(9000, 60)
    over_limit = calc.calculate(9000, 61)

    assert not at_limit.exceeds_monthly_limit
    assert over_limit.exceeds_monthly_limit
    assert over_limit.overtime_pay > 0


def test_negative_hours_rejected():
    with pytest.raises(CalculationValidationError):
        OvertimeCalculator().calculate(9000, -1)


def test_non_positive_working_days_rejected():
    with pytest.raises(CalculationValidationError):
        OvertimeCalculator().calculate(9000, 2, working_days_in_month=0)


def test_working_days_default_comes_from_rate_table():
    table = RateTable("custom", gosi={}, overtime={"working_days_in_month": 26}, attendance={}, validation={})

    result = OvertimeCalculator(table).calculate(10400, 4)

    assert result.working_days_in_month == 26
    assert result.hourly_rate == 50
    assert OvertimeCalculator().calculate(9600, 1).working_days_in_month == 30
