from datetime import date

from ksa_payroll.models import (
    EOSBResult,
    Employee,
    ExplanationLine,
    PayrollDeductions,
    PayrollEarnings,
    PayrollRecord,
    RecurringDeduction,
    TerminationType,
    is_saudi_nationality,
)


def test_employee_derives_saudi_flag_from_nationality_when_missing():
    assert Employee(id="a", nationality="Saudi Arabia").is_saudi is True
    assert Employee(id="b", nationality="Indian").is_saudi is False
    assert Employee(id="c", nationality="Indian", is_saudi=True).is_saudi is True


def test_is_saudi_nationality_accepts_custom_aliases():
    assert is_saudi_nationality("Kingdom of Saudi Arabia", aliases=("kingdom of saudi arabia",))
    assert not is_saudi_nationality("KSA", aliases=("saudi",))


def test_recurring_deduction_month_window():
    deduction = RecurringDeduction("e1", "advance_salary", 300, start_month="2024-02", end_month="2024-04")

    assert not deduction.applies_to("2024-01")
    assert deduction.applies_to("2024-02")
    assert deduction.applies_to("2024-04")
    assert not deduction.applies_to("2024-05")
    assert not RecurringDeduction("e1", "other", 10, is_active=False).applies_to("2024-03")


def test_eosb_record_rounds_money_and_serialises_dates():
    result = EOSBResult(
        employee_id="e1",
        termination_type=TerminationType.CONTRACT_END,
        hire_date=date(2020, 1, 1),
        termination_date=date(2023, 3, 12),
        years_of_service=3,
        months_of_service=2,
        days_of_service=15,
        last_basic_salary=6000,
        include_housing_allowance=False,
        calculation_base=6000,
        years_0_to_5=3,
        years_5_to_10=0,
        years_above_10=0,
        eosb_amount_0_to_5=18000,
        eosb_amount_5_to_10=0,
        eosb_amount_above_10=0,
        proportional_amount=1246.575342,
        total_eosb_amount=19246.575342,
        deductions=0,
        net_eosb_amount=19246.575342,
        calculation_date=date(2023, 3, 12),
        calculation_details=(ExplanationLine("eosb_0_to_5", "Years 0-5: 3 × 6,000.00", 18000),),
    )

    record = result.to_record()

    assert record["termination_type"] == "contract_end"
    assert record["hire_date"] == "2020-01-01"
    assert record["proportional_amount"] == 1246.58
    assert record["net_eosb_amount"] == 19246.58
    assert record["calculation_details"] == "Years 0-5: 3 × 6,000.00 = 18,000.00 SAR"
    assert record["status"] == "calculated"


def test_payroll_record_flattens_lines():
    record = PayrollRecord(
        employee_id="e1",
        month="2024-03",
        earnings=PayrollEarnings(basic_salary=1000, overtime_pay=12.345),
        deductions=PayrollDeductions(gosi_employee=100),
        gross_salary=1012.35,
        total_deductions=100,
        net_salary=912.35,
    )

    flat = record.to_record()

    assert flat["basic_salary"] == 1000
    assert flat["overtime_pay"] == 12.35
    assert flat["gosi_employee"] == 100
    assert flat["net_salary"] == 912.35
    assert flat["status"] == "calculated"
