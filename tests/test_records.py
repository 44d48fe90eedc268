from datetime import date, timedelta

import pytest

from ksa_payroll.calculator import PayrollCalculator
from ksa_payroll.eosb import EOSBCalculator
from ksa_payroll.errors import DuplicateRecordError, InvalidStatusTransition, RecordNotFoundError
from ksa_payroll.lifecycle import EOSB_FLOW, PAYROLL_FLOW, advance_status, next_status
from ksa_payroll.models import EOSBCalculationInput, Employee, MonthlyPayrollRequest, TerminationType
from ksa_payroll.records import save_eosb_result, save_payroll_record, transition_record
from ksa_payroll.storage import DataStore


def eosb_result(employee_id: str = "emp1", termination_date: date = date(2024, 6, 30)):
    employee = Employee(id=employee_id, hire_date=termination_date - timedelta(days=7 * 365), basic_salary=6000)
    request = EOSBCalculationInput(TerminationType.RESIGNATION, termination_date, 6000)
    return EOSBCalculator().calculate_for_employee(employee, request)


def payroll_record(employee_id: str = "emp1", month: str = "2024-03"):
    employee = Employee(id=employee_id, basic_salary=8000, nationality="Saudi")
    return PayrollCalculator().calculate_monthly(MonthlyPayrollRequest(employee=employee, month=month))


def test_store_persists_records_between_instances(tmp_path):
    path = tmp_path / "store.json"
    store = DataStore(path)
    created = store.create("EOSBRecord", {"employee_id": "emp1", "status": "calculated", "hire_date": date(2020, 1, 1)})
    store.save()

    reloaded = DataStore(path)

    assert reloaded.get("EOSBRecord", created["id"])["hire_date"] == "2020-01-01"
    assert reloaded.filter("EOSBRecord", employee_id="emp1")[0]["id"] == created["id"]


def test_store_update_and_delete(tmp_path):
    store = DataStore(tmp_path / "store.json")
    record = store.create("Payroll", {"status": "calculated"})

    updated = store.update("Payroll", record["id"], {"status": "approved", "id": "ignored"})
    store.delete("Payroll", record["id"])

    assert updated["status"] == "approved"
    assert updated["id"] == record["id"]
    assert store.list("Payroll") == []


def test_missing_record_raises_not_found(tmp_path):
    store = DataStore(tmp_path / "store.json")

    with pytest.raises(RecordNotFoundError):
        store.get("Payroll", "nope")
    with pytest.raises(KeyError):
        store.delete("Payroll", "nope")


def test_eosb_submission_is_idempotent(tmp_path):
    store = DataStore(tmp_path / "store.json")

    first = save_eosb_result(store, eosb_result())
    with pytest.raises(DuplicateRecordError) as excinfo:
        save_eosb_result(store, eosb_result())

    assert excinfo.value.existing_id == first["id"]
    assert first["total_eosb_amount"] == 27000
    assert first["idempotency_key"] == "eosb:emp1:2024-06-30"
    assert len(store.list("EOSBRecord")) == 1


def test_payroll_submission_keyed_by_employee_and_month(tmp_path):
    store = DataStore(tmp_path / "store.json")

    save_payroll_record(store, payroll_record(month="2024-03"), processed_by="hr@example.com")
    save_payroll_record(store, payroll_record(month="2024-04"))
    save_payroll_record(store, payroll_record(employee_id="emp2", month="2024-03"))

    with pytest.raises(DuplicateRecordError):
        save_payroll_record(store, payroll_record(month="2024-03"))
    assert len(store.list("Payroll")) == 3
    assert store.filter("Payroll", month="2024-03", employee_id="emp1")[0]["processed_by"] == "hr@example.com"


def test_eosb_record_moves_forward_only(tmp_path):
    store = DataStore(tmp_path / "store.json")
    record = save_eosb_result(store, eosb_result())

    with pytest.raises(InvalidStatusTransition):
        transition_record(store, "EOSBRecord", record["id"], "paid")

    approved = transition_record(store, "EOSBRecord", record["id"], "approved", actor="manager@example.com")
    paid = transition_record(store, "EOSBRecord", record["id"], "paid")

    assert approved["approved_by"] == "manager@example.com"
    assert paid["status"] == "paid"
    assert paid["total_eosb_amount"] == record["total_eosb_amount"]
    with pytest.raises(InvalidStatusTransition):
        transition_record(store, "EOSBRecord", record["id"], "approved")


def test_payroll_lifecycle_order():
    assert PAYROLL_FLOW == ("draft", "calculated", "approved", "processed", "paid")
    assert EOSB_FLOW == ("calculated", "approved", "paid")
    assert next_status(PAYROLL_FLOW, "approved") == "processed"
    assert next_status(PAYROLL_FLOW, "paid") is None
    assert advance_status(PAYROLL_FLOW, "draft", "calculated") == "calculated"
    with pytest.raises(InvalidStatusTransition):
        advance_status(PAYROLL_FLOW, "approved", "paid")
    with pytest.raises(InvalidStatusTransition):
        advance_status(PAYROLL_FLOW, "unknown", "draft")
