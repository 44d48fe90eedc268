"""Persisting calculation results and moving them through their lifecycle."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from .errors import CalculationValidationError, DuplicateRecordError
from .lifecycle import EOSB_COLLECTION, PAYROLL_COLLECTION, advance_status, flow_for
from .logging import get_logger
from .models import EOSBResult, PayrollRecord
from .storage import DataStore, Record

logger = get_logger(__name__)


def eosb_idempotency_key(employee_id: str, termination_date: date) -> str:
    return f"eosb:{employee_id}:{termination_date.isoformat()}"


def payroll_idempotency_key(employee_id: str, month: str) -> str:
    return f"payroll:{employee_id}:{month}"


def _create_once(store: DataStore, collection: str, key: str, payload: Record) -> Record:
    existing = store.filter(collection, idempotency_key=key)
    if existing:
        logger.warning("duplicate_submission", collection=collection, idempotency_key=key)
        raise DuplicateRecordError(collection, key, existing[0]["id"])
    record = store.create(collection, {**payload, "idempotency_key": key})
    store.save()
    logger.info("record_created", collection=collection, record_id=record["id"], idempotency_key=key)
    return record


def save_eosb_result(store: DataStore, result: EOSBResult) -> Record:
    if not result.employee_id:
        raise CalculationValidationError("EOSB result has no employee", field="employee_id")
    key = eosb_idempotency_key(result.employee_id, result.termination_date)
    return _create_once(store, EOSB_COLLECTION, key, result.to_record())


def save_payroll_record(store: DataStore, record: PayrollRecord, processed_by: Optional[str] = None) -> Record:
    payload = record.to_record()
    if processed_by:
        payload["processed_by"] = processed_by
    key = payroll_idempotency_key(record.employee_id, record.month)
    return _create_once(store, PAYROLL_COLLECTION, key, payload)


def transition_record(
    store: DataStore, collection: str, record_id: str, target: str, actor: Optional[str] = None
) -> Record:
    record = store.get(collection, record_id)
    status = advance_status(flow_for(collection), record.get("status", ""), target)
    changes: Record = {"status": status, f"{status}_at": datetime.now(timezone.utc).isoformat()}
    if actor:
        changes[f"{status}_by"] = actor
    updated = store.update(collection, record_id, changes)
    store.save()
    logger.info("record_transitioned", collection=collection, record_id=record_id, status=status)
    return updated
