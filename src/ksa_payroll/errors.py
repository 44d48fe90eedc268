from __future__ import annotations


class PayrollError(Exception):
    """Base class for errors raised by the calculation core."""


class CalculationValidationError(PayrollError, ValueError):
    """Input is missing or out of range; nothing was computed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidStatusTransition(PayrollError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move record from '{current}' to '{target}'")
        self.current = current
        self.target = target


class DuplicateRecordError(PayrollError):
    def __init__(self, collection: str, idempotency_key: str, existing_id: str):
        super().__init__(f"{collection} record already exists for {idempotency_key} (id={existing_id})")
        self.collection = collection
        self.idempotency_key = idempotency_key
        self.existing_id = existing_id


class RecordNotFoundError(PayrollError, KeyError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection} record {record_id} not found")
        self.collection = collection
        self.record_id = record_id

    def __str__(self) -> str:
        return self.args[0]
