"""Informational banners: never block a calculation or a save."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .models import OvertimeResult

URGENT_DAYS = 7


@dataclass(frozen=True)
class Advisory:
    code: str
    severity: str  # info, urgent or expired
    message: str
    subject_id: Optional[str] = None


@dataclass
class TrackedDocument:
    id: str
    employee_id: str
    document_type: str  # iqama, passport, national_id, ...
    expiry_date: Optional[date] = None
    alert_days: int = 30


def overtime_advisory(result: OvertimeResult, employee_id: Optional[str] = None) -> Optional[Advisory]:
    if not result.exceeds_monthly_limit:
        return None
    return Advisory(
        code="overtime_limit",
        severity="info",
        message=f"Overtime of {result.total_hours:g}h exceeds the monthly limit",
        subject_id=employee_id,
    )


def days_until_expiry(document: TrackedDocument, today: date) -> Optional[int]:
    if document.expiry_date is None:
        return None
    return (document.expiry_date - today).days


def expiry_advisories(documents: Iterable[TrackedDocument], today: Optional[date] = None) -> List[Advisory]:
    """Alerts fire on the document's alert day, a week out, and on the expiry day itself."""
    today = today or date.today()
    advisories: List[Advisory] = []
    for document in documents:
        remaining = days_until_expiry(document, today)
        if remaining is None or remaining < 0:
            continue
        if remaining not in {document.alert_days or 30, URGENT_DAYS, 0}:
            continue
        if remaining == 0:
            severity, message = "expired", f"{document.document_type} expires today"
        elif remaining <= URGENT_DAYS:
            severity, message = "urgent", f"{document.document_type} expires in {remaining} days"
        else:
            severity, message = "info", f"{document.document_type} expires in {remaining} days"
        advisories.append(
            Advisory(code="document_expiry", severity=severity, message=message, subject_id=document.employee_id)
        )
    return advisories
