from __future__ import annotations

from typing import Dict, Optional, Sequence

from .errors import InvalidStatusTransition
from .models import EOSBStatus, PayrollStatus

EOSB_FLOW: Sequence[str] = tuple(s.value for s in EOSBStatus)
PAYROLL_FLOW: Sequence[str] = tuple(s.value for s in PayrollStatus)

EOSB_COLLECTION = "EOSBRecord"
PAYROLL_COLLECTION = "Payroll"

FLOWS: Dict[str, Sequence[str]] = {
    EOSB_COLLECTION: EOSB_FLOW,
    PAYROLL_COLLECTION: PAYROLL_FLOW,
}


def next_status(flow: Sequence[str], current: str) -> Optional[str]:
    if current not in flow:
        raise KeyError(f"Unknown status {current}")
    index = flow.index(current)
    return flow[index + 1] if index + 1 < len(flow) else None


def advance_status(flow: Sequence[str], current: str, target: str) -> str:
    """Move one step forward; skipping, repeating or reversing a status is rejected."""
    if current not in flow or target != next_status(flow, current):
        raise InvalidStatusTransition(current, target)
    return target


def flow_for(collection: str) -> Sequence[str]:
    try:
        return FLOWS[collection]
    except KeyError:
        raise KeyError(f"No status lifecycle defined for collection {collection}") from None
