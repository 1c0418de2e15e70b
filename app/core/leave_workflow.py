"""
Leave application status workflow.

    Pending(1) --approve(1)--> Approved(2) --request cancellation(3)--> RequestForCancellation(26)
        |                                                                      |
        +--reject(0)--> Rejected(4)                  approve cancellation(4) --+--> Cancelled(27)

Withdrawing a still-pending application (DELETE) also lands in Cancelled.
Rejected and Cancelled are terminal. Every transition is checked against the
persisted status before anything is written.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from fastapi import HTTPException, status


class LeaveStatus(IntEnum):
    PENDING = 1
    APPROVED = 2
    REJECTED = 4
    REQUEST_FOR_CANCELLATION = 26
    CANCELLED = 27

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    LeaveStatus.PENDING: "Pending",
    LeaveStatus.APPROVED: "Approved",
    LeaveStatus.REJECTED: "Rejected",
    LeaveStatus.REQUEST_FOR_CANCELLATION: "Request For Cancellation",
    LeaveStatus.CANCELLED: "Cancelled",
}

TERMINAL_STATUSES = frozenset({LeaveStatus.REJECTED, LeaveStatus.CANCELLED})


class LeaveAction(IntEnum):
    """Values of the `type` field on POST /leave/{id}/approve."""
    REJECT = 0
    APPROVE = 1
    REQUEST_CANCELLATION = 3
    APPROVE_CANCELLATION = 4


@dataclass(frozen=True)
class Transition:
    source: LeaveStatus
    target: LeaveStatus
    message: str
    requires_reason: bool = False
    deactivates: bool = False


TRANSITIONS: dict[LeaveAction, Transition] = {
    LeaveAction.APPROVE: Transition(
        LeaveStatus.PENDING, LeaveStatus.APPROVED, "Leave approved successfully"
    ),
    LeaveAction.REJECT: Transition(
        LeaveStatus.PENDING, LeaveStatus.REJECTED, "Leave rejected"
    ),
    LeaveAction.REQUEST_CANCELLATION: Transition(
        LeaveStatus.APPROVED,
        LeaveStatus.REQUEST_FOR_CANCELLATION,
        "Cancellation request submitted",
        requires_reason=True,
    ),
    LeaveAction.APPROVE_CANCELLATION: Transition(
        LeaveStatus.REQUEST_FOR_CANCELLATION,
        LeaveStatus.CANCELLED,
        "Leave cancelled successfully",
        deactivates=True,
    ),
}

# Withdrawal of an application that nobody has acted on yet
WITHDRAW = Transition(
    LeaveStatus.PENDING, LeaveStatus.CANCELLED, "Leave application cancelled successfully", deactivates=True
)


def status_label(status_id: int | None) -> str:
    try:
        return LeaveStatus(status_id or LeaveStatus.PENDING).label
    except ValueError:
        return "Unknown"


def parse_action(action_type: int) -> LeaveAction:
    try:
        return LeaveAction(action_type)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action type")


def _current(status_id: int) -> LeaveStatus:
    try:
        return LeaveStatus(status_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Leave has an unknown status ({status_id})",
        )


def resolve_transition(current_status_id: int, action: LeaveAction, reason: str | None = None) -> Transition:
    """
    Validate `action` against the persisted status.

    Raises 400 when the action is not allowed from the current status or a
    required reason is missing.
    """
    transition = TRANSITIONS[action]
    current = _current(current_status_id)

    if current != transition.source:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": f"Only {transition.source.label.lower()} leaves can move to {transition.target.label}",
                "current": current.label,
                "action": action.name,
            },
        )

    if transition.requires_reason and not (reason and reason.strip()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cancellation reason is required")

    return transition


def resolve_withdrawal(current_status_id: int) -> Transition:
    current = _current(current_status_id)
    if current != WITHDRAW.source:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Only pending leaves can be withdrawn",
                "current": current.label,
            },
        )
    return WITHDRAW
