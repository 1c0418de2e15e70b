import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy import extract, func
from sqlalchemy.orm import Session, joinedload

from app.core.leave_workflow import (
    LeaveStatus,
    parse_action,
    resolve_transition,
    resolve_withdrawal,
    status_label,
)
from app.core.optimistic_lock import check_version, flush_versioned, parse_if_match, set_etag
from app.core.pagination import page_params
from app.db.session import get_db
from app.models.employee import Employee
from app.models.leave import LeaveApplication
from app.models.masters import LeaveType
from app.schemas.envelope import ApiResponse
from app.schemas.leave import (
    LeaveActionRequest,
    LeaveApplyRequest,
    LeaveBalanceOut,
    LeaveOut,
    LeaveUpdateRequest,
)
from app.schemas.pagination import PageParams, PaginatedResponse, PaginationMeta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leave", tags=["leave"])

# Statuses that block other applications over the same dates
BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


def parse_leave_id(leave_id: str) -> int:
    try:
        value = int(leave_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid leave ID")
    if value <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid leave ID")
    return value


def _get_leave_or_404(db: Session, leave_id: int, *, for_update: bool = False) -> LeaveApplication:
    q = db.query(LeaveApplication).filter(
        LeaveApplication.id == leave_id,
        LeaveApplication.deleted_at.is_(None),
    )
    if for_update:
        q = q.with_for_update()
    leave = q.one_or_none()
    if not leave:
        raise HTTPException(status_code=404, detail="Leave not found")
    return leave


def _find_overlap(
    db: Session,
    employee_id: int,
    from_date: date,
    to_date: date,
    *,
    exclude_id: int | None = None,
) -> LeaveApplication | None:
    q = db.query(LeaveApplication).filter(
        LeaveApplication.employee_onboarding_id == employee_id,
        LeaveApplication.deleted_at.is_(None),
        LeaveApplication.is_active.is_(True),
        LeaveApplication.status_id.in_([int(s) for s in BLOCKING_STATUSES]),
        LeaveApplication.from_date <= to_date,
        LeaveApplication.to_date >= from_date,
    )
    if exclude_id is not None:
        q = q.filter(LeaveApplication.id != exclude_id)
    return q.first()


def _assert_leave_type(db: Session, leave_type_id: int) -> LeaveType:
    leave_type = (
        db.query(LeaveType)
        .filter(LeaveType.id == leave_type_id, LeaveType.deleted_at.is_(None), LeaveType.status.is_(True))
        .one_or_none()
    )
    if not leave_type:
        raise HTTPException(status_code=400, detail=f"Leave type {leave_type_id} does not exist")
    return leave_type


def to_outs(db: Session, leaves: list[LeaveApplication]) -> list[LeaveOut]:
    """Resolve employee and leave type names through in-memory maps."""
    employee_ids = {leave.employee_onboarding_id for leave in leaves}
    type_ids = {leave.leave_type_id for leave in leaves}

    employees = (
        {
            e.id: e
            for e in db.query(Employee)
            .options(joinedload(Employee.designation))
            .filter(Employee.id.in_(employee_ids))
            .all()
        }
        if employee_ids
        else {}
    )
    type_names = (
        dict(db.query(LeaveType.id, LeaveType.leave_type).filter(LeaveType.id.in_(type_ids)).all())
        if type_ids
        else {}
    )

    out: list[LeaveOut] = []
    for leave in leaves:
        emp = employees.get(leave.employee_onboarding_id)
        out.append(
            LeaveOut(
                id=leave.id,
                employee_id=leave.employee_onboarding_id,
                employee_name=emp.full_name if emp else "-",
                employee_code=(emp.employee_code if emp else None) or "-",
                employee_photo=emp.employee_photo if emp else None,
                designation=(
                    emp.designation.designation_name if emp and emp.designation else "-"
                ),
                leave_type=type_names.get(leave.leave_type_id) or "-",
                leave_type_id=leave.leave_type_id,
                from_date=leave.from_date,
                to_date=leave.to_date,
                number_of_days=leave.number_of_days,
                description=leave.description,
                status_id=leave.status_id,
                status_name=status_label(leave.status_id),
                file_upload=leave.file_upload,
                reason_of_cancellation=leave.reason_of_cancellation,
                is_active=leave.is_active,
                created_at=leave.created_at,
                version=leave.version,
            )
        )
    return out


@router.get("")
def list_leaves(
    params: PageParams = Depends(page_params),
    status_id: int | None = Query(default=None, alias="status", description="1, 2, 4, 26 or 27"),
    employee_id: int | None = Query(default=None),
    leave_type: int | None = Query(default=None, description="Leave type id"),
    db: Session = Depends(get_db),
):
    """
    Active leave applications, newest first.

    `stats` counts ignore the status filter so the dashboard tiles stay put
    while the table is filtered.
    """
    base = db.query(LeaveApplication).filter(
        LeaveApplication.deleted_at.is_(None),
        LeaveApplication.is_active.is_(True),
    )
    if employee_id:
        base = base.filter(LeaveApplication.employee_onboarding_id == employee_id)
    if leave_type:
        base = base.filter(LeaveApplication.leave_type_id == leave_type)

    query = base.filter(LeaveApplication.status_id == status_id) if status_id else base

    total = query.count()
    leaves = (
        query.order_by(LeaveApplication.created_at.desc(), LeaveApplication.id.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    counts = dict(
        base.with_entities(LeaveApplication.status_id, func.count(LeaveApplication.id))
        .group_by(LeaveApplication.status_id)
        .all()
    )

    return PaginatedResponse[LeaveOut](
        data=to_outs(db, leaves),
        pagination=PaginationMeta.build(page=params.page, limit=params.limit, total=total),
        stats={
            "total": sum(counts.values()),
            "pending": counts.get(LeaveStatus.PENDING, 0),
            "approved": counts.get(LeaveStatus.APPROVED, 0),
            "rejected": counts.get(LeaveStatus.REJECTED, 0),
        },
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[LeaveOut])
def apply_leave(
    payload: LeaveApplyRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    employee = (
        db.query(Employee)
        .filter(Employee.id == payload.employee_id, Employee.deleted_at.is_(None))
        .one_or_none()
    )
    if not employee:
        raise HTTPException(status_code=400, detail=f"Employee {payload.employee_id} does not exist")

    _assert_leave_type(db, payload.leave_type_id)

    if _find_overlap(db, employee.id, payload.from_date, payload.to_date):
        raise HTTPException(
            status_code=400,
            detail="Leave dates overlap with an existing leave application",
        )

    leave = LeaveApplication(
        employee_onboarding_id=employee.id,
        leave_type_id=payload.leave_type_id,
        from_date=payload.from_date,
        to_date=payload.to_date,
        number_of_days=payload.days,
        description=payload.reason,
        file_upload=payload.file_upload or None,
        status_id=LeaveStatus.PENDING,
        is_active=True,
    )
    db.add(leave)
    db.flush()
    db.refresh(leave)

    logger.info("Leave %s applied by employee %s (%s days)", leave.id, employee.id, leave.number_of_days)
    set_etag(response, leave)
    return ApiResponse[LeaveOut](
        code=201,
        data=to_outs(db, [leave])[0],
        message="Leave application submitted successfully",
    )


@router.get("/balance", response_model=ApiResponse[list[LeaveBalanceOut]])
def leave_balance(
    employee_id: int = Query(..., ge=1),
    year: int | None = Query(default=None, ge=1900, le=9999),
    db: Session = Depends(get_db),
):
    """
    Per leave type for one calendar year:
      allocated - the type's max_leave_count
      used      - days of approved leaves
      pending   - days still awaiting a decision
      remaining - allocated - used - pending
    """
    exists = (
        db.query(Employee.id)
        .filter(Employee.id == employee_id, Employee.deleted_at.is_(None))
        .first()
    )
    if not exists:
        raise HTTPException(status_code=404, detail="Employee not found")

    year = year or date.today().year

    leave_types = (
        db.query(LeaveType)
        .filter(LeaveType.deleted_at.is_(None), LeaveType.status.is_(True))
        .order_by(LeaveType.id.asc())
        .all()
    )

    rows = (
        db.query(
            LeaveApplication.leave_type_id,
            LeaveApplication.status_id,
            func.coalesce(func.sum(LeaveApplication.number_of_days), 0),
        )
        .filter(
            LeaveApplication.employee_onboarding_id == employee_id,
            LeaveApplication.deleted_at.is_(None),
            LeaveApplication.status_id.in_([int(s) for s in BLOCKING_STATUSES]),
            extract("year", LeaveApplication.from_date) == year,
        )
        .group_by(LeaveApplication.leave_type_id, LeaveApplication.status_id)
        .all()
    )
    days = {(type_id, status_id): int(total) for type_id, status_id, total in rows}

    balances = []
    for lt in leave_types:
        used = days.get((lt.id, LeaveStatus.APPROVED), 0)
        pending = days.get((lt.id, LeaveStatus.PENDING), 0)
        balances.append(
            LeaveBalanceOut(
                leave_type_id=lt.id,
                leave_type_name=lt.leave_type,
                allocated=lt.max_leave_count,
                used=used,
                pending=pending,
                remaining=lt.max_leave_count - used - pending,
            )
        )
    return ApiResponse[list[LeaveBalanceOut]](data=balances)


@router.get("/{leave_id}", response_model=ApiResponse[LeaveOut])
def get_leave(leave_id: str, response: Response, db: Session = Depends(get_db)):
    leave = _get_leave_or_404(db, parse_leave_id(leave_id))
    set_etag(response, leave)
    return ApiResponse[LeaveOut](data=to_outs(db, [leave])[0])


@router.put("/{leave_id}", response_model=ApiResponse[LeaveOut])
def update_leave(
    leave_id: str,
    payload: LeaveUpdateRequest,
    response: Response,
    db: Session = Depends(get_db),
    if_match: str | None = Header(default=None, alias="If-Match"),
):
    """Edit a leave application. Only pending applications can change."""
    lid = parse_leave_id(leave_id)
    expected_version = parse_if_match(if_match)

    leave = _get_leave_or_404(db, lid, for_update=True)
    check_version(leave, expected_version)

    if leave.status_id != LeaveStatus.PENDING:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Cannot update leave that is not pending",
                "current": status_label(leave.status_id),
            },
        )

    updates = payload.updates()
    if "leave_type_id" in updates:
        _assert_leave_type(db, updates["leave_type_id"])

    from_date = updates.get("from_date", leave.from_date)
    to_date = updates.get("to_date", leave.to_date)
    if from_date > to_date:
        raise HTTPException(status_code=400, detail="fromDate must be on or before toDate")
    if ("from_date" in updates or "to_date" in updates) and _find_overlap(
        db, leave.employee_onboarding_id, from_date, to_date, exclude_id=leave.id
    ):
        raise HTTPException(
            status_code=400,
            detail="Leave dates overlap with an existing leave application",
        )

    for column, value in updates.items():
        setattr(leave, column, value)
    leave.updated_at = datetime.utcnow()
    flush_versioned(db, leave)

    logger.info("Leave %s updated: %s", leave.id, sorted(updates))
    set_etag(response, leave)
    return ApiResponse[LeaveOut](
        data=to_outs(db, [leave])[0],
        message="Leave application updated successfully",
    )


@router.delete("/{leave_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
def withdraw_leave(leave_id: str, db: Session = Depends(get_db)):
    """Withdraw a pending application: it becomes Cancelled, inactive and deleted."""
    leave = _get_leave_or_404(db, parse_leave_id(leave_id), for_update=True)
    transition = resolve_withdrawal(leave.status_id)

    now = datetime.utcnow()
    leave.status_id = transition.target
    leave.is_active = False
    leave.deleted_at = now
    leave.updated_at = now
    flush_versioned(db, leave)

    logger.info("Leave %s withdrawn", leave.id)
    return ApiResponse[None](message=transition.message)


@router.post("/{leave_id}/approve", response_model=ApiResponse[LeaveOut])
def act_on_leave(
    leave_id: str,
    payload: LeaveActionRequest,
    response: Response,
    db: Session = Depends(get_db),
    if_match: str | None = Header(default=None, alias="If-Match"),
):
    """
    Apply a workflow action to a leave application.

    type: 1 approve, 0 reject, 3 request cancellation (reason required),
    4 approve cancellation. The action must be valid from the stored status.
    """
    lid = parse_leave_id(leave_id)
    action = parse_action(payload.type)
    expected_version = parse_if_match(if_match)

    leave = _get_leave_or_404(db, lid, for_update=True)
    check_version(leave, expected_version)

    previous = leave.status_id
    transition = resolve_transition(leave.status_id, action, payload.reason)

    leave.status_id = transition.target
    if transition.requires_reason:
        leave.reason_of_cancellation = payload.reason
    if transition.deactivates:
        leave.is_active = False
    leave.updated_at = datetime.utcnow()
    flush_versioned(db, leave)

    logger.info(
        "Leave %s: %s -> %s (%s)",
        leave.id,
        status_label(previous),
        status_label(leave.status_id),
        action.name,
    )
    set_etag(response, leave)
    return ApiResponse[LeaveOut](data=to_outs(db, [leave])[0], message=transition.message)
