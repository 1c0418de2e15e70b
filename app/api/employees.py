import logging
import re
import uuid
from datetime import date, datetime

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, sessionmaker

from app.core.employee_aggregate import build_employee_detail
from app.core.employee_sync import (
    COLLECTIONS_BY_PATH,
    apply_employee_patch,
    assert_email_available,
    email_in_use,
    get_active_employee,
    soft_delete_child_record,
    sync_employee_children,
)
from app.core.optimistic_lock import check_version, flush_versioned, parse_if_match, set_etag
from app.core.pagination import page_params
from app.db.session import get_db, get_session_factory
from app.models.employee import Employee
from app.models.masters import Designation, RoleMaster, StatusMaster
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeDetailOut,
    EmployeeListItem,
    EmployeeMinimalItem,
    EmployeeOut,
    EmployeePatch,
)
from app.schemas.envelope import ApiResponse
from app.schemas.fields import parse_flag
from app.schemas.pagination import PageParams, PaginatedResponse, PaginationMeta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])

SORT_COLUMNS = {
    "first_name": Employee.first_name,
    "employee_code": Employee.employee_code,
    "doj": Employee.doj,
    "created_at": Employee.created_at,
    "designationName": Designation.designation_name,
}

_CODE_PATTERN = re.compile(r"EMP-(\d+)$")


def parse_employee_id(employee_id: str) -> int:
    try:
        value = int(employee_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid employee ID")
    if value <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid employee ID")
    return value


def _get_employee_or_404(db: Session, employee_id: int, *, for_update: bool = False) -> Employee:
    employee = get_active_employee(db, employee_id, for_update=for_update)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


def next_employee_code(db: Session) -> str:
    """One past the highest EMP-n code in use, soft-deleted rows included."""
    codes = (
        db.query(Employee.employee_code)
        .filter(Employee.employee_code.like("EMP-%"))
        .all()
    )
    highest = 0
    for (code,) in codes:
        match = _CODE_PATTERN.match(code)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"EMP-{highest + 1:05d}"


def to_list_item(e: Employee) -> EmployeeListItem:
    return EmployeeListItem(
        id=e.id,
        uid=e.uid,
        employee_code=e.employee_code,
        first_name=e.first_name,
        last_name=e.last_name,
        full_name=e.full_name,
        employee_photo=e.employee_photo,
        email=e.email,
        phone_number=e.phone_number,
        doj=e.doj,
        visa_type=e.visa_type,
        status=e.status,
        created_at=e.created_at,
        designation_id=e.designation.id if e.designation else None,
        designation_name=e.designation.designation_name if e.designation else None,
        role_id=e.role.id if e.role else None,
        role_name=e.role.role_name if e.role else None,
        status_master_id=e.status_master.id if e.status_master else None,
        status_name=e.status_master.status if e.status_master else None,
    )


@router.get("")
def list_employees(
    params: PageParams = Depends(page_params),
    search: str | None = Query(default=None, description="Name, email, employee code or designation"),
    status_filter: str | None = Query(default=None, alias="status", description="true/false, active/inactive"),
    status_master_id: int | None = Query(default=None),
    designation_id: int | None = Query(default=None),
    role_id: int | None = Query(default=None),
    sort_field: str = Query(default="first_name"),
    sort_order: str = Query(default="asc", pattern="^(asc|desc)$"),
    minimal: bool = Query(default=False, description="Lightweight rows for dropdowns"),
    db: Session = Depends(get_db),
):
    """
    List non-deleted employees.

    Unknown sort fields fall back to first_name. `meta` carries active and
    inactive totals across all employees, regardless of filters.
    """
    query = (
        db.query(Employee)
        .outerjoin(Designation, Designation.id == Employee.designation_master_id)
        .filter(Employee.deleted_at.is_(None))
    )

    if status_filter:
        try:
            query = query.filter(Employee.status.is_(parse_flag(status_filter)))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid status filter")

    if status_master_id:
        query = query.filter(Employee.status_master_id == status_master_id)
    if designation_id:
        query = query.filter(Employee.designation_master_id == designation_id)
    if role_id:
        query = query.filter(Employee.role_master_id == role_id)

    if search:
        search_term = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Employee.first_name.ilike(search_term),
                Employee.last_name.ilike(search_term),
                Employee.email.ilike(search_term),
                Employee.employee_code.ilike(search_term),
                Designation.designation_name.ilike(search_term),
            )
        )

    total = query.count()

    column = SORT_COLUMNS.get(sort_field, Employee.first_name)
    ordering = column.desc() if sort_order == "desc" else column.asc()
    rows = (
        query.options(
            joinedload(Employee.designation),
            joinedload(Employee.role),
            joinedload(Employee.status_master),
        )
        .order_by(ordering, Employee.id.asc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    pagination = PaginationMeta.build(page=params.page, limit=params.limit, total=total)

    if minimal:
        return PaginatedResponse[EmployeeMinimalItem](
            data=[
                EmployeeMinimalItem(
                    id=e.id,
                    uid=e.uid,
                    employee_code=e.employee_code,
                    first_name=e.first_name,
                    last_name=e.last_name,
                    full_name=e.full_name,
                )
                for e in rows
            ],
            pagination=pagination,
        )

    active_base = db.query(Employee).filter(Employee.deleted_at.is_(None))
    return PaginatedResponse[EmployeeListItem](
        data=[to_list_item(e) for e in rows],
        pagination=pagination,
        meta={
            "totalActive": active_base.filter(Employee.status.is_(True)).count(),
            "totalInactive": active_base.filter(Employee.status.is_(False)).count(),
        },
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[EmployeeOut])
def create_employee(
    payload: EmployeeCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    email = payload.email.strip()
    if email_in_use(db, email):
        raise HTTPException(status_code=400, detail="An employee with this email already exists")

    for model, pk, label in (
        (Designation, payload.designation_master_id, "Designation"),
        (RoleMaster, payload.role_master_id, "Role"),
    ):
        if not db.get(model, pk):
            raise HTTPException(status_code=400, detail=f"{label} {pk} does not exist")
    if payload.status_master_id and not db.get(StatusMaster, payload.status_master_id):
        raise HTTPException(status_code=400, detail=f"Status {payload.status_master_id} does not exist")

    employee = Employee(
        uid=f"employee_onboarding_{uuid.uuid4().hex}",
        employee_code=next_employee_code(db),
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        email=email,
        personal_email=payload.personal_email or None,
        phone_number=payload.phone_number or None,
        designation_master_id=payload.designation_master_id,
        role_master_id=payload.role_master_id,
        status_master_id=payload.status_master_id,
        doj=payload.doj or date.today(),
        dob=payload.date_of_birth,
        employee_type=payload.employee_type or None,
        department=payload.department,
        nationality=payload.nationality or None,
        visa_type=payload.visa_type or None,
        temp_address=payload.current_address or None,
        permanent_address=payload.permanent_address or None,
        employee_photo=payload.employee_photo or None,
        status=True,
    )
    db.add(employee)
    try:
        db.flush()
    except IntegrityError as exc:
        logger.warning("Employee create rejected by the database: %s", exc.orig)
        raise HTTPException(status_code=400, detail="Employee code or email is already in use")
    db.refresh(employee)

    logger.info("Employee %s created (%s)", employee.id, employee.employee_code)
    set_etag(response, employee)
    return ApiResponse[EmployeeOut](
        code=201,
        data=EmployeeOut.model_validate(employee),
        message="Employee created successfully",
    )


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeDetailOut])
def get_employee(
    employee_id: str,
    response: Response,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Employee aggregate: scalar fields, master names and every child collection.
    """
    emp_id = parse_employee_id(employee_id)
    employee = _get_employee_or_404(db, emp_id)

    detail = build_employee_detail(session_factory, employee)
    set_etag(response, employee)
    return ApiResponse[EmployeeDetailOut](data=detail)


@router.put("/{employee_id}", response_model=ApiResponse[EmployeeOut])
def update_employee(
    employee_id: str,
    patch: EmployeePatch,
    response: Response,
    db: Session = Depends(get_db),
    if_match: str | None = Header(default=None, alias="If-Match"),
):
    """
    Merge allow-listed fields onto the employee and reconcile submitted child
    collections, all in the request transaction.

    If-Match is optional; when sent it must equal the current version.
    """
    emp_id = parse_employee_id(employee_id)
    expected_version = parse_if_match(if_match)

    employee = _get_employee_or_404(db, emp_id, for_update=True)
    check_version(employee, expected_version)

    if "email" in patch.model_fields_set:
        assert_email_available(db, employee, patch.email)

    try:
        changed = apply_employee_patch(employee, patch)
        results = sync_employee_children(db, employee.id, patch)
        flush_versioned(db, employee)
    except IntegrityError as exc:
        logger.warning("Employee %s update rejected by the database: %s", emp_id, exc.orig)
        raise HTTPException(status_code=400, detail="Update references a missing or duplicate value")

    logger.info(
        "Employee %s updated: fields=%s children=%s version=%s",
        employee.id,
        changed,
        {k: vars(v) for k, v in results.items()},
        employee.version,
    )
    set_etag(response, employee)
    return ApiResponse[EmployeeOut](
        data=EmployeeOut.model_validate(employee),
        message="Employee updated successfully",
    )


@router.delete("/{employee_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
def delete_employee(employee_id: str, db: Session = Depends(get_db)):
    """Soft delete: the row stays, is marked deleted and set inactive."""
    emp_id = parse_employee_id(employee_id)
    employee = _get_employee_or_404(db, emp_id, for_update=True)

    now = datetime.utcnow()
    employee.deleted_at = now
    employee.status = False
    employee.updated_at = now
    db.flush()

    logger.info("Employee %s soft-deleted", employee.id)
    return ApiResponse[None](message="Employee deleted successfully")


@router.delete(
    "/{employee_id}/{collection}/{record_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
def delete_employee_record(
    employee_id: str,
    collection: str,
    record_id: int,
    db: Session = Depends(get_db),
):
    """Soft delete one child record (bank, family, salary, ...) of an employee."""
    emp_id = parse_employee_id(employee_id)
    child = COLLECTIONS_BY_PATH.get(collection)
    if child is None:
        raise HTTPException(status_code=404, detail=f"Unknown record collection '{collection}'")

    _get_employee_or_404(db, emp_id)
    soft_delete_child_record(db, emp_id, child, record_id)
    db.flush()

    logger.info("Employee %s: %s %s soft-deleted", emp_id, collection, record_id)
    return ApiResponse[None](message=f"{child.label} deleted successfully")
