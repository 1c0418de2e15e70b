"""
Employee aggregate writes: allow-listed parent merge plus per-collection
reconciliation of submitted child items.

Each submitted item is reconciled on its own:
  update - the item carries an id; only the submitted fields change and the
           row must belong to this employee
  create - no id and the collection's required field is present
  leave  - anything not submitted, and items with neither, stay untouched

Deletions never happen here; they go through the per-record delete route.
Callers run everything inside the request transaction, so a failure part
way through leaves nothing half-applied.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.employee import Employee
from app.models.employee_records import (
    BankDetail,
    EducationRecord,
    EmergencyContact,
    EmployeeDocument,
    ExperienceRecord,
    FamilyMember,
    SalaryLine,
)
from app.schemas.employee import ChildRecordIn, EmployeePatch


@dataclass(frozen=True)
class ChildCollection:
    attr: str     # EmployeePatch attribute
    path: str     # URL segment for the per-record delete route
    model: type
    label: str


CHILD_COLLECTIONS: tuple[ChildCollection, ...] = (
    ChildCollection("bank_details", "bank", BankDetail, "Bank detail"),
    ChildCollection("emergency_contacts", "emergency-contacts", EmergencyContact, "Emergency contact"),
    ChildCollection("family_info", "family", FamilyMember, "Family member"),
    ChildCollection("documents", "documents", EmployeeDocument, "Document"),
    ChildCollection("experience", "experience", ExperienceRecord, "Experience record"),
    ChildCollection("education", "education", EducationRecord, "Education record"),
    ChildCollection("salary_details", "salary", SalaryLine, "Salary line"),
)

COLLECTIONS_BY_PATH = {c.path: c for c in CHILD_COLLECTIONS}


@dataclass
class SyncResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0


def get_active_employee(db: Session, employee_id: int, *, for_update: bool = False) -> Employee | None:
    q = db.query(Employee).filter(Employee.id == employee_id, Employee.deleted_at.is_(None))
    if for_update:
        q = q.with_for_update()
    return q.one_or_none()


def email_in_use(db: Session, email: str, *, exclude_id: int | None = None) -> bool:
    q = db.query(Employee.id).filter(Employee.email == email, Employee.deleted_at.is_(None))
    if exclude_id is not None:
        q = q.filter(Employee.id != exclude_id)
    return q.first() is not None


def assert_email_available(db: Session, employee: Employee, email: str | None) -> None:
    if email and email != employee.email and email_in_use(db, email, exclude_id=employee.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")


def apply_employee_patch(employee: Employee, patch: EmployeePatch) -> list[str]:
    """Copy submitted allow-listed fields onto the row. Returns changed columns."""
    updates = patch.column_updates()
    for column, value in updates.items():
        setattr(employee, column, value)
    employee.updated_at = datetime.utcnow()
    return sorted(updates)


def _apply_item(row, item: ChildRecordIn) -> None:
    columns = row.__table__.c
    for column, value in item.column_values().items():
        # A null for a NOT NULL column means "not provided"
        if value is None and not columns[column].nullable:
            continue
        setattr(row, column, value)
    row.updated_at = datetime.utcnow()


def sync_child_records(
    db: Session,
    employee_id: int,
    collection: ChildCollection,
    items: list[ChildRecordIn],
) -> SyncResult:
    model = collection.model
    result = SyncResult()

    for item in items:
        if item.id is not None:
            if not item.can_update():
                result.skipped += 1
                continue
            row = (
                db.query(model)
                .filter(
                    model.id == item.id,
                    model.employee_onboarding_id == employee_id,
                    model.deleted_at.is_(None),
                )
                .one_or_none()
            )
            if row is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"{collection.label} {item.id} not found for this employee",
                )
            _apply_item(row, item)
            result.updated += 1
        elif item.can_create():
            db.add(model(employee_onboarding_id=employee_id, **item.column_values()))
            result.created += 1
        else:
            result.skipped += 1

    return result


def sync_employee_children(db: Session, employee_id: int, patch: EmployeePatch) -> dict[str, SyncResult]:
    """Reconcile every collection present in the patch, in a fixed order."""
    results: dict[str, SyncResult] = {}
    for collection in CHILD_COLLECTIONS:
        items = getattr(patch, collection.attr)
        if items is None:
            continue
        results[collection.attr] = sync_child_records(db, employee_id, collection, items)
    db.flush()
    return results


def soft_delete_child_record(db: Session, employee_id: int, collection: ChildCollection, record_id: int) -> None:
    model = collection.model
    row = (
        db.query(model)
        .filter(
            model.id == record_id,
            model.employee_onboarding_id == employee_id,
            model.deleted_at.is_(None),
        )
        .one_or_none()
    )
    if row is None:
        raise HTTPException(status_code=404, detail=f"{collection.label} not found")
    row.deleted_at = datetime.utcnow()
    row.updated_at = datetime.utcnow()
