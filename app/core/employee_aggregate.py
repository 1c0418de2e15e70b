"""
Employee detail read: one parent row plus every child collection.

The child collections are independent, so they are fetched concurrently on a
small thread pool, each loader on its own session. A loader that raises is
logged and contributes an empty list; it never fails the whole read.

Allowance type names for salary lines are resolved through an in-memory
{allowance_type_id: name} map built from the allowance master fetch rather
than a join, so the salary loader stays a single-table query.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.models.employee import Employee
from app.models.employee_records import (
    BankDetail,
    ConsentForm,
    EducationRecord,
    EmergencyContact,
    EmployeeDocument,
    ExperienceRecord,
    FamilyMember,
    SalaryLine,
)
from app.models.masters import AllowanceType, ConsentFormMaster, DocumentType
from app.schemas.employee import (
    BankDetailOut,
    ConsentFormOut,
    DocumentOut,
    EducationOut,
    EmergencyContactOut,
    EmployeeDetailOut,
    EmployeeOut,
    ExperienceOut,
    FamilyMemberOut,
    SalaryLineOut,
)

logger = logging.getLogger(__name__)

Loader = Callable[[Session, int], list]


def _owned_rows(db: Session, model, employee_id: int) -> list:
    return (
        db.query(model)
        .filter(model.employee_onboarding_id == employee_id, model.deleted_at.is_(None))
        .order_by(model.id.asc())
        .all()
    )


def load_emergency_contacts(db: Session, employee_id: int) -> list[EmergencyContactOut]:
    return [EmergencyContactOut.model_validate(r) for r in _owned_rows(db, EmergencyContact, employee_id)]


def load_family_info(db: Session, employee_id: int) -> list[FamilyMemberOut]:
    return [FamilyMemberOut.model_validate(r) for r in _owned_rows(db, FamilyMember, employee_id)]


def load_education(db: Session, employee_id: int) -> list[EducationOut]:
    return [EducationOut.model_validate(r) for r in _owned_rows(db, EducationRecord, employee_id)]


def load_experience(db: Session, employee_id: int) -> list[ExperienceOut]:
    return [ExperienceOut.model_validate(r) for r in _owned_rows(db, ExperienceRecord, employee_id)]


def load_bank_details(db: Session, employee_id: int) -> list[BankDetailOut]:
    return [BankDetailOut.model_validate(r) for r in _owned_rows(db, BankDetail, employee_id)]


def load_documents(db: Session, employee_id: int) -> list[DocumentOut]:
    rows = (
        db.query(EmployeeDocument, DocumentType.document_type_name)
        .outerjoin(DocumentType, DocumentType.id == EmployeeDocument.document_master_id)
        .filter(
            EmployeeDocument.employee_onboarding_id == employee_id,
            EmployeeDocument.deleted_at.is_(None),
        )
        .order_by(EmployeeDocument.id.asc())
        .all()
    )
    return [
        DocumentOut.model_validate(doc).model_copy(update={"document_type_name": type_name})
        for doc, type_name in rows
    ]


def load_salary_details(db: Session, employee_id: int) -> list[SalaryLineOut]:
    # allowance_type_name is filled in later from the allowance master map
    return [
        SalaryLineOut(
            id=s.id,
            allowance_type_id=s.allowance_type_id,
            allowance_amount=float(s.amount or 0),
            allowance_currency=s.currency_id,
        )
        for s in _owned_rows(db, SalaryLine, employee_id)
    ]


def load_consent_forms(db: Session, employee_id: int) -> list[ConsentFormOut]:
    rows = (
        db.query(ConsentForm, ConsentFormMaster)
        .outerjoin(ConsentFormMaster, ConsentFormMaster.id == ConsentForm.consent_form_id)
        .filter(
            ConsentForm.employee_onboarding_id == employee_id,
            ConsentForm.deleted_at.is_(None),
        )
        .order_by(ConsentForm.id.asc())
        .all()
    )
    return [
        ConsentFormOut(
            id=c.id,
            consent_form_id=c.consent_form_id,
            form_name=form.form_name if form else None,
            form_link=form.upload_document if form else None,
            sign=c.sign,
            sign_date=c.sign_date,
        )
        for c, form in rows
    ]


def load_allowance_types(db: Session, employee_id: int) -> list[tuple[int, str]]:
    rows = (
        db.query(AllowanceType.id, AllowanceType.allowance_type)
        .filter(AllowanceType.deleted_at.is_(None))
        .all()
    )
    return [(r[0], r[1]) for r in rows]


# Output key -> loader. Looked up at call time so a loader can be swapped out.
CHILD_LOADERS: dict[str, Loader] = {
    "emergency_contacts": load_emergency_contacts,
    "family_info": load_family_info,
    "education": load_education,
    "experience": load_experience,
    "documents": load_documents,
    "bank_details": load_bank_details,
    "salary_details": load_salary_details,
    "consent_forms": load_consent_forms,
    "allowance_types": load_allowance_types,
}


def _run_isolated(session_factory: sessionmaker, key: str, loader: Loader, employee_id: int) -> list:
    db = session_factory()
    try:
        return loader(db, employee_id)
    except Exception:
        logger.warning(
            "Employee %s: %s fetch failed, returning empty list",
            employee_id,
            key,
            exc_info=True,
        )
        return []
    finally:
        db.close()


def load_child_collections(session_factory: sessionmaker, employee_id: int) -> dict[str, list]:
    """Fan out every registered loader and collect results by key."""
    loaders = dict(CHILD_LOADERS)
    workers = max(1, min(settings.AGGREGATE_FANOUT_WORKERS, len(loaders)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="employee-fanout") as pool:
        futures = {
            key: pool.submit(_run_isolated, session_factory, key, loader, employee_id)
            for key, loader in loaders.items()
        }
    return {key: future.result() for key, future in futures.items()}


def resolve_allowance_names(
    salary_lines: list[SalaryLineOut],
    allowance_types: list[tuple[int, str]],
) -> list[SalaryLineOut]:
    names = dict(allowance_types)
    return [
        line.model_copy(update={"allowance_type_name": names.get(line.allowance_type_id)})
        for line in salary_lines
    ]


def build_employee_detail(session_factory: sessionmaker, employee: Employee) -> EmployeeDetailOut:
    children: dict[str, Any] = load_child_collections(session_factory, employee.id)
    allowance_types = children.pop("allowance_types", [])
    children["salary_details"] = resolve_allowance_names(
        children.get("salary_details", []), allowance_types
    )

    return EmployeeDetailOut(
        **EmployeeOut.model_validate(employee).model_dump(),
        designation_name=employee.designation.designation_name if employee.designation else None,
        role_name=employee.role.role_name if employee.role else None,
        status_name=employee.status_master.status if employee.status_master else None,
        **children,
    )
