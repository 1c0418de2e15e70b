from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from sqlalchemy import event
from sqlalchemy.orm import Session

from app.core.leave_workflow import LeaveStatus
from app.db.session import engine
from app.models.employee import Employee
from app.models.employee_records import (
    BankDetail,
    ConsentForm,
    EmergencyContact,
    EmployeeDocument,
    FamilyMember,
    SalaryLine,
)
from app.models.leave import LeaveApplication
from app.models.masters import (
    AllowanceType,
    ConsentFormMaster,
    Designation,
    DocumentType,
    LeaveType,
    RoleMaster,
    StatusMaster,
)


def _save(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def fresh(db: Session, model, pk):
    """Re-read a row after the API changed it."""
    db.expire_all()
    return db.get(model, pk)


@contextmanager
def count_selects():
    """Collect the SELECT statements the engine runs inside the block."""
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _record)


# ---------- masters ----------

def create_designation(db, name="Software Engineer") -> Designation:
    return _save(db, Designation(designation_name=name))


def create_role(db, name="Employee") -> RoleMaster:
    return _save(db, RoleMaster(role_name=name))


def create_status(db, name="Active") -> StatusMaster:
    return _save(db, StatusMaster(status=name))


def create_allowance_type(db, name="Basic") -> AllowanceType:
    return _save(db, AllowanceType(allowance_type=name, status=True))


def create_document_type(db, name="Passport") -> DocumentType:
    return _save(db, DocumentType(document_type_name=name))


def create_consent_form_master(db, name="Code of Conduct", link="forms/coc.pdf") -> ConsentFormMaster:
    return _save(db, ConsentFormMaster(form_name=name, upload_document=link))


def create_leave_type(db, name="Annual Leave", max_leave_count=30, status=True) -> LeaveType:
    return _save(db, LeaveType(leave_type=name, max_leave_count=max_leave_count, status=status))


# ---------- employees ----------

def create_employee(
    db,
    first_name="Jane",
    last_name="Doe",
    email: str | None = None,
    employee_code: str | None = None,
    designation: Designation | None = None,
    role: RoleMaster | None = None,
    status=True,
    **extra,
) -> Employee:
    email = email or f"{first_name}.{last_name}@example.com".lower()
    e = Employee(
        uid=f"employee_onboarding_{email}",
        employee_code=employee_code,
        first_name=first_name,
        last_name=last_name,
        email=email,
        designation_master_id=designation.id if designation else None,
        role_master_id=role.id if role else None,
        status=status,
        **extra,
    )
    return _save(db, e)


def add_emergency_contact(db, employee, name="Sam Doe", relationship="Spouse", contact_number="111") -> EmergencyContact:
    return _save(
        db,
        EmergencyContact(
            employee_onboarding_id=employee.id,
            name=name,
            relationship=relationship,
            contact_number=contact_number,
        ),
    )


def add_family_member(db, employee, name="Ana Doe", relationship="Daughter") -> FamilyMember:
    return _save(db, FamilyMember(employee_onboarding_id=employee.id, name=name, relationship=relationship))


def add_bank_detail(db, employee, bank_name="Emirates NBD", **extra) -> BankDetail:
    return _save(db, BankDetail(employee_onboarding_id=employee.id, bank_name=bank_name, **extra))


def add_document(db, employee, document_type: DocumentType, number="P1234567") -> EmployeeDocument:
    return _save(
        db,
        EmployeeDocument(
            employee_onboarding_id=employee.id,
            document_master_id=document_type.id,
            document_number=number,
        ),
    )


def add_salary_line(db, employee, allowance_type: AllowanceType, amount="1000.00") -> SalaryLine:
    return _save(
        db,
        SalaryLine(
            employee_onboarding_id=employee.id,
            allowance_type_id=allowance_type.id,
            amount=Decimal(amount),
        ),
    )


def add_consent_form(db, employee, form: ConsentFormMaster, sign=True) -> ConsentForm:
    return _save(
        db,
        ConsentForm(
            employee_onboarding_id=employee.id,
            consent_form_id=form.id,
            sign=sign,
            sign_date=date(2026, 1, 5) if sign else None,
        ),
    )


# ---------- leave ----------

def create_leave(
    db,
    employee: Employee,
    leave_type: LeaveType,
    from_date=date(2026, 3, 2),
    to_date=date(2026, 3, 4),
    days: int | None = None,
    status_id: int = LeaveStatus.PENDING,
    is_active=True,
    **extra,
) -> LeaveApplication:
    leave = LeaveApplication(
        employee_onboarding_id=employee.id,
        leave_type_id=leave_type.id,
        from_date=from_date,
        to_date=to_date,
        number_of_days=days or (to_date - from_date).days + 1,
        description="Family trip",
        status_id=int(status_id),
        is_active=is_active,
        **extra,
    )
    return _save(db, leave)
