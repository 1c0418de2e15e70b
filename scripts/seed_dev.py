# seed_dev.py
import uuid
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.leave_workflow import LeaveStatus
from app.db.session import SessionLocal
from app.models.employee import Employee
from app.models.employee_records import BankDetail, EmergencyContact, SalaryLine
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


# ---------- helpers: masters ----------

def get_or_create(db: Session, model, **values):
    row = db.query(model).filter_by(**values).first()
    if row:
        return row
    row = model(**values)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def seed_masters(db: Session) -> dict:
    designations = [
        get_or_create(db, Designation, designation_name=name)
        for name in ("Software Engineer", "HR Executive", "Accountant")
    ]
    roles = [get_or_create(db, RoleMaster, role_name=name) for name in ("Admin", "Manager", "Employee")]
    statuses = [get_or_create(db, StatusMaster, status=name) for name in ("Active", "On Notice", "Resigned")]
    allowances = [
        get_or_create(db, AllowanceType, allowance_type=name)
        for name in ("Basic", "Housing", "Transport")
    ]
    for name in ("Passport", "Visa", "Emirates ID"):
        get_or_create(db, DocumentType, document_type_name=name)
    get_or_create(db, ConsentFormMaster, form_name="Code of Conduct")
    leave_types = [
        get_or_create(db, LeaveType, leave_type="Annual Leave", max_leave_count=30),
        get_or_create(db, LeaveType, leave_type="Sick Leave", max_leave_count=15),
    ]
    return {
        "designations": designations,
        "roles": roles,
        "statuses": statuses,
        "allowances": allowances,
        "leave_types": leave_types,
    }


# ---------- helpers: employees ----------

def get_or_create_employee(db: Session, *, code: str, first_name: str, last_name: str, email: str, masters: dict) -> Employee:
    e = db.query(Employee).filter(Employee.employee_code == code).one_or_none()
    if e:
        return e

    e = Employee(
        uid=f"employee_onboarding_{uuid.uuid4().hex}",
        employee_code=code,
        first_name=first_name,
        last_name=last_name,
        email=email,
        doj=date.today() - timedelta(days=365),
        designation_master_id=masters["designations"][0].id,
        role_master_id=masters["roles"][2].id,
        status_master_id=masters["statuses"][0].id,
        status=True,
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def ensure_employee_records(db: Session, employee: Employee, masters: dict) -> None:
    has_contacts = (
        db.query(EmergencyContact.id)
        .filter(EmergencyContact.employee_onboarding_id == employee.id)
        .first()
    )
    if has_contacts:
        return

    db.add(EmergencyContact(employee_onboarding_id=employee.id, name="Sam Doe", relationship="Spouse", contact_number="+971500000000"))
    db.add(BankDetail(employee_onboarding_id=employee.id, bank_name="Emirates NBD", recipient_name=employee.full_name))
    basic, housing = masters["allowances"][:2]
    db.add(SalaryLine(employee_onboarding_id=employee.id, allowance_type_id=basic.id, amount=Decimal("12000.00")))
    db.add(SalaryLine(employee_onboarding_id=employee.id, allowance_type_id=housing.id, amount=Decimal("4000.00")))
    db.commit()


def ensure_pending_leave(db: Session, employee: Employee, leave_type: LeaveType) -> LeaveApplication:
    leave = (
        db.query(LeaveApplication)
        .filter(LeaveApplication.employee_onboarding_id == employee.id, LeaveApplication.deleted_at.is_(None))
        .first()
    )
    if leave:
        return leave

    start = date.today() + timedelta(days=14)
    leave = LeaveApplication(
        employee_onboarding_id=employee.id,
        leave_type_id=leave_type.id,
        from_date=start,
        to_date=start + timedelta(days=2),
        number_of_days=3,
        description="Family trip",
        status_id=LeaveStatus.PENDING,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)
    return leave


def main():
    db = SessionLocal()
    try:
        masters = seed_masters(db)

        jane = get_or_create_employee(
            db, code="EMP-00001", first_name="Jane", last_name="Doe", email="jane.doe@local.test", masters=masters
        )
        john = get_or_create_employee(
            db, code="EMP-00002", first_name="John", last_name="Smith", email="john.smith@local.test", masters=masters
        )
        ensure_employee_records(db, jane, masters)
        leave = ensure_pending_leave(db, john, masters["leave_types"][0])

        print("\n=== Dev seed complete ===")
        print("\nEmployees:")
        print(f"  jane: id={jane.id} code={jane.employee_code}")
        print(f"  john: id={john.id} code={john.employee_code}")

        print("\nLeave:")
        print(f"  leave_id: {leave.id} (status={LeaveStatus(leave.status_id).label})")

        print("\nNext API steps:")
        print(f"  GET  /employees/{jane.id}")
        print(f"  PUT  /employees/{jane.id} (If-Match: <version>)")
        print(f"  POST /leave/{leave.id}/approve  {{\"type\": 1}}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
