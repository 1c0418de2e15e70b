from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, SoftDeleteMixin, TimestampMixin


class EmployeeOwnedMixin(SoftDeleteMixin, TimestampMixin):
    """Columns shared by every record that hangs off an employee."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_onboarding_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("employee_onboarding.id", ondelete="CASCADE"), index=True, nullable=False
    )


class EmergencyContact(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_emergency_contacts"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contact_number: Mapped[str | None] = mapped_column(String(50), nullable=True)


class FamilyMember(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_family_info"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    contact_number: Mapped[str | None] = mapped_column(String(50), nullable=True)


class EducationRecord(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_education_details"

    institution: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    degree: Mapped[str | None] = mapped_column(String(255), nullable=True)
    grade: Mapped[str | None] = mapped_column(String(50), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class ExperienceRecord(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_experience"

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_position: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class EmployeeDocument(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_onboard_documents"

    document_master_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("employee_document_master.id", ondelete="SET NULL"), nullable=True
    )
    document_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Opaque storage reference; uploads are handled elsewhere
    upload_document: Mapped[str | None] = mapped_column(String(500), nullable=True)
    upload_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class BankDetail(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_bank_details"

    bank_name: Mapped[str] = mapped_column(String(200), nullable=False)
    bank_account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    recipient_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    bank_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    bank_swift_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    bank_iban_number: Mapped[str | None] = mapped_column(String(64), nullable=True)


class SalaryLine(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_salary_details"

    allowance_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("allowance_type_master.id", ondelete="RESTRICT"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    currency_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


class ConsentForm(EmployeeOwnedMixin, Base):
    __tablename__ = "employee_consent_forms"

    consent_form_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("form_master.id", ondelete="RESTRICT"), nullable=False
    )
    sign: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sign_date: Mapped[date | None] = mapped_column(Date, nullable=True)
