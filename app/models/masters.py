from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, SoftDeleteMixin


class Designation(SoftDeleteMixin, Base):
    __tablename__ = "designation_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    designation_name: Mapped[str] = mapped_column(String(150), nullable=False)


class RoleMaster(SoftDeleteMixin, Base):
    __tablename__ = "role_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_name: Mapped[str] = mapped_column(String(100), nullable=False)


class StatusMaster(SoftDeleteMixin, Base):
    """Employee lifecycle statuses (Active, On notice, Resigned, ...)."""
    __tablename__ = "status_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status: Mapped[str] = mapped_column(String(100), nullable=False)


class AllowanceType(SoftDeleteMixin, Base):
    __tablename__ = "allowance_type_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    allowance_type: Mapped[str] = mapped_column(String(150), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class DocumentType(SoftDeleteMixin, Base):
    __tablename__ = "employee_document_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_type_name: Mapped[str] = mapped_column(String(150), nullable=False)


class ConsentFormMaster(SoftDeleteMixin, Base):
    __tablename__ = "form_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    form_name: Mapped[str] = mapped_column(String(200), nullable=False)
    upload_document: Mapped[str | None] = mapped_column(String(500), nullable=True)


class LeaveType(SoftDeleteMixin, Base):
    __tablename__ = "leave_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    leave_type: Mapped[str] = mapped_column(String(100), nullable=False)
    max_leave_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
