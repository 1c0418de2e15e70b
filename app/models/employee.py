from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, SoftDeleteMixin, TimestampMixin


class Employee(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "employee_onboarding"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uid: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    employee_code: Mapped[str | None] = mapped_column(String(20), unique=True, index=True, nullable=True)
    employee_photo: Mapped[str | None] = mapped_column(String(500), nullable=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Unique among non-deleted rows only; enforced in the API layer
    email: Mapped[str] = mapped_column(String(320), index=True, nullable=False)
    personal_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    doj: Mapped[date | None] = mapped_column(Date, nullable=True)

    permanent_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Written through the legacy `current_address` request key as well
    temp_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    employee_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    engagement_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    visa_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reporting_to: Mapped[str | None] = mapped_column(String(64), nullable=True)
    vendor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    designation_master_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("designation_master.id", ondelete="SET NULL"), nullable=True
    )
    role_master_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("role_master.id", ondelete="SET NULL"), nullable=True
    )
    status_master_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("status_master.id", ondelete="SET NULL"), nullable=True
    )

    # Active / Inactive flag, forced to False on soft delete
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Optimistic locking
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    designation = relationship("Designation")
    role = relationship("RoleMaster")
    status_master = relationship("StatusMaster")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
