from datetime import date

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, SoftDeleteMixin, TimestampMixin


class LeaveApplication(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "apply_leave"
    __table_args__ = (
        # Pending, Approved, Rejected, Request For Cancellation, Cancelled
        CheckConstraint(
            "status_id IN (1, 2, 4, 26, 27)",
            name="ck_apply_leave_status",
        ),
        CheckConstraint("from_date <= to_date", name="ck_apply_leave_dates"),
        Index("ix_apply_leave_employee_status", "employee_onboarding_id", "status_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    employee_onboarding_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("employee_onboarding.id", ondelete="CASCADE"), nullable=False
    )
    leave_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("leave_master.id", ondelete="RESTRICT"), nullable=False
    )

    from_date: Mapped[date] = mapped_column(Date, nullable=False)
    to_date: Mapped[date] = mapped_column(Date, nullable=False)
    number_of_days: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    reason_of_cancellation: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_upload: Mapped[str | None] = mapped_column(String(500), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Optimistic locking
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}
