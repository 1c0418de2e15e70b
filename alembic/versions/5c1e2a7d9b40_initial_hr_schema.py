"""initial hr schema

Revision ID: 5c1e2a7d9b40
Revises:
Create Date: 2026-10-18 09:12:44.201377
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "5c1e2a7d9b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CHILD_TABLES = (
    "employee_consent_forms",
    "employee_salary_details",
    "employee_bank_details",
    "employee_onboard_documents",
    "employee_experience",
    "employee_education_details",
    "employee_family_info",
    "employee_emergency_contacts",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def _owned_table(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "employee_onboarding_id",
            sa.Integer(),
            sa.ForeignKey("employee_onboarding.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *columns,
        *_timestamps(),
    )
    op.create_index(f"ix_{name}_employee_onboarding_id", name, ["employee_onboarding_id"])


def _master_table(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *columns,
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )


def upgrade() -> None:
    # Lookup tables
    _master_table("designation_master", sa.Column("designation_name", sa.String(150), nullable=False))
    _master_table("role_master", sa.Column("role_name", sa.String(100), nullable=False))
    _master_table("status_master", sa.Column("status", sa.String(100), nullable=False))
    _master_table(
        "allowance_type_master",
        sa.Column("allowance_type", sa.String(150), nullable=False),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    _master_table("employee_document_master", sa.Column("document_type_name", sa.String(150), nullable=False))
    _master_table(
        "form_master",
        sa.Column("form_name", sa.String(200), nullable=False),
        sa.Column("upload_document", sa.String(500), nullable=True),
    )
    _master_table(
        "leave_master",
        sa.Column("leave_type", sa.String(100), nullable=False),
        sa.Column("max_leave_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "employee_onboarding",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uid", sa.String(64), nullable=False, unique=True),
        sa.Column("employee_code", sa.String(20), nullable=True),
        sa.Column("employee_photo", sa.String(500), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("personal_email", sa.String(320), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("doj", sa.Date(), nullable=True),
        sa.Column("permanent_address", sa.Text(), nullable=True),
        sa.Column("temp_address", sa.Text(), nullable=True),
        sa.Column("employee_type", sa.String(50), nullable=True),
        sa.Column("engagement_method", sa.String(50), nullable=True),
        sa.Column("nationality", sa.String(100), nullable=True),
        sa.Column("visa_type", sa.String(100), nullable=True),
        sa.Column("department", sa.Integer(), nullable=True),
        sa.Column("reporting_to", sa.String(64), nullable=True),
        sa.Column("vendor_id", sa.Integer(), nullable=True),
        sa.Column(
            "designation_master_id",
            sa.Integer(),
            sa.ForeignKey("designation_master.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("role_master_id", sa.Integer(), sa.ForeignKey("role_master.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "status_master_id",
            sa.Integer(),
            sa.ForeignKey("status_master.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index("ix_employee_onboarding_employee_code", "employee_onboarding", ["employee_code"], unique=True)
    op.create_index("ix_employee_onboarding_email", "employee_onboarding", ["email"])

    _owned_table(
        "employee_emergency_contacts",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("relationship", sa.String(100), nullable=True),
        sa.Column("contact_number", sa.String(50), nullable=True),
    )
    _owned_table(
        "employee_family_info",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("relationship", sa.String(100), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("contact_number", sa.String(50), nullable=True),
    )
    _owned_table(
        "employee_education_details",
        sa.Column("institution", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("degree", sa.String(255), nullable=True),
        sa.Column("grade", sa.String(50), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
    )
    _owned_table(
        "employee_experience",
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("job_position", sa.String(255), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
    )
    _owned_table(
        "employee_onboard_documents",
        sa.Column(
            "document_master_id",
            sa.Integer(),
            sa.ForeignKey("employee_document_master.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("document_number", sa.String(100), nullable=True),
        sa.Column("upload_document", sa.String(500), nullable=True),
        sa.Column("upload_name", sa.String(255), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
    )
    _owned_table(
        "employee_bank_details",
        sa.Column("bank_name", sa.String(200), nullable=False),
        sa.Column("bank_account_number", sa.String(64), nullable=True),
        sa.Column("recipient_name", sa.String(200), nullable=True),
        sa.Column("bank_address", sa.Text(), nullable=True),
        sa.Column("bank_swift_code", sa.String(20), nullable=True),
        sa.Column("bank_iban_number", sa.String(64), nullable=True),
    )
    _owned_table(
        "employee_salary_details",
        sa.Column(
            "allowance_type_id",
            sa.Integer(),
            sa.ForeignKey("allowance_type_master.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("currency_id", sa.Integer(), nullable=True),
    )
    _owned_table(
        "employee_consent_forms",
        sa.Column(
            "consent_form_id",
            sa.Integer(),
            sa.ForeignKey("form_master.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("sign", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sign_date", sa.Date(), nullable=True),
    )

    op.create_table(
        "apply_leave",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "employee_onboarding_id",
            sa.Integer(),
            sa.ForeignKey("employee_onboarding.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("leave_type_id", sa.Integer(), sa.ForeignKey("leave_master.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("from_date", sa.Date(), nullable=False),
        sa.Column("to_date", sa.Date(), nullable=False),
        sa.Column("number_of_days", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status_id", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("reason_of_cancellation", sa.Text(), nullable=True),
        sa.Column("file_upload", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.CheckConstraint("status_id IN (1, 2, 4, 26, 27)", name="ck_apply_leave_status"),
        sa.CheckConstraint("from_date <= to_date", name="ck_apply_leave_dates"),
    )
    op.create_index("ix_apply_leave_employee_status", "apply_leave", ["employee_onboarding_id", "status_id"])


def downgrade() -> None:
    op.drop_index("ix_apply_leave_employee_status", table_name="apply_leave")
    op.drop_table("apply_leave")

    for name in CHILD_TABLES:
        op.drop_index(f"ix_{name}_employee_onboarding_id", table_name=name)
        op.drop_table(name)

    op.drop_index("ix_employee_onboarding_email", table_name="employee_onboarding")
    op.drop_index("ix_employee_onboarding_employee_code", table_name="employee_onboarding")
    op.drop_table("employee_onboarding")

    for name in (
        "leave_master",
        "form_master",
        "employee_document_master",
        "allowance_type_master",
        "status_master",
        "role_master",
        "designation_master",
    ):
        op.drop_table(name)
