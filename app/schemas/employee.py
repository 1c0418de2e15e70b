from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.fields import Amount, Flag, OptionalDate, OptionalId


# ---------- child records: output ----------

class _RecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class EmergencyContactOut(_RecordOut):
    id: int
    name: str
    relationship: str | None
    contact_number: str | None


class FamilyMemberOut(_RecordOut):
    id: int
    name: str
    relationship: str | None
    dob: date | None
    contact_number: str | None


class EducationOut(_RecordOut):
    id: int
    institution: str
    subject: str | None
    degree: str | None
    grade: str | None
    start_date: date | None
    end_date: date | None


class ExperienceOut(_RecordOut):
    id: int
    company_name: str
    location: str | None
    job_position: str | None
    start_date: date | None
    end_date: date | None


class DocumentOut(_RecordOut):
    id: int
    document_master_id: int | None
    document_type_name: str | None = Field(default=None, alias="documentTypeName")
    document_number: str | None
    upload_document: str | None
    upload_name: str | None
    start_date: date | None
    end_date: date | None


class BankDetailOut(_RecordOut):
    id: int
    bank_name: str
    bank_account_number: str | None
    recipient_name: str | None
    bank_address: str | None
    bank_swift_code: str | None
    bank_iban_number: str | None


class SalaryLineOut(_RecordOut):
    id: int
    allowance_type_id: int
    allowance_type_name: str | None = Field(default=None, alias="allowanceTypeName")
    allowance_amount: float
    allowance_currency: int | None


class ConsentFormOut(_RecordOut):
    id: int
    consent_form_id: int
    form_name: str | None = Field(default=None, alias="formName")
    form_link: str | None = Field(default=None, alias="formLink")
    sign: bool
    sign_date: date | None


# ---------- employee: output ----------

class EmployeeOut(_RecordOut):
    """Parent record as stored (no child collections)."""
    id: int
    uid: str
    employee_code: str | None
    employee_photo: str | None
    first_name: str
    last_name: str
    email: str
    personal_email: str | None
    phone_number: str | None
    dob: date | None
    doj: date | None
    permanent_address: str | None
    temp_address: str | None
    status: bool
    visa_type: str | None
    employee_type: str | None
    engagement_method: str | None
    nationality: str | None
    department: int | None
    reporting_to: str | None
    vendor_id: int | None
    designation_master_id: int | None
    role_master_id: int | None
    status_master_id: int | None
    created_at: datetime
    updated_at: datetime
    version: int


class EmployeeDetailOut(EmployeeOut):
    """Employee aggregate: parent fields, master names and child collections."""
    designation_name: str | None = Field(default=None, alias="designationName")
    role_name: str | None = Field(default=None, alias="roleName")
    status_name: str | None = Field(default=None, alias="statusName")

    emergency_contacts: list[EmergencyContactOut] = Field(default_factory=list, alias="emergencyContacts")
    family_info: list[FamilyMemberOut] = Field(default_factory=list, alias="familyInfo")
    education: list[EducationOut] = Field(default_factory=list)
    experience: list[ExperienceOut] = Field(default_factory=list)
    documents: list[DocumentOut] = Field(default_factory=list)
    bank_details: list[BankDetailOut] = Field(default_factory=list, alias="bankDetails")
    salary_details: list[SalaryLineOut] = Field(default_factory=list, alias="salaryDetails")
    consent_forms: list[ConsentFormOut] = Field(default_factory=list, alias="consentForms")


class EmployeeListItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    uid: str
    employee_code: str | None
    first_name: str
    last_name: str
    full_name: str
    employee_photo: str | None = None
    email: str | None = None
    phone_number: str | None = None
    doj: date | None = None
    visa_type: str | None = None
    status: bool | None = None
    created_at: datetime | None = None
    designation_id: int | None = None
    designation_name: str | None = None
    role_id: int | None = None
    role_name: str | None = None
    status_master_id: int | None = None
    status_name: str | None = None


class EmployeeMinimalItem(BaseModel):
    """Lightweight row for dropdowns"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    uid: str
    employee_code: str | None
    first_name: str
    last_name: str
    full_name: str


# ---------- child records: input ----------

class ChildRecordIn(BaseModel):
    """
    One submitted child item.

      id present             -> update that row (submitted fields only)
      id absent + CREATE_KEY -> create a row for the employee
      otherwise              -> left alone
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    CREATE_KEY: ClassVar[str]
    # request key -> column name, for the few keys that differ
    COLUMN_NAMES: ClassVar[dict[str, str]] = {}
    # when set, an item with an id but no CREATE_KEY value is skipped
    UPDATE_NEEDS_CREATE_KEY: ClassVar[bool] = False

    id: OptionalId = None

    def column_values(self) -> dict[str, Any]:
        return {
            self.COLUMN_NAMES.get(k, k): getattr(self, k)
            for k in self.model_fields_set
            if k != "id"
        }

    def can_create(self) -> bool:
        return bool(getattr(self, self.CREATE_KEY))

    def can_update(self) -> bool:
        return self.id is not None and (not self.UPDATE_NEEDS_CREATE_KEY or self.can_create())


class EmergencyContactIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "name"

    name: str | None = None
    relationship: str | None = None
    contact_number: str | None = None


class FamilyMemberIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "name"

    name: str | None = None
    relationship: str | None = None
    dob: OptionalDate = None
    contact_number: str | None = None


class EducationIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "institution"

    institution: str | None = None
    subject: str | None = None
    degree: str | None = None
    grade: str | None = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None


class ExperienceIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "company_name"

    company_name: str | None = None
    location: str | None = None
    job_position: str | None = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None


class DocumentIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "document_master_id"

    document_master_id: OptionalId = None
    document_number: str | None = None
    upload_document: str | None = None
    upload_name: str | None = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None


class BankDetailIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "bank_name"

    bank_name: str | None = None
    bank_account_number: str | None = None
    recipient_name: str | None = None
    bank_address: str | None = None
    bank_swift_code: str | None = None
    bank_iban_number: str | None = None


class SalaryLineIn(ChildRecordIn):
    CREATE_KEY: ClassVar[str] = "allowance_type_id"
    UPDATE_NEEDS_CREATE_KEY: ClassVar[bool] = True
    COLUMN_NAMES: ClassVar[dict[str, str]] = {
        "allowance_amount": "amount",
        "allowance_currency": "currency_id",
    }

    allowance_type_id: OptionalId = None
    allowance_amount: Amount = Decimal("0")
    allowance_currency: OptionalId = None


# ---------- employee: input ----------

class EmployeeCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=320)
    designation_master_id: int
    role_master_id: int

    personal_email: str | None = None
    phone_number: str | None = None
    doj: OptionalDate = None
    date_of_birth: OptionalDate = None
    employee_type: str | None = None
    department: OptionalId = None
    nationality: str | None = None
    visa_type: str | None = None
    current_address: str | None = None
    permanent_address: str | None = None
    status_master_id: OptionalId = None
    employee_photo: str | None = None


# Applied in this order; later keys win when two map to the same column
# (date_of_birth over dob, temp_address over current_address).
PATCH_FIELD_ORDER = (
    "first_name", "last_name", "email", "personal_email", "phone_number",
    "dob", "doj", "date_of_birth", "employee_type", "nationality", "visa_type",
    "role_master_id", "designation_master_id", "department", "status",
    "permanent_address", "current_address", "temp_address", "employee_photo",
    "engagement_method", "status_master_id", "employee_code", "vendor_id",
    "reporting_to",
)

# Request key -> column, where they differ
PATCH_COLUMN_ALIASES = {
    "date_of_birth": "dob",
    "current_address": "temp_address",
}


class EmployeePatch(BaseModel):
    """
    Partial employee update. Keys outside the allow-list (id, uid,
    created_at, version, ...) are dropped while parsing.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    personal_email: str | None = None
    phone_number: str | None = None
    dob: OptionalDate = None
    doj: OptionalDate = None
    date_of_birth: OptionalDate = None
    employee_type: str | None = None
    nationality: str | None = None
    visa_type: str | None = None
    role_master_id: OptionalId = None
    designation_master_id: OptionalId = None
    department: OptionalId = None
    status: Flag = False
    permanent_address: str | None = None
    current_address: str | None = None
    temp_address: str | None = None
    employee_photo: str | None = None
    engagement_method: str | None = None
    status_master_id: OptionalId = None
    employee_code: str | None = None
    vendor_id: OptionalId = None
    reporting_to: str | None = None

    bank_details: list[BankDetailIn] | None = Field(default=None, alias="bankDetails")
    emergency_contacts: list[EmergencyContactIn] | None = Field(default=None, alias="emergencyContacts")
    family_info: list[FamilyMemberIn] | None = Field(default=None, alias="familyInfo")
    documents: list[DocumentIn] | None = None
    experience: list[ExperienceIn] | None = None
    education: list[EducationIn] | None = None
    salary_details: list[SalaryLineIn] | None = Field(default=None, alias="salaryDetails")

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def _required_columns_not_null(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            raise ValueError("may not be empty")
        return v.strip()

    @field_validator("bank_details", mode="before")
    @classmethod
    def _single_bank_record(cls, v: Any) -> Any:
        # Forms post a single bank object; lists are accepted too
        if isinstance(v, dict):
            return [v]
        return v

    def column_updates(self) -> dict[str, Any]:
        """Submitted scalar fields mapped to column names, in allow-list order."""
        out: dict[str, Any] = {}
        for key in PATCH_FIELD_ORDER:
            if key in self.model_fields_set:
                out[PATCH_COLUMN_ALIASES.get(key, key)] = getattr(self, key)
        return out
