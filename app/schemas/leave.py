from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.schemas.fields import OptionalDate, OptionalId


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LeaveApplyRequest(_CamelModel):
    """
    Body of POST /leave. Keys are camelCase (snake_case accepted too).
    `noOfDays` is an older spelling of `numberOfDays`.
    """
    employee_id: int
    leave_type_id: int
    from_date: date
    to_date: date
    number_of_days: int | None = None
    no_of_days: int | None = None
    reason: str | None = None
    file_upload: str | None = None

    @model_validator(mode="after")
    def _check_range(self) -> "LeaveApplyRequest":
        if self.days is None:
            raise ValueError("numberOfDays is required")
        if self.days <= 0:
            raise ValueError("numberOfDays must be positive")
        if self.from_date > self.to_date:
            raise ValueError("fromDate must be on or before toDate")
        return self

    @property
    def days(self) -> int | None:
        return self.number_of_days or self.no_of_days


class LeaveUpdateRequest(_CamelModel):
    """Editable fields of a pending application. Omitted keys stay as they are."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    leave_type_id: OptionalId = None
    from_date: OptionalDate = None
    to_date: OptionalDate = None
    number_of_days: int | None = Field(default=None, gt=0)
    description: str | None = None
    file_upload: str | None = None

    def updates(self) -> dict:
        # blank ids / dates mean "not provided"
        return {
            k: getattr(self, k)
            for k in self.model_fields_set
            if getattr(self, k) is not None or k in ("description", "file_upload")
        }


class LeaveActionRequest(BaseModel):
    """Body of POST /leave/{id}/approve"""
    type: int
    reason: str | None = None

    @field_validator("reason")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return v.strip() if v else v


class LeaveOut(_CamelModel):
    id: int
    employee_id: int
    employee_name: str = "-"
    employee_code: str = "-"
    employee_photo: str | None = None
    designation: str = "-"
    leave_type: str = "-"
    leave_type_id: int
    from_date: date
    to_date: date
    number_of_days: int
    description: str | None = None
    status_id: int
    status_name: str
    file_upload: str | None = None
    reason_of_cancellation: str | None = None
    is_active: bool = True
    created_at: datetime
    version: int


class LeaveBalanceOut(_CamelModel):
    leave_type_id: int
    leave_type_name: str
    allocated: int
    used: int
    pending: int
    remaining: int
