from pydantic import BaseModel, ConfigDict


class _MasterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int


class DesignationOut(_MasterOut):
    designation_name: str


class RoleOut(_MasterOut):
    role_name: str


class StatusOut(_MasterOut):
    status: str


class AllowanceTypeOut(_MasterOut):
    allowance_type: str
    status: bool


class DocumentTypeOut(_MasterOut):
    document_type_name: str


class ConsentFormMasterOut(_MasterOut):
    form_name: str
    upload_document: str | None = None


class LeaveTypeOut(_MasterOut):
    leave_type: str
    max_leave_count: int
    status: bool
