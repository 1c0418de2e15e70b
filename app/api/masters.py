from dataclasses import dataclass

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.masters import (
    AllowanceType,
    ConsentFormMaster,
    Designation,
    DocumentType,
    LeaveType,
    RoleMaster,
    StatusMaster,
)
from app.schemas.envelope import ApiResponse
from app.schemas.masters import (
    AllowanceTypeOut,
    ConsentFormMasterOut,
    DesignationOut,
    DocumentTypeOut,
    LeaveTypeOut,
    RoleOut,
    StatusOut,
)

router = APIRouter(prefix="/masters", tags=["masters"])


@dataclass(frozen=True)
class Master:
    model: type
    schema: type[BaseModel]
    name_column: str


MASTERS: dict[str, Master] = {
    "designations": Master(Designation, DesignationOut, "designation_name"),
    "roles": Master(RoleMaster, RoleOut, "role_name"),
    "statuses": Master(StatusMaster, StatusOut, "status"),
    "allowance-types": Master(AllowanceType, AllowanceTypeOut, "allowance_type"),
    "document-types": Master(DocumentType, DocumentTypeOut, "document_type_name"),
    "consent-forms": Master(ConsentFormMaster, ConsentFormMasterOut, "form_name"),
    "leave-types": Master(LeaveType, LeaveTypeOut, "leave_type"),
}


@router.get("/{master_type}", response_model=ApiResponse[list])
def list_master(
    master_type: str,
    search: str | None = Query(default=None, description="Match on the display name"),
    active_only: bool = Query(default=False, description="Hide inactive entries where the table has a status flag"),
    db: Session = Depends(get_db),
):
    """Non-deleted rows of one lookup table, ordered by display name."""
    master = MASTERS.get(master_type)
    if master is None:
        raise HTTPException(status_code=404, detail=f"Unknown master type '{master_type}'")

    model = master.model
    name = getattr(model, master.name_column)

    query = db.query(model).filter(model.deleted_at.is_(None))
    if search:
        query = query.filter(name.ilike(f"%{search.strip()}%"))
    # StatusMaster.status is the name itself, not a flag
    if active_only and master.name_column != "status" and hasattr(model, "status"):
        query = query.filter(model.status.is_(True))

    rows = query.order_by(name.asc(), model.id.asc()).all()
    return ApiResponse[list](data=[master.schema.model_validate(r).model_dump() for r in rows])
