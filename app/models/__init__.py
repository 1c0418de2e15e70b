from app.models.employee import Employee
from app.models.employee_records import (
    BankDetail,
    ConsentForm,
    EducationRecord,
    EmergencyContact,
    EmployeeDocument,
    ExperienceRecord,
    FamilyMember,
    SalaryLine,
)
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

__all__ = [ "Employee", "BankDetail", "ConsentForm", "EducationRecord",
           "EmergencyContact", "EmployeeDocument", "ExperienceRecord",
           "FamilyMember", "SalaryLine", "LeaveApplication", "AllowanceType",
           "ConsentFormMaster", "Designation", "DocumentType", "LeaveType",
           "RoleMaster", "StatusMaster" ]
