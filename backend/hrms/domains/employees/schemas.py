from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from hrms.api.fields import Email, RequiredStr

Department = Literal["HR", "Engineering", "Marketing", "Sales", "Finance", "Operations", "Legal", "IT"]
Gender = Literal["male", "female", "other"]
EmploymentType = Literal["full-time", "part-time", "contract", "intern"]
WorkLocation = Literal["office", "remote", "hybrid"]
EmployeeStatus = Literal["active", "inactive", "terminated", "on-leave"]


class Address(BaseModel):
    street: RequiredStr
    city: RequiredStr
    state: RequiredStr
    zip_code: RequiredStr
    country: RequiredStr = "USA"


class EmergencyContact(BaseModel):
    name: RequiredStr
    relationship: RequiredStr
    phone: RequiredStr


class Documents(BaseModel):
    profile_picture: Optional[str] = None
    resume: Optional[str] = None
    id_proof: Optional[str] = None
    address_proof: Optional[str] = None
    contracts: list[str] = Field(default_factory=list)


class Salary(BaseModel):
    basic: Decimal = Field(..., ge=0)
    allowances: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)


class PersonalInfo(BaseModel):
    first_name: RequiredStr
    last_name: RequiredStr
    email: Email
    phone: str = Field(..., min_length=10, max_length=50)
    date_of_birth: date
    gender: Gender
    address: Address
    emergency_contact: EmergencyContact


class ProfessionalInfo(BaseModel):
    department: Department
    position: RequiredStr
    employment_type: EmploymentType = "full-time"
    start_date: date
    end_date: Optional[date] = None
    reporting_manager_id: Optional[int] = None
    work_location: WorkLocation = "office"
    salary: Salary


class EmployeeCreate(BaseModel):
    personal_info: PersonalInfo
    professional_info: ProfessionalInfo
    documents: Documents = Field(default_factory=Documents)
    status: EmployeeStatus = "active"
    employee_code: Optional[str] = Field(default=None, max_length=20)
    create_user_account: bool = True

    @field_validator("employee_code")
    @classmethod
    def upper_code(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value else None


class PersonalInfoUpdate(BaseModel):
    first_name: Optional[RequiredStr] = None
    last_name: Optional[RequiredStr] = None
    email: Optional[Email] = None
    phone: Optional[str] = Field(default=None, min_length=10, max_length=50)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[Address] = None
    emergency_contact: Optional[EmergencyContact] = None


class SalaryUpdate(BaseModel):
    basic: Optional[Decimal] = Field(default=None, ge=0)
    allowances: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)


class ProfessionalInfoUpdate(BaseModel):
    department: Optional[Department] = None
    position: Optional[RequiredStr] = None
    employment_type: Optional[EmploymentType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reporting_manager_id: Optional[int] = None
    work_location: Optional[WorkLocation] = None
    salary: Optional[SalaryUpdate] = None


class EmployeeUpdate(BaseModel):
    personal_info: Optional[PersonalInfoUpdate] = None
    professional_info: Optional[ProfessionalInfoUpdate] = None
    documents: Optional[Documents] = None
    status: Optional[EmployeeStatus] = None


class ManagerSummary(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str


class AccountSummary(BaseModel):
    id: int
    email: str
    is_active: bool
    last_login: Optional[datetime] = None


class SalaryOut(BaseModel):
    basic: float
    allowances: float
    currency: str
    total: float


class ProfessionalInfoOut(BaseModel):
    department: str
    position: str
    employment_type: str
    start_date: date
    end_date: Optional[date] = None
    reporting_manager_id: Optional[int] = None
    reporting_manager: Optional[ManagerSummary] = None
    work_location: str
    salary: SalaryOut


class PersonalInfoOut(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    address: dict
    emergency_contact: dict


class EmployeeOut(BaseModel):
    id: int
    employee_code: str
    full_name: str
    user: Optional[AccountSummary] = None
    personal_info: PersonalInfoOut
    professional_info: ProfessionalInfoOut
    documents: dict
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
