from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

PayrollStatus = Literal["draft", "processed", "paid", "cancelled"]


class GeneratePayrollRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2020)
    employee_ids: Optional[list[int]] = None

    @field_validator("employee_ids")
    @classmethod
    def unique_ids(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is None:
            return None
        return list(dict.fromkeys(value))


class StatusUpdateRequest(BaseModel):
    status: PayrollStatus
    notes: Optional[str] = Field(default=None, max_length=1000)


class EmployeeBrief(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str
    department: str


class ProcessorRef(BaseModel):
    id: int
    first_name: str
    last_name: str


class PayPeriod(BaseModel):
    start_date: date
    end_date: date
    month: int
    year: int


class Earnings(BaseModel):
    basic_salary: float
    allowances: float
    overtime: float
    bonus: float
    total: float


class Deductions(BaseModel):
    tax: float
    social_security: float
    health_insurance: float
    other: float
    total: float


class PayrollOut(BaseModel):
    id: int
    payslip_number: str
    employee: EmployeeBrief
    pay_period: PayPeriod
    earnings: Earnings
    deductions: Deductions
    net_salary: float
    working_days: int
    present_days: int
    overtime_hours: float
    status: str
    processed_by: Optional[ProcessorRef] = None
    processed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    payslip_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GenerationError(BaseModel):
    employee_id: str
    message: str
