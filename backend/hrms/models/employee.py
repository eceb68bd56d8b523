from decimal import Decimal

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    event,
    func,
    select,
)
from sqlalchemy.orm import relationship

from hrms.core import clock
from hrms.db.session import Base

EMPLOYEE_CODE_PREFIX = "EMP"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_code = Column(String(20), nullable=False, unique=True, index=True)

    # One employee per user account; optional so HR can keep records without logins
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(10), nullable=False)  # male|female|other
    address = Column(JSON, nullable=False, default=dict)
    emergency_contact = Column(JSON, nullable=False, default=dict)

    department = Column(String(30), nullable=False, index=True)
    position = Column(String(120), nullable=False)
    employment_type = Column(String(20), nullable=False, default="full-time")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    reporting_manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    work_location = Column(String(20), nullable=False, default="office")

    basic_salary = Column(Numeric(12, 2), nullable=False, default=0)
    allowances = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")

    documents = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default="active", index=True)

    created_at = Column(DateTime, default=clock.utcnow)
    updated_at = Column(DateTime, default=clock.utcnow, onupdate=clock.utcnow)

    user = relationship("User")
    reporting_manager = relationship("Employee", remote_side=[id], backref="direct_reports")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def total_salary(self) -> Decimal:
        return Decimal(self.basic_salary or 0) + Decimal(self.allowances or 0)


def format_employee_code(sequence: int) -> str:
    return f"{EMPLOYEE_CODE_PREFIX}{sequence:04d}"


@event.listens_for(Employee, "before_insert")
def assign_employee_code(mapper, connection, target: Employee) -> None:
    if target.employee_code:
        target.employee_code = target.employee_code.upper()
        return
    table = Employee.__table__
    sequence = connection.scalar(select(func.count()).select_from(table)) + 1
    code = format_employee_code(sequence)
    while connection.scalar(select(table.c.id).where(table.c.employee_code == code)) is not None:
        sequence += 1
        code = format_employee_code(sequence)
    target.employee_code = code
