from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import relationship

from hrms.core import clock
from hrms.db.session import Base
from hrms.domains.payroll.calculator import apply_payroll_totals, payslip_number

MONEY = Numeric(12, 2)


class Payroll(Base):
    __tablename__ = "payroll"
    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_payroll_employee_period"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_payroll_month"),
        CheckConstraint("year >= 2020", name="ck_payroll_year"),
        Index("ix_payroll_period", "year", "month"),
        Index("ix_payroll_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    basic_salary = Column(MONEY, nullable=False, default=0)
    allowances = Column(MONEY, nullable=False, default=0)
    overtime_pay = Column(MONEY, nullable=False, default=0)
    bonus = Column(MONEY, nullable=False, default=0)
    total_earnings = Column(MONEY, nullable=False, default=0)

    tax = Column(MONEY, nullable=False, default=0)
    social_security = Column(MONEY, nullable=False, default=0)
    health_insurance = Column(MONEY, nullable=False, default=0)
    other_deductions = Column(MONEY, nullable=False, default=0)
    total_deductions = Column(MONEY, nullable=False, default=0)

    net_salary = Column(MONEY, nullable=False, default=0)

    working_days = Column(Integer, nullable=False, default=0)
    present_days = Column(Integer, nullable=False, default=0)
    overtime_hours = Column(Float, nullable=False, default=0)

    status = Column(String(20), nullable=False, default="draft")  # draft|processed|paid|cancelled
    processed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    processed_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    payslip_url = Column(String(255), nullable=True)
    notes = Column(String(1000), nullable=True)

    created_at = Column(DateTime, default=clock.utcnow)
    updated_at = Column(DateTime, default=clock.utcnow, onupdate=clock.utcnow)

    employee = relationship("Employee")
    processor = relationship("User")

    @property
    def payslip_number(self) -> str:
        return payslip_number(self.year, self.month, self.employee_id)


@event.listens_for(Payroll, "before_insert")
@event.listens_for(Payroll, "before_update")
def recompute_totals(mapper, connection, target: Payroll) -> None:
    apply_payroll_totals(target, now=clock.utcnow)
