from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from hrms.core.errors import HRMSError, NotFoundError, ValidationFailed
from hrms.core.logging import get_logger
from hrms.core.observability import get_meter, get_tracer
from hrms.domains.attendance.rules import PRESENT_STATUSES
from hrms.domains.payroll.calculator import compute_pay
from hrms.domains.payroll.schemas import (
    Deductions,
    Earnings,
    EmployeeBrief,
    GenerationError,
    PayPeriod,
    PayrollOut,
    ProcessorRef,
)
from hrms.models import Attendance, Employee, Payroll, User

logger = get_logger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)

generated_counter = meter.create_counter(
    "payroll_records_generated", description="Payroll records created by bulk generation"
)
skipped_counter = meter.create_counter(
    "payroll_generation_errors", description="Employees skipped or failed during bulk generation"
)

ALREADY_EXISTS = "Payroll already exists for this period"


@dataclass
class GenerationResult:
    payrolls: list[Payroll] = field(default_factory=list)
    errors: list[GenerationError] = field(default_factory=list)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def payroll_out(record: Payroll) -> PayrollOut:
    employee = record.employee
    processor = record.processor
    return PayrollOut(
        id=record.id,
        payslip_number=record.payslip_number,
        employee=EmployeeBrief(
            id=employee.id,
            employee_code=employee.employee_code,
            first_name=employee.first_name,
            last_name=employee.last_name,
            department=employee.department,
        ),
        pay_period=PayPeriod(
            start_date=record.start_date, end_date=record.end_date, month=record.month, year=record.year
        ),
        earnings=Earnings(
            basic_salary=float(record.basic_salary),
            allowances=float(record.allowances),
            overtime=float(record.overtime_pay),
            bonus=float(record.bonus),
            total=float(record.total_earnings),
        ),
        deductions=Deductions(
            tax=float(record.tax),
            social_security=float(record.social_security),
            health_insurance=float(record.health_insurance),
            other=float(record.other_deductions),
            total=float(record.total_deductions),
        ),
        net_salary=float(record.net_salary),
        working_days=record.working_days,
        present_days=record.present_days,
        overtime_hours=round(record.overtime_hours or 0, 2),
        status=record.status,
        processed_by=(
            ProcessorRef(id=processor.id, first_name=processor.first_name, last_name=processor.last_name)
            if processor
            else None
        ),
        processed_at=record.processed_at,
        paid_at=record.paid_at,
        payslip_url=record.payslip_url,
        notes=record.notes,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def get_payroll(db: Session, payroll_id: int) -> Payroll:
    record = db.get(Payroll, payroll_id)
    if record is None:
        raise NotFoundError("Payroll record not found")
    return record


def payroll_exists(db: Session, employee_id: int, month: int, year: int) -> bool:
    return (
        db.query(Payroll.id)
        .filter(Payroll.employee_id == employee_id, Payroll.month == month, Payroll.year == year)
        .first()
        is not None
    )


def build_payroll(db: Session, employee: Employee, month: int, year: int, actor: User) -> Payroll:
    start_date, end_date = month_bounds(year, month)
    records = (
        db.query(Attendance.status, Attendance.overtime_hours)
        .filter(
            Attendance.employee_id == employee.id,
            Attendance.date >= start_date,
            Attendance.date <= end_date,
        )
        .all()
    )
    working_days = len(records)
    present_days = sum(1 for status, _ in records if status in PRESENT_STATUSES)
    overtime_hours = sum(hours or 0 for _, hours in records)

    pay = compute_pay(employee.basic_salary, employee.allowances, overtime_hours)
    return Payroll(
        employee_id=employee.id,
        start_date=start_date,
        end_date=end_date,
        month=month,
        year=year,
        basic_salary=pay.basic_salary,
        allowances=pay.allowances,
        overtime_pay=pay.overtime_pay,
        bonus=0,
        tax=pay.tax,
        social_security=pay.social_security,
        health_insurance=pay.health_insurance,
        other_deductions=0,
        working_days=working_days,
        present_days=present_days,
        overtime_hours=overtime_hours,
        status="draft",
        processed_by=actor.id,
    )


def generate_payroll(
    db: Session,
    month: int,
    year: int,
    actor: User,
    employee_ids: Optional[list[int]] = None,
) -> GenerationResult:
    """Create draft payroll records for a month, one savepoint per employee.

    The existence check is only a shortcut: the unique (employee, month, year)
    constraint decides, and a violation is reported like any other skip.
    """
    query = db.query(Employee).filter(Employee.status == "active")
    if employee_ids:
        query = query.filter(Employee.id.in_(employee_ids))
    employees = query.order_by(Employee.employee_code.asc()).all()
    if not employees:
        raise ValidationFailed("No active employees found")

    result = GenerationResult()
    with tracer.start_as_current_span("payroll.generate") as span:
        span.set_attribute("payroll.month", month)
        span.set_attribute("payroll.year", year)
        span.set_attribute("payroll.candidates", len(employees))

        for employee in employees:
            code = employee.employee_code
            if payroll_exists(db, employee.id, month, year):
                result.errors.append(GenerationError(employee_id=code, message=ALREADY_EXISTS))
                continue
            try:
                with db.begin_nested():
                    record = build_payroll(db, employee, month, year, actor)
                    db.add(record)
                    db.flush()
                    record.payslip_url = f"/api/payroll/{record.id}/payslip"
            except IntegrityError:
                logger.warning("payroll_generation_conflict", employee_code=code, month=month, year=year)
                result.errors.append(GenerationError(employee_id=code, message=ALREADY_EXISTS))
            except (SQLAlchemyError, HRMSError) as exc:
                logger.warning("payroll_generation_failed", employee_code=code, error=str(exc))
                result.errors.append(GenerationError(employee_id=code, message=str(exc)))
            else:
                result.payrolls.append(record)

        db.commit()
        span.set_attribute("payroll.generated", len(result.payrolls))

    generated_counter.add(len(result.payrolls), {"period": f"{year}-{month:02d}"})
    skipped_counter.add(len(result.errors), {"period": f"{year}-{month:02d}"})
    logger.info(
        "payroll_generated",
        month=month,
        year=year,
        generated=len(result.payrolls),
        errors=len(result.errors),
        actor_id=actor.id,
    )
    return result


def update_status(db: Session, record: Payroll, status: str, actor: User, notes: Optional[str] = None) -> Payroll:
    previous = record.status
    record.status = status
    record.processed_by = actor.id
    if notes is not None:
        record.notes = notes
    db.commit()
    db.refresh(record)
    logger.info("payroll_status_changed", payroll_id=record.id, previous=previous, status=status, actor_id=actor.id)
    return record


def search_payroll(
    db: Session,
    employee_id: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    status: Optional[str] = None,
) -> Query:
    query = db.query(Payroll)
    if employee_id is not None:
        query = query.filter(Payroll.employee_id == employee_id)
    if month:
        query = query.filter(Payroll.month == month)
    if year:
        query = query.filter(Payroll.year == year)
    if status:
        query = query.filter(Payroll.status == status)
    return query.order_by(Payroll.year.desc(), Payroll.month.desc(), Payroll.id.desc())


def payroll_summary(db: Session, month: int, year: int) -> dict:
    status_rows = (
        db.query(
            Payroll.status,
            func.count(Payroll.id),
            func.sum(Payroll.total_earnings),
            func.sum(Payroll.total_deductions),
            func.sum(Payroll.net_salary),
        )
        .filter(Payroll.month == month, Payroll.year == year)
        .group_by(Payroll.status)
        .all()
    )
    net_total = func.sum(Payroll.net_salary)
    department_rows = (
        db.query(Employee.department, func.count(Payroll.id), net_total)
        .select_from(Payroll)
        .join(Employee, Employee.id == Payroll.employee_id)
        .filter(Payroll.month == month, Payroll.year == year)
        .group_by(Employee.department)
        .order_by(net_total.desc())
        .all()
    )
    return {
        "period": {"month": month, "year": year},
        "summary": [
            {
                "status": status,
                "count": count,
                "total_gross_earnings": float(gross or 0),
                "total_deductions": float(deductions or 0),
                "total_net_salary": float(net or 0),
            }
            for status, count, gross, deductions, net in status_rows
        ],
        "department_breakdown": [
            {"department": department, "count": count, "total_payroll": float(total or 0)}
            for department, count, total in department_rows
        ],
    }


def year_to_date(db: Session, record: Payroll) -> dict:
    gross, deductions, net = (
        db.query(
            func.sum(Payroll.total_earnings),
            func.sum(Payroll.total_deductions),
            func.sum(Payroll.net_salary),
        )
        .filter(
            Payroll.employee_id == record.employee_id,
            Payroll.year == record.year,
            Payroll.month <= record.month,
            Payroll.status != "cancelled",
        )
        .one()
    )
    return {"gross": float(gross or 0), "deductions": float(deductions or 0), "net": float(net or 0)}
