from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Query, Session

from hrms.core import clock
from hrms.core.errors import ConflictError, NotFoundError
from hrms.core.logging import get_logger
from hrms.domains.attendance.schemas import (
    AttendanceOut,
    AttendanceUpdate,
    BreakRequest,
    EmployeeRef,
    Location,
    MarkAttendanceRequest,
)
from hrms.models import Attendance, Employee

logger = get_logger(__name__)


def attendance_out(record: Attendance) -> AttendanceOut:
    employee = record.employee
    return AttendanceOut(
        id=record.id,
        employee=EmployeeRef(
            id=employee.id,
            employee_code=employee.employee_code,
            first_name=employee.first_name,
            last_name=employee.last_name,
        ),
        date=record.date,
        check_in=record.check_in,
        check_out=record.check_out,
        breaks=list(record.breaks or []),
        working_hours=record.working_hours or 0,
        overtime_hours=record.overtime_hours or 0,
        status=record.status,
        manually_marked=bool(record.manually_marked),
        notes=record.notes,
        location=Location(
            check_in_location=record.check_in_location,
            check_out_location=record.check_out_location,
        ),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def find_record(db: Session, employee_id: int, day: date) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .filter(Attendance.employee_id == employee_id, Attendance.date == day)
        .one_or_none()
    )


def get_record(db: Session, attendance_id: int) -> Attendance:
    record = db.get(Attendance, attendance_id)
    if record is None:
        raise NotFoundError("Attendance record not found")
    return record


def check_in(db: Session, employee: Employee, location: Optional[str] = None) -> Attendance:
    today = clock.today()
    record = find_record(db, employee.id, today)
    if record is not None and record.check_in is not None:
        raise ConflictError("Already checked in today")

    if record is None:
        record = Attendance(employee_id=employee.id, date=today, breaks=[])
        db.add(record)

    record.check_in = clock.now_local()
    record.status = "present"
    record.manually_marked = False
    if location:
        record.check_in_location = location

    db.commit()
    db.refresh(record)
    logger.info("checked_in", employee_id=employee.id, attendance_id=record.id, at=record.check_in.isoformat())
    return record


def check_out(db: Session, employee: Employee, location: Optional[str] = None) -> Attendance:
    record = find_record(db, employee.id, clock.today())
    if record is None or record.check_in is None:
        raise ConflictError("No check-in record found for today")
    if record.check_out is not None:
        raise ConflictError("Already checked out today")

    record.check_out = clock.now_local()
    if location:
        record.check_out_location = location

    db.commit()
    db.refresh(record)
    logger.info(
        "checked_out",
        employee_id=employee.id,
        attendance_id=record.id,
        working_hours=round(record.working_hours, 2),
        status=record.status,
    )
    return record


def add_break(db: Session, record: Attendance, payload: BreakRequest) -> Attendance:
    record.breaks = [*(record.breaks or []), payload.as_record()]
    db.commit()
    db.refresh(record)
    logger.info("break_recorded", attendance_id=record.id, minutes=payload.duration)
    return record


def mark(db: Session, payload: MarkAttendanceRequest) -> Attendance:
    employee = db.get(Employee, payload.employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")

    record = find_record(db, employee.id, payload.date)
    if record is None:
        record = Attendance(employee_id=employee.id, date=payload.date, breaks=[], notes=payload.notes)
        db.add(record)
    elif payload.notes:
        record.notes = payload.notes
    record.status = payload.status
    record.manually_marked = True

    db.commit()
    db.refresh(record)
    logger.info("attendance_marked", employee_id=employee.id, date=str(payload.date), status=record.status)
    return record


def correct(db: Session, record: Attendance, payload: AttendanceUpdate) -> Attendance:
    changes = payload.model_dump(exclude_unset=True)
    if "check_in" in changes:
        record.check_in = payload.check_in
    if "check_out" in changes:
        record.check_out = payload.check_out
    if payload.breaks is not None:
        record.breaks = [item.as_record() for item in payload.breaks]
    if payload.notes is not None:
        record.notes = payload.notes
    if payload.status is not None:
        record.status = payload.status
        record.manually_marked = True

    db.commit()
    db.refresh(record)
    logger.info("attendance_corrected", attendance_id=record.id, fields=sorted(changes))
    return record


def search_records(
    db: Session,
    employee_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
) -> Query:
    query = db.query(Attendance)
    if employee_id is not None:
        query = query.filter(Attendance.employee_id == employee_id)
    if start_date:
        query = query.filter(Attendance.date >= start_date)
    if end_date:
        query = query.filter(Attendance.date <= end_date)
    if status:
        query = query.filter(Attendance.status == status)
    return query.order_by(Attendance.date.desc(), Attendance.id.desc())


def attendance_report(db: Session, start_date: date, end_date: date, department: Optional[str] = None) -> dict:
    employees_query = db.query(Employee).filter(Employee.status == "active")
    if department:
        employees_query = employees_query.filter(Employee.department == department)
    employees = employees_query.order_by(Employee.employee_code.asc()).all()

    totals = {}
    if employees:
        rows = (
            db.query(
                Attendance.employee_id,
                func.count(Attendance.id),
                func.sum(case((Attendance.status.in_(("present", "late")), 1), else_=0)),
                func.sum(case((Attendance.status == "late", 1), else_=0)),
                func.sum(case((Attendance.status == "absent", 1), else_=0)),
                func.sum(Attendance.working_hours),
                func.sum(Attendance.overtime_hours),
            )
            .filter(
                Attendance.employee_id.in_([employee.id for employee in employees]),
                Attendance.date >= start_date,
                Attendance.date <= end_date,
            )
            .group_by(Attendance.employee_id)
            .all()
        )
        for employee_id, days, present, late, absent, hours, overtime in rows:
            totals[employee_id] = {
                "total_days": days,
                "present_days": int(present or 0),
                "late_days": int(late or 0),
                "absent_days": int(absent or 0),
                "total_working_hours": round(float(hours or 0), 2),
                "total_overtime_hours": round(float(overtime or 0), 2),
            }

    empty = {
        "total_days": 0,
        "present_days": 0,
        "late_days": 0,
        "absent_days": 0,
        "total_working_hours": 0.0,
        "total_overtime_hours": 0.0,
    }
    report = [
        {
            "employee": {
                "id": employee.id,
                "employee_code": employee.employee_code,
                "name": employee.full_name,
                "department": employee.department,
                "position": employee.position,
            },
            "attendance": totals.get(employee.id, dict(empty)),
        }
        for employee in employees
    ]
    return {
        "report": report,
        "summary": {
            "total_employees": len(employees),
            "date_range": {"start_date": start_date, "end_date": end_date},
            "department": department or "All Departments",
        },
    }
