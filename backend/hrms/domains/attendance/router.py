from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hrms.api.deps import find_employee_for_user, get_current_employee, get_current_user, is_staff, require_roles
from hrms.api.pagination import PageParams, paginate
from hrms.api.responses import ok
from hrms.core import clock
from hrms.core.errors import NotFoundError, PermissionDenied, ValidationFailed
from hrms.db.session import get_session
from hrms.domains.attendance import service
from hrms.domains.attendance.schemas import (
    AttendanceStatus,
    AttendanceUpdate,
    BreakRequest,
    LocationRequest,
    MarkAttendanceRequest,
)
from hrms.domains.employees.schemas import Department
from hrms.models import Employee, User

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


@router.post("/checkin")
def check_in(
    payload: Optional[LocationRequest] = None,
    employee: Employee = Depends(get_current_employee),
    db: Session = Depends(get_session),
):
    location = payload.location if payload else None
    record = service.check_in(db, employee, location)
    return ok({"attendance": service.attendance_out(record)}, message="Checked in successfully")


@router.post("/checkout")
def check_out(
    payload: Optional[LocationRequest] = None,
    employee: Employee = Depends(get_current_employee),
    db: Session = Depends(get_session),
):
    location = payload.location if payload else None
    record = service.check_out(db, employee, location)
    return ok({"attendance": service.attendance_out(record)}, message="Checked out successfully")


@router.get("")
def list_attendance(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    employee_id: Optional[int] = Query(None),
    status_filter: Optional[AttendanceStatus] = Query(None, alias="status"),
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    if user.role == "employee":
        employee = find_employee_for_user(db, user)
        if employee is None:
            raise NotFoundError("Employee record not found")
        employee_id = employee.id

    query = service.search_records(
        db, employee_id=employee_id, start_date=start_date, end_date=end_date, status=status_filter
    )
    rows, pagination = paginate(query, page)
    return ok(
        {
            "attendance": [service.attendance_out(row) for row in rows],
            "pagination": pagination,
        }
    )


@router.get("/today")
def today_status(
    employee: Employee = Depends(get_current_employee),
    db: Session = Depends(get_session),
):
    record = service.find_record(db, employee.id, clock.today())
    return ok(
        {
            "attendance": service.attendance_out(record) if record else None,
            "can_check_in": record is None or record.check_in is None,
            "can_check_out": bool(record and record.check_in and not record.check_out),
        }
    )


@router.get("/report")
def attendance_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    department: Optional[Department] = Query(None),
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    if end_date < start_date:
        raise ValidationFailed("end_date must not be before start_date")
    return ok(service.attendance_report(db, start_date, end_date, department))


@router.post("/mark")
def mark_attendance(
    payload: MarkAttendanceRequest,
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    record = service.mark(db, payload)
    return ok({"attendance": service.attendance_out(record)}, message="Attendance marked successfully")


@router.post("/{attendance_id}/breaks")
def add_break(
    attendance_id: int,
    payload: BreakRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    record = service.get_record(db, attendance_id)
    if not is_staff(user):
        employee = find_employee_for_user(db, user)
        if employee is None or employee.id != record.employee_id:
            raise PermissionDenied("Access denied")
    record = service.add_break(db, record, payload)
    return ok({"attendance": service.attendance_out(record)}, message="Break recorded successfully")


@router.put("/{attendance_id}")
def correct_attendance(
    attendance_id: int,
    payload: AttendanceUpdate,
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    record = service.get_record(db, attendance_id)
    record = service.correct(db, record, payload)
    return ok({"attendance": service.attendance_out(record)}, message="Attendance updated successfully")
