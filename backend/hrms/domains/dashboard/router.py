from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hrms.api.deps import get_current_employee, require_roles
from hrms.api.responses import ok
from hrms.core import clock
from hrms.db.session import get_session
from hrms.domains.dashboard import service
from hrms.models import Employee, User

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

staff_only = require_roles("admin", "hr")


@router.get("/overview")
def overview(user: User = Depends(staff_only), db: Session = Depends(get_session)):
    return ok(service.overview(db))


@router.get("/attendance-trends")
def attendance_trends(
    days: int = Query(30, ge=7, le=90),
    user: User = Depends(staff_only),
    db: Session = Depends(get_session),
):
    return ok(service.attendance_trends(db, days))


@router.get("/employee-metrics")
def employee_metrics(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2020),
    user: User = Depends(staff_only),
    db: Session = Depends(get_session),
):
    today = clock.today()
    return ok(service.employee_metrics(db, month or today.month, year or today.year))


@router.get("/payroll-analytics")
def payroll_analytics(
    months: int = Query(6, ge=1, le=12),
    user: User = Depends(staff_only),
    db: Session = Depends(get_session),
):
    return ok(service.payroll_analytics(db, months))


@router.get("/my-summary")
def my_summary(employee: Employee = Depends(get_current_employee), db: Session = Depends(get_session)):
    return ok(service.my_summary(db, employee))
