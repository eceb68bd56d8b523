from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from hrms.core import clock
from hrms.domains.attendance.service import attendance_out
from hrms.domains.payroll.service import month_bounds, payroll_out
from hrms.models import Attendance, Employee, Payroll

TODAY_BUCKETS = {"present": "present", "absent": "absent", "late": "late", "leave": "on_leave"}


def _department_counts(db: Session) -> list[dict]:
    count = func.count(Employee.id)
    rows = (
        db.query(Employee.department, count)
        .filter(Employee.status == "active")
        .group_by(Employee.department)
        .order_by(count.desc())
        .all()
    )
    return [{"department": department, "count": total} for department, total in rows]


def overview(db: Session) -> dict:
    today = clock.today()
    month_start, month_end = month_bounds(today.year, today.month)

    active = db.query(Employee).filter(Employee.status == "active")
    new_this_month = active.filter(
        Employee.created_at >= datetime.combine(month_start, datetime.min.time()),
        Employee.created_at < datetime.combine(month_end + timedelta(days=1), datetime.min.time()),
    ).count()

    today_counts = {bucket: 0 for bucket in TODAY_BUCKETS.values()}
    for status, total in (
        db.query(Attendance.status, func.count(Attendance.id))
        .filter(Attendance.date == today)
        .group_by(Attendance.status)
        .all()
    ):
        if status in TODAY_BUCKETS:
            today_counts[TODAY_BUCKETS[status]] = total

    payroll_rows = (
        db.query(Payroll.status, func.count(Payroll.id), func.sum(Payroll.net_salary))
        .filter(Payroll.month == today.month, Payroll.year == today.year)
        .group_by(Payroll.status)
        .all()
    )

    recent = active.order_by(Employee.created_at.desc(), Employee.id.desc()).limit(10).all()
    return {
        "employees": {"total": active.count(), "new_this_month": new_this_month},
        "attendance": {
            "today": today_counts,
            "total_checked_in": today_counts["present"] + today_counts["late"],
        },
        "payroll": [
            {"status": status, "count": total, "total_amount": float(amount or 0)}
            for status, total, amount in payroll_rows
        ],
        "departments": _department_counts(db),
        "recent_employees": [
            {
                "id": employee.id,
                "employee_code": employee.employee_code,
                "first_name": employee.first_name,
                "last_name": employee.last_name,
                "department": employee.department,
                "created_at": employee.created_at,
            }
            for employee in recent
        ],
    }


def attendance_trends(db: Session, days: int) -> dict:
    end_date = clock.today()
    start_date = end_date - timedelta(days=days)
    rows = (
        db.query(Attendance.date, Attendance.status, func.count(Attendance.id))
        .filter(Attendance.date >= start_date, Attendance.date <= end_date)
        .group_by(Attendance.date, Attendance.status)
        .order_by(Attendance.date.asc(), Attendance.status.asc())
        .all()
    )
    by_day: dict[date, list[dict]] = defaultdict(list)
    for day, status, total in rows:
        by_day[day].append({"status": status, "count": total})
    return {
        "trends": [{"date": day.isoformat(), "status_counts": counts} for day, counts in sorted(by_day.items())],
        "period": {"start_date": start_date, "end_date": end_date, "days": days},
    }


def attendance_rate(present_days: int, total_days: int) -> float:
    if total_days == 0:
        return 0.0
    return round(present_days / total_days * 100, 2)


def punctuality_rate(present_days: int, late_days: int) -> float:
    if present_days == 0:
        return 100.0
    return round((present_days - late_days) / present_days * 100, 2)


def employee_metrics(db: Session, month: int, year: int) -> dict:
    start_date, end_date = month_bounds(year, month)
    employees = db.query(Employee).filter(Employee.status == "active").all()
    totals = {
        employee_id: (days, int(present or 0), int(late or 0), float(hours or 0), float(overtime or 0))
        for employee_id, days, present, late, hours, overtime in (
            db.query(
                Attendance.employee_id,
                func.count(Attendance.id),
                func.sum(case((Attendance.status.in_(("present", "late")), 1), else_=0)),
                func.sum(case((Attendance.status == "late", 1), else_=0)),
                func.sum(Attendance.working_hours),
                func.sum(Attendance.overtime_hours),
            )
            .filter(Attendance.date >= start_date, Attendance.date <= end_date)
            .group_by(Attendance.employee_id)
            .all()
        )
    }

    metrics = []
    for employee in employees:
        days, present, late, hours, overtime = totals.get(employee.id, (0, 0, 0, 0.0, 0.0))
        metrics.append(
            {
                "id": employee.id,
                "employee_code": employee.employee_code,
                "first_name": employee.first_name,
                "last_name": employee.last_name,
                "department": employee.department,
                "position": employee.position,
                "total_days": days,
                "present_days": present,
                "late_days": late,
                "total_working_hours": round(hours, 2),
                "total_overtime_hours": round(overtime, 2),
                "attendance_rate": attendance_rate(present, days),
                "punctuality_rate": punctuality_rate(present, late),
            }
        )
    metrics.sort(key=lambda item: item["attendance_rate"], reverse=True)
    return {"metrics": metrics, "period": {"month": month, "year": year}}


def month_range(end_year: int, end_month: int, months: int) -> list[tuple[int, int]]:
    """The last ``months`` (year, month) pairs ending at the given month, oldest first."""
    periods = []
    index = end_year * 12 + (end_month - 1)
    for offset in range(months - 1, -1, -1):
        year, month_index = divmod(index - offset, 12)
        periods.append((year, month_index + 1))
    return periods


def payroll_analytics(db: Session, months: int) -> dict:
    today = clock.today()
    periods = month_range(today.year, today.month, months)
    net = func.sum(Payroll.net_salary)
    rows = (
        db.query(
            Payroll.year,
            Payroll.month,
            func.count(Payroll.id),
            func.sum(Payroll.total_earnings),
            func.sum(Payroll.total_deductions),
            net,
        )
        .filter(or_(*(and_(Payroll.year == year, Payroll.month == month) for year, month in periods)))
        .group_by(Payroll.year, Payroll.month)
        .order_by(Payroll.year.asc(), Payroll.month.asc())
        .all()
    )
    department_rows = (
        db.query(Employee.department, func.count(Payroll.id), net)
        .select_from(Payroll)
        .join(Employee, Employee.id == Payroll.employee_id)
        .filter(Payroll.month == today.month, Payroll.year == today.year)
        .group_by(Employee.department)
        .order_by(net.desc())
        .all()
    )
    return {
        "monthly_trends": [
            {
                "year": year,
                "month": month,
                "total_employees": count,
                "total_gross_earnings": float(gross or 0),
                "total_deductions": float(deductions or 0),
                "total_net_salary": float(total or 0),
                "average_salary": round(float(total or 0) / count, 2) if count else 0.0,
            }
            for year, month, count, gross, deductions, total in rows
        ],
        "department_breakdown": [
            {
                "department": department,
                "employee_count": count,
                "total_payroll": float(total or 0),
                "average_salary": round(float(total or 0) / count, 2) if count else 0.0,
            }
            for department, count, total in department_rows
        ],
        "period": {"months": months, "end_month": today.month, "end_year": today.year},
    }


def my_summary(db: Session, employee: Employee) -> dict:
    today = clock.today()
    month_start, month_end = month_bounds(today.year, today.month)

    today_record = (
        db.query(Attendance)
        .filter(Attendance.employee_id == employee.id, Attendance.date == today)
        .one_or_none()
    )
    monthly = (
        db.query(
            Attendance.status,
            func.count(Attendance.id),
            func.sum(Attendance.working_hours),
            func.sum(Attendance.overtime_hours),
        )
        .filter(
            Attendance.employee_id == employee.id,
            Attendance.date >= month_start,
            Attendance.date <= month_end,
        )
        .group_by(Attendance.status)
        .all()
    )
    current_payroll = (
        db.query(Payroll)
        .filter(Payroll.employee_id == employee.id, Payroll.month == today.month, Payroll.year == today.year)
        .one_or_none()
    )
    recent = (
        db.query(Attendance)
        .filter(Attendance.employee_id == employee.id, Attendance.date >= today - timedelta(days=7))
        .order_by(Attendance.date.desc())
        .all()
    )
    return {
        "employee": {
            "id": employee.id,
            "employee_code": employee.employee_code,
            "name": employee.full_name,
            "department": employee.department,
            "position": employee.position,
        },
        "today_attendance": attendance_out(today_record) if today_record else None,
        "monthly_attendance": [
            {
                "status": status,
                "count": total,
                "total_hours": round(float(hours or 0), 2),
                "total_overtime": round(float(overtime or 0), 2),
            }
            for status, total, hours, overtime in monthly
        ],
        "current_payroll": payroll_out(current_payroll) if current_payroll else None,
        "recent_attendance": [attendance_out(record) for record in recent],
    }
