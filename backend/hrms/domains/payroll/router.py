from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from hrms.api.deps import find_employee_for_user, get_current_user, require_roles
from hrms.api.pagination import PageParams, paginate
from hrms.api.responses import ok
from hrms.core import clock
from hrms.core.errors import NotFoundError, PermissionDenied
from hrms.db.session import get_session
from hrms.domains.payroll import payslip, service
from hrms.domains.payroll.schemas import GeneratePayrollRequest, PayrollStatus, StatusUpdateRequest
from hrms.models import Payroll, User

router = APIRouter(prefix="/api/payroll", tags=["payroll"])


def _ensure_can_view(db: Session, user: User, record: Payroll) -> None:
    if user.role != "employee":
        return
    employee = find_employee_for_user(db, user)
    if employee is None or employee.id != record.employee_id:
        raise PermissionDenied("Access denied")


@router.get("")
def list_payroll(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2020),
    employee_id: Optional[int] = Query(None),
    status_filter: Optional[PayrollStatus] = Query(None, alias="status"),
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    if user.role == "employee":
        employee = find_employee_for_user(db, user)
        if employee is None:
            raise NotFoundError("Employee record not found")
        employee_id = employee.id

    query = service.search_payroll(db, employee_id=employee_id, month=month, year=year, status=status_filter)
    rows, pagination = paginate(query, page)
    return ok({"payroll": [service.payroll_out(row) for row in rows], "pagination": pagination})


@router.post("/generate")
def generate_payroll(
    payload: GeneratePayrollRequest,
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    result = service.generate_payroll(db, payload.month, payload.year, user, payload.employee_ids)
    return ok(
        {
            "generated": len(result.payrolls),
            "errors": len(result.errors),
            "payrolls": [service.payroll_out(record) for record in result.payrolls],
            "error_details": result.errors,
        },
        message=f"Payroll generated for {len(result.payrolls)} employees",
    )


@router.get("/summary/stats")
def payroll_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2020),
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    today = clock.today()
    return ok(service.payroll_summary(db, month or today.month, year or today.year))


@router.get("/{payroll_id}")
def get_payroll(
    payroll_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    record = service.get_payroll(db, payroll_id)
    _ensure_can_view(db, user, record)
    return ok({"payroll": service.payroll_out(record)})


@router.put("/{payroll_id}/status")
def update_payroll_status(
    payroll_id: int,
    payload: StatusUpdateRequest,
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    record = service.get_payroll(db, payroll_id)
    record = service.update_status(db, record, payload.status, user, payload.notes)
    return ok({"payroll": service.payroll_out(record)}, message="Payroll status updated successfully")


@router.get("/{payroll_id}/payslip")
def download_payslip(
    payroll_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    record = service.get_payroll(db, payroll_id)
    _ensure_can_view(db, user, record)
    context = payslip.build_context(record, service.year_to_date(db, record))
    pdf = payslip.render_payslip_pdf(context)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{record.payslip_number}.pdf"'},
    )
