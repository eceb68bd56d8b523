from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hrms.api.deps import get_current_user, require_roles
from hrms.api.pagination import PageParams, paginate
from hrms.api.responses import ok
from hrms.db.session import get_session
from hrms.domains.employees import service
from hrms.domains.employees.schemas import Department, EmployeeCreate, EmployeeStatus, EmployeeUpdate
from hrms.models import User

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("")
def list_employees(
    department: Optional[Department] = Query(None),
    status_filter: Optional[EmployeeStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    query = service.search_employees(db, department=department, status=status_filter, search=search)
    rows, pagination = paginate(query, page)
    return ok(
        {
            "employees": [service.employee_out(row) for row in rows],
            "pagination": pagination,
        }
    )


@router.get("/stats/overview")
def employee_stats(
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    return ok(service.employee_stats(db))


@router.get("/{employee_id}")
def get_employee(
    employee_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    employee = service.get_employee(db, employee_id)
    service.ensure_can_view(user, employee)
    return ok({"employee": service.employee_out(employee)})


@router.get("/{employee_id}/reports")
def list_direct_reports(
    employee_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    employee = service.get_employee(db, employee_id)
    service.ensure_can_view(user, employee)
    reports = service.direct_reports(db, employee)
    return ok({"employee_id": employee.id, "reports": [service.employee_out(r) for r in reports]})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    employee = service.create_employee(db, payload)
    return ok({"employee": service.employee_out(employee)}, message="Employee created successfully")


@router.put("/{employee_id}")
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    user: User = Depends(require_roles("admin", "hr")),
    db: Session = Depends(get_session),
):
    employee = service.get_employee(db, employee_id)
    employee = service.update_employee(db, employee, payload)
    return ok({"employee": service.employee_out(employee)}, message="Employee updated successfully")


@router.delete("/{employee_id}")
def delete_employee(
    employee_id: int,
    user: User = Depends(require_roles("admin")),
    db: Session = Depends(get_session),
):
    employee = service.get_employee(db, employee_id)
    service.terminate_employee(db, employee)
    return ok(message="Employee deleted successfully")
