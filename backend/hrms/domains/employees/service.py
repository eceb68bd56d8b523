from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from hrms.core.errors import ConflictError, NotFoundError, PermissionDenied, ValidationFailed
from hrms.core.logging import get_logger
from hrms.core.security import hash_password
from hrms.domains.employees.schemas import (
    AccountSummary,
    EmployeeCreate,
    EmployeeOut,
    EmployeeUpdate,
    ManagerSummary,
    PersonalInfoOut,
    ProfessionalInfoOut,
    SalaryOut,
)
from hrms.models import Employee, User

logger = get_logger(__name__)

TEMPORARY_PASSWORD = "temp123456"

PERSONAL_COLUMNS = ("first_name", "last_name", "email", "phone", "date_of_birth", "gender")
PROFESSIONAL_COLUMNS = (
    "department",
    "position",
    "employment_type",
    "start_date",
    "end_date",
    "reporting_manager_id",
    "work_location",
)
CLEARABLE_COLUMNS = ("end_date", "reporting_manager_id")


def manager_summary(employee: Optional[Employee]) -> Optional[ManagerSummary]:
    if employee is None:
        return None
    return ManagerSummary(
        id=employee.id,
        employee_code=employee.employee_code,
        first_name=employee.first_name,
        last_name=employee.last_name,
    )


def employee_out(employee: Employee) -> EmployeeOut:
    user = employee.user
    return EmployeeOut(
        id=employee.id,
        employee_code=employee.employee_code,
        full_name=employee.full_name,
        user=(
            AccountSummary(
                id=user.id, email=user.email, is_active=user.is_active, last_login=user.last_login
            )
            if user
            else None
        ),
        personal_info=PersonalInfoOut(
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            phone=employee.phone,
            date_of_birth=employee.date_of_birth,
            gender=employee.gender,
            address=employee.address or {},
            emergency_contact=employee.emergency_contact or {},
        ),
        professional_info=ProfessionalInfoOut(
            department=employee.department,
            position=employee.position,
            employment_type=employee.employment_type,
            start_date=employee.start_date,
            end_date=employee.end_date,
            reporting_manager_id=employee.reporting_manager_id,
            reporting_manager=manager_summary(employee.reporting_manager),
            work_location=employee.work_location,
            salary=SalaryOut(
                basic=float(employee.basic_salary or 0),
                allowances=float(employee.allowances or 0),
                currency=employee.currency,
                total=float(employee.total_salary),
            ),
        ),
        documents=employee.documents or {},
        status=employee.status,
        created_at=employee.created_at,
        updated_at=employee.updated_at,
    )


def get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def ensure_can_view(user: User, employee: Employee) -> None:
    if user.role == "employee" and employee.user_id != user.id:
        raise PermissionDenied("Access denied")


def validate_reporting_manager(db: Session, employee_id: Optional[int], manager_id: Optional[int]) -> None:
    """Reject unknown managers and assignments that would close a loop in the reporting chain."""
    if manager_id is None:
        return
    manager = db.get(Employee, manager_id)
    if manager is None:
        raise ValidationFailed("Reporting manager not found")
    if employee_id is None:
        return

    seen: set[int] = set()
    current: Optional[Employee] = manager
    while current is not None and current.id not in seen:
        if current.id == employee_id:
            raise ValidationFailed("Reporting manager assignment would create a cycle")
        seen.add(current.id)
        current = current.reporting_manager


def create_employee(db: Session, payload: EmployeeCreate) -> Employee:
    personal = payload.personal_info
    professional = payload.professional_info
    validate_reporting_manager(db, None, professional.reporting_manager_id)

    user = None
    if payload.create_user_account:
        existing = db.query(User).filter(func.lower(User.email) == personal.email).one_or_none()
        if existing:
            raise ConflictError("User already exists with this email")
        user = User(
            email=personal.email,
            hashed_password=hash_password(TEMPORARY_PASSWORD),
            first_name=personal.first_name,
            last_name=personal.last_name,
            role="employee",
        )
        db.add(user)
        db.flush()

    if payload.employee_code:
        taken = db.query(Employee.id).filter(Employee.employee_code == payload.employee_code).first()
        if taken:
            raise ConflictError("Employee ID already exists")

    employee = Employee(
        employee_code=payload.employee_code,
        user_id=user.id if user else None,
        address=personal.address.model_dump(),
        emergency_contact=personal.emergency_contact.model_dump(),
        basic_salary=professional.salary.basic,
        allowances=professional.salary.allowances,
        currency=professional.salary.currency.upper(),
        documents=payload.documents.model_dump(exclude_none=True),
        status=payload.status,
        **{column: getattr(personal, column) for column in PERSONAL_COLUMNS},
        **{column: getattr(professional, column) for column in PROFESSIONAL_COLUMNS},
    )
    db.add(employee)
    db.flush()

    if user is not None:
        user.employee_code = employee.employee_code

    db.commit()
    db.refresh(employee)
    logger.info(
        "employee_created",
        employee_id=employee.id,
        employee_code=employee.employee_code,
        user_account=user is not None,
    )
    return employee


def update_employee(db: Session, employee: Employee, payload: EmployeeUpdate) -> Employee:
    changes = payload.model_dump(exclude_unset=True)

    personal = changes.get("personal_info") or {}
    for column in PERSONAL_COLUMNS:
        if personal.get(column) is not None:
            setattr(employee, column, personal[column])
    if personal.get("address") is not None:
        employee.address = personal["address"]
    if personal.get("emergency_contact") is not None:
        employee.emergency_contact = personal["emergency_contact"]

    professional = changes.get("professional_info") or {}
    if "reporting_manager_id" in professional:
        validate_reporting_manager(db, employee.id, professional["reporting_manager_id"])
    for column in PROFESSIONAL_COLUMNS:
        if column not in professional:
            continue
        if professional[column] is None and column not in CLEARABLE_COLUMNS:
            continue
        setattr(employee, column, professional[column])
    salary = professional.get("salary") or {}
    if salary.get("basic") is not None:
        employee.basic_salary = salary["basic"]
    if salary.get("allowances") is not None:
        employee.allowances = salary["allowances"]
    if salary.get("currency"):
        employee.currency = salary["currency"].upper()

    if changes.get("documents") is not None:
        employee.documents = {k: v for k, v in changes["documents"].items() if v is not None}
    if changes.get("status") is not None:
        employee.status = changes["status"]

    db.commit()
    db.refresh(employee)
    logger.info("employee_updated", employee_id=employee.id, sections=sorted(changes))
    return employee


def terminate_employee(db: Session, employee: Employee) -> None:
    employee.status = "terminated"
    if employee.user is not None:
        employee.user.is_active = False
    db.commit()
    logger.info("employee_terminated", employee_id=employee.id, user_id=employee.user_id)


def search_employees(
    db: Session,
    department: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> Query:
    query = db.query(Employee)
    if department:
        query = query.filter(Employee.department == department)
    if status:
        query = query.filter(Employee.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Employee.first_name.ilike(pattern),
                Employee.last_name.ilike(pattern),
                Employee.email.ilike(pattern),
                Employee.employee_code.ilike(pattern),
                Employee.position.ilike(pattern),
            )
        )
    return query.order_by(Employee.created_at.desc(), Employee.id.desc())


def employee_stats(db: Session) -> dict:
    by_status = dict(db.query(Employee.status, func.count(Employee.id)).group_by(Employee.status).all())
    department_rows = (
        db.query(Employee.department, func.count(Employee.id).label("count"))
        .filter(Employee.status == "active")
        .group_by(Employee.department)
        .order_by(func.count(Employee.id).desc())
        .all()
    )
    type_rows = (
        db.query(Employee.employment_type, func.count(Employee.id))
        .filter(Employee.status == "active")
        .group_by(Employee.employment_type)
        .all()
    )
    return {
        "overview": {
            "total": sum(by_status.values()),
            "active": by_status.get("active", 0),
            "inactive": by_status.get("inactive", 0),
            "terminated": by_status.get("terminated", 0),
            "on_leave": by_status.get("on-leave", 0),
        },
        "department_stats": [{"department": name, "count": count} for name, count in department_rows],
        "employment_type_stats": [{"employment_type": name, "count": count} for name, count in type_rows],
    }


def direct_reports(db: Session, employee: Employee) -> list[Employee]:
    return (
        db.query(Employee)
        .filter(Employee.reporting_manager_id == employee.id)
        .order_by(Employee.employee_code.asc())
        .all()
    )
