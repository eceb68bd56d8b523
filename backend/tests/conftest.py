from __future__ import annotations

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hrms.core import clock
from hrms.core.security import create_access_token, hash_password
from hrms.db.session import Base, build_engine, get_session
from hrms.main import app
from hrms.models import Attendance, Employee, User

# One shared in-memory connection; every session below must end its
# transaction before the next request runs.
engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
SetupSession = sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def freeze_clock(monkeypatch):
    """Pin the wall clock used for check-ins and period defaults."""

    def freeze(moment: datetime) -> None:
        monkeypatch.setattr(clock, "now_local", lambda: moment)

    return freeze


def save(instance):
    with SetupSession() as session:
        session.add(instance)
        session.commit()
    return instance


def auth_header(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def make_user(email: str, role: str = "employee", password: str = "secret123", **overrides) -> User:
    values = dict(
        email=email,
        hashed_password=hash_password(password),
        first_name=email.split("@")[0].title(),
        last_name="Tester",
        role=role,
    )
    values.update(overrides)
    return save(User(**values))


def make_employee(user: User | None = None, **overrides) -> Employee:
    values = dict(
        user_id=user.id if user else None,
        first_name=user.first_name if user else "Casey",
        last_name="Tester",
        email=user.email if user else "casey@example.com",
        phone="4075550100",
        date_of_birth=date(1990, 5, 17),
        gender="other",
        address={"street": "1 Main St", "city": "Orlando", "state": "FL", "zip_code": "32801", "country": "USA"},
        emergency_contact={"name": "Pat", "relationship": "Sibling", "phone": "4075550199"},
        department="Engineering",
        position="Engineer",
        start_date=date(2023, 1, 2),
        basic_salary=4800,
        allowances=200,
        documents={},
    )
    values.update(overrides)
    return save(Employee(**values))


def make_attendance(employee: Employee, day: date, check_in: datetime | None, check_out: datetime | None, **overrides):
    values = dict(
        employee_id=employee.id,
        date=day,
        check_in=check_in,
        check_out=check_out,
        breaks=[],
        status="present",
    )
    values.update(overrides)
    return save(Attendance(**values))


@pytest.fixture
def admin() -> User:
    return make_user("admin@example.com", role="admin")


@pytest.fixture
def hr() -> User:
    return make_user("hr@example.com", role="hr")


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return auth_header(admin.id)


@pytest.fixture
def hr_headers(hr) -> dict[str, str]:
    return auth_header(hr.id)


@pytest.fixture
def staff_member():
    """An employee-role user with a linked employee record."""
    user = make_user("worker@example.com")
    employee = make_employee(user)
    return user, employee


@pytest.fixture
def worker_headers(staff_member) -> dict[str, str]:
    user, _ = staff_member
    return auth_header(user.id)
