from datetime import date, datetime, time, timedelta

from sqlalchemy.orm import Session

from hrms.core.logging import configure_logging, get_logger
from hrms.core.security import hash_password
from hrms.db.session import Base, engine, session_scope
from hrms.models import Attendance, Employee, User

logger = get_logger(__name__)

DEFAULT_ADDRESS = {
    "street": "123 Business Rd",
    "city": "Orlando",
    "state": "FL",
    "zip_code": "32801",
    "country": "USA",
}


def _user(email: str, role: str, first_name: str, last_name: str, password: str) -> User:
    return User(
        email=email,
        hashed_password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
    )


def _employee(user: User, department: str, position: str, basic: int, manager: Employee | None = None) -> Employee:
    return Employee(
        user_id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone="4075550100",
        date_of_birth=date(1990, 1, 1),
        gender="other",
        address=dict(DEFAULT_ADDRESS),
        emergency_contact={"name": "Pat Doe", "relationship": "Sibling", "phone": "4075550199"},
        department=department,
        position=position,
        start_date=date(2022, 1, 3),
        reporting_manager_id=manager.id if manager else None,
        basic_salary=basic,
        allowances=500,
        documents={},
    )


def seed(session: Session, today: date | None = None) -> None:
    today = today or date.today()
    if session.query(User).filter(User.email == "admin@example.com").first():
        logger.info("seed_skipped", reason="already seeded")
        return

    admin = _user("admin@example.com", "admin", "Ada", "Admin", "admin123")
    hr = _user("hr@example.com", "hr", "Harper", "Reed", "hr123456")
    alice = _user("alice@example.com", "employee", "Alice", "Nguyen", "employee123")
    bob = _user("bob@example.com", "employee", "Bob", "Martin", "employee123")
    session.add_all([admin, hr, alice, bob])
    session.flush()

    # Employee codes come from a row count, so insert one at a time
    lead = _employee(alice, "Engineering", "Engineering Lead", 7000)
    session.add(lead)
    session.flush()
    engineer = _employee(bob, "Engineering", "Software Engineer", 5000, manager=lead)
    session.add(engineer)
    session.flush()
    alice.employee_code = lead.employee_code
    bob.employee_code = engineer.employee_code

    for offset in range(1, 8):
        day = today - timedelta(days=offset)
        if day.weekday() >= 5:
            continue
        for employee, start in ((lead, time(8, 55)), (engineer, time(9, 10))):
            session.add(
                Attendance(
                    employee_id=employee.id,
                    date=day,
                    check_in=datetime.combine(day, start),
                    check_out=datetime.combine(day, time(17, 45)),
                    breaks=[{"start": None, "end": None, "duration": 30}],
                    status="present",
                )
            )

    logger.info("seed_complete", users=4, employees=2)


def main() -> None:
    configure_logging()
    Base.metadata.create_all(bind=engine)
    with session_scope() as session:
        seed(session)


if __name__ == "__main__":
    main()
