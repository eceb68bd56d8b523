from sqlalchemy import Boolean, Column, DateTime, Integer, String

from hrms.core import clock
from hrms.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="employee")  # admin|hr|employee
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)

    # Set once an Employee record is linked to this account
    employee_code = Column(String(20), nullable=True)

    created_at = Column(DateTime, default=clock.utcnow)
    updated_at = Column(DateTime, default=clock.utcnow, onupdate=clock.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
