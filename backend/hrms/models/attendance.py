from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import relationship

from hrms.core import clock
from hrms.db.session import Base
from hrms.domains.attendance.rules import apply_attendance_rule


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
        Index("ix_attendance_date", "date"),
        Index("ix_attendance_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    date = Column(Date, nullable=False)
    check_in = Column(DateTime, nullable=True)
    check_out = Column(DateTime, nullable=True)
    breaks = Column(JSON, nullable=False, default=list)  # [{start, end, duration}], minutes
    working_hours = Column(Float, nullable=False, default=0)
    overtime_hours = Column(Float, nullable=False, default=0)
    status = Column(String(20), nullable=False)  # present|absent|late|half-day|holiday|leave
    manually_marked = Column(Boolean, nullable=False, default=False)
    notes = Column(String(500), nullable=True)
    check_in_location = Column(String(255), nullable=True)
    check_out_location = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=clock.utcnow)
    updated_at = Column(DateTime, default=clock.utcnow, onupdate=clock.utcnow)

    employee = relationship("Employee")


@event.listens_for(Attendance, "before_insert")
@event.listens_for(Attendance, "before_update")
def recompute_hours(mapper, connection, target: Attendance) -> None:
    apply_attendance_rule(target)
