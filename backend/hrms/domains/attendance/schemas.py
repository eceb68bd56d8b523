import datetime as dt
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from hrms.core import clock

AttendanceStatus = Literal["present", "absent", "late", "half-day", "holiday", "leave"]


class LocationRequest(BaseModel):
    location: Optional[str] = Field(default=None, max_length=255)


class BreakRequest(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    duration: Optional[float] = Field(default=None, ge=0, description="Minutes")

    @field_validator("start", "end")
    @classmethod
    def wall_clock(cls, value: Optional[datetime]) -> Optional[datetime]:
        return clock.to_wall_clock(value) if value else value

    @model_validator(mode="after")
    def resolve_duration(self) -> "BreakRequest":
        if self.start and self.end:
            if self.end < self.start:
                raise ValueError("Break end must be after its start")
            if self.duration is None:
                self.duration = (self.end - self.start).total_seconds() / 60
        if self.duration is None:
            raise ValueError("Provide a duration or both start and end")
        return self

    def as_record(self) -> dict:
        return self.model_dump(mode="json")


class MarkAttendanceRequest(BaseModel):
    employee_id: int
    date: dt.date
    status: AttendanceStatus
    notes: Optional[str] = Field(default=None, max_length=500)


class AttendanceUpdate(BaseModel):
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    breaks: Optional[list[BreakRequest]] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("check_in", "check_out")
    @classmethod
    def wall_clock(cls, value: Optional[datetime]) -> Optional[datetime]:
        return clock.to_wall_clock(value) if value else value


class EmployeeRef(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str


class Location(BaseModel):
    check_in_location: Optional[str] = None
    check_out_location: Optional[str] = None


class AttendanceOut(BaseModel):
    id: int
    employee: EmployeeRef
    date: dt.date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    breaks: list[dict]
    working_hours: float
    overtime_hours: float
    status: str
    manually_marked: bool
    notes: Optional[str] = None
    location: Location
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
