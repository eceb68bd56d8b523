from .attendance import Attendance
from .employee import Employee
from .payroll import Payroll
from .user import User

__all__ = ["User", "Employee", "Attendance", "Payroll"]
