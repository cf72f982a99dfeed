# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import instructor, staff_leave, pto_balance

# Explicit class exports for cleaner imports
from .instructor import Instructor
from .staff_leave import StaffLeave, LeaveStatus, LeaveType
from .pto_balance import PtoBalance

__all__ = [
    "Instructor",
    "StaffLeave",
    "LeaveStatus",
    "LeaveType",
    "PtoBalance",
]
