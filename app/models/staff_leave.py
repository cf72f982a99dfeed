from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import enum

class LeaveStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    COMPLETED = "Completed"

class LeaveType(str, enum.Enum):
    PTO = "PTO"
    RR = "R&R"

def normalize(value) -> str:
    """Case-insensitive comparison key for status / leave type strings."""
    return (value or "").strip().lower()

class StaffLeave(Base):
    """One instructor's request for time away (the leave ledger)."""
    __tablename__ = "staff_leave"

    id = Column(Integer, primary_key=True, index=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False, index=True)
    employee_id = Column(String, nullable=True)
    leave_type = Column(String, nullable=False, index=True)  # "PTO", "R&R", anything else is non-PTO
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=True)
    pto_days = Column(Integer, nullable=False, default=0)
    rr_days = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default=LeaveStatus.PENDING.value, index=True)
    destination = Column(String, nullable=True)
    comments = Column(Text, nullable=True)
    attachment_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    instructor = relationship("Instructor", back_populates="leave_records")

    @property
    def is_approved(self) -> bool:
        return normalize(self.status) == normalize(LeaveStatus.APPROVED.value)

    @property
    def is_pto(self) -> bool:
        return normalize(self.leave_type) == normalize(LeaveType.PTO.value)

    @property
    def is_rr(self) -> bool:
        return normalize(self.leave_type) == normalize(LeaveType.RR.value)
