from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, datetime
from typing import Optional

from app.models.staff_leave import LeaveStatus

class StaffLeaveBase(BaseModel):
    leave_type: str = Field(min_length=1)
    start_date: date
    end_date: date
    return_date: Optional[date] = None
    pto_days: int = Field(default=0, ge=0)
    rr_days: int = Field(default=0, ge=0)
    destination: Optional[str] = None
    comments: Optional[str] = None
    employee_id: Optional[str] = None
    attachment_url: Optional[str] = None

class StaffLeaveCreate(StaffLeaveBase):
    instructor_id: int
    status: str = LeaveStatus.PENDING.value

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class StaffLeaveUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""
    leave_type: Optional[str] = Field(default=None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    return_date: Optional[date] = None
    pto_days: Optional[int] = Field(default=None, ge=0)
    rr_days: Optional[int] = Field(default=None, ge=0)
    status: Optional[str] = None
    destination: Optional[str] = None
    comments: Optional[str] = None
    employee_id: Optional[str] = None
    attachment_url: Optional[str] = None

class StaffLeaveResponse(StaffLeaveBase):
    id: int
    instructor_id: int
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
