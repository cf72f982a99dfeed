from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

class InstructorCreate(BaseModel):
    name: str = Field(min_length=1)
    nationality: Optional[str] = None
    credentials: Optional[str] = None
    school_id: Optional[int] = None
    role: Optional[str] = None

class InstructorResponse(InstructorCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
