from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional

class PtoBalanceResponse(BaseModel):
    id: int
    instructor_id: int
    year: int
    total_days: int
    used_days: int
    remaining_days: int
    adjustments: int
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)

class PtoBalanceUpdate(BaseModel):
    """Operator-owned fields; derived fields are recomputed afterwards."""
    total_days: Optional[int] = Field(default=None, ge=0)
    adjustments: Optional[int] = None

class SyncOutcome(BaseModel):
    instructor_id: int
    instructor_name: str
    succeeded: bool
    used_days: Optional[int] = None
    remaining_days: Optional[int] = None
    error: Optional[str] = None

class SyncAllResult(BaseModel):
    year: int
    succeeded: int
    failed: int
    results: List[SyncOutcome]
