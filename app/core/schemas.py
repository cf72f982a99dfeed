from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone

T = TypeVar("T")

class ErrorInfo(BaseModel):
    msg: str
    code: Optional[str] = None
    field: Optional[str] = None

class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by endpoints that report more than a single resource."""
    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    success: bool
    message: Optional[str] = None
    data: Optional[T] = None
    errors: List[ErrorInfo] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with JSON-serializable values."""
        return self.model_dump(mode="json")

    @classmethod
    def ok(cls, data: T, message: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, msg: str, code: str = "ERROR", field: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=False, errors=[ErrorInfo(msg=msg, code=code, field=field)])
