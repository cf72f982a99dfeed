"""
Staff Leave Service

CRUD over the leave ledger. Every mutation commits first and then resyncs the
affected PTO balances on a best-effort basis, so a failed sync never rolls
back or blocks the leave change itself.
"""
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models.instructor import Instructor
from app.models.staff_leave import StaffLeave
from app.schemas.leave import StaffLeaveCreate, StaffLeaveUpdate
from app.services.base import BaseService
from app.services.pto_balance_service import (
    BalanceSynchronizer,
    LeaveState,
    affected_balances,
    best_effort_sync,
)
from app.services.pto_storage import PtoStorage

REQUIRED_FIELDS = ("leave_type", "start_date", "end_date", "pto_days", "rr_days", "status")


class StaffLeaveService(BaseService):
    def __init__(self, db: Session, synchronizer: Optional[BalanceSynchronizer] = None):
        super().__init__(db)
        self.synchronizer = synchronizer or BalanceSynchronizer(PtoStorage(db))

    def list_records(self, instructor_id: Optional[int] = None, status: Optional[str] = None) -> List[StaffLeave]:
        query = self.db.query(StaffLeave)
        if instructor_id is not None:
            query = query.filter(StaffLeave.instructor_id == instructor_id)
        if status:
            query = query.filter(func.lower(StaffLeave.status) == status.lower())
        return query.order_by(StaffLeave.start_date.desc()).all()

    def get(self, leave_id: int) -> StaffLeave:
        leave = self.db.get(StaffLeave, leave_id)
        if leave is None:
            raise NotFoundError("Leave record", leave_id)
        return leave

    def create(self, data: StaffLeaveCreate) -> StaffLeave:
        if self.db.get(Instructor, data.instructor_id) is None:
            raise NotFoundError("Instructor", data.instructor_id)

        leave = StaffLeave(**data.model_dump())
        self.db.add(leave)
        self.commit()
        self.db.refresh(leave)
        self.log_info(f"Created leave record {leave.id} for instructor {leave.instructor_id}")

        self._sync(affected_balances(None, LeaveState.of(leave)))
        return leave

    def update(self, leave_id: int, data: StaffLeaveUpdate) -> StaffLeave:
        leave = self.get(leave_id)
        before = LeaveState.of(leave)

        changes = data.model_dump(exclude_unset=True)
        cleared = [f for f in REQUIRED_FIELDS if f in changes and changes[f] is None]
        if cleared:
            raise ValidationError(f"Required fields cannot be cleared: {', '.join(cleared)}")
        start = changes.get("start_date", leave.start_date)
        end = changes.get("end_date", leave.end_date)
        if end < start:
            raise ValidationError("end_date must not be before start_date")

        for field, value in changes.items():
            setattr(leave, field, value)

        self.commit()
        self.db.refresh(leave)
        self.log_info(f"Updated leave record {leave.id}: {sorted(changes)}")

        self._sync(affected_balances(before, LeaveState.of(leave)))
        return leave

    def set_status(self, leave_id: int, status: str) -> StaffLeave:
        return self.update(leave_id, StaffLeaveUpdate(status=status))

    def delete(self, leave_id: int) -> None:
        leave = self.get(leave_id)
        before = LeaveState.of(leave)
        self.db.delete(leave)
        self.commit()
        self.log_info(f"Deleted leave record {leave_id}")

        self._sync(affected_balances(before, None))

    def _sync(self, balances: List[Tuple[int, int]]) -> None:
        for instructor_id, year in balances:
            best_effort_sync(self.synchronizer, instructor_id, year)
