"""
Staff Leave Router

HTTP endpoints for the leave ledger. Business rules, including the balance
resync that follows each mutation, live in StaffLeaveService.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.staff_leave import LeaveStatus
from app.schemas.leave import StaffLeaveCreate, StaffLeaveUpdate, StaffLeaveResponse
from app.services.staff_leave_service import StaffLeaveService

router = APIRouter(prefix="/staff-leave", tags=["staff-leave"])


def get_leave_service(db: Session = Depends(get_db)) -> StaffLeaveService:
    return StaffLeaveService(db)


@router.get("", response_model=List[StaffLeaveResponse])
def list_staff_leave(
    instructor_id: Optional[int] = None,
    status: Optional[str] = None,
    service: StaffLeaveService = Depends(get_leave_service),
):
    return service.list_records(instructor_id=instructor_id, status=status)


@router.get("/{leave_id}", response_model=StaffLeaveResponse)
def get_staff_leave(leave_id: int, service: StaffLeaveService = Depends(get_leave_service)):
    return service.get(leave_id)


@router.post("", response_model=StaffLeaveResponse, status_code=status.HTTP_201_CREATED)
def create_staff_leave(payload: StaffLeaveCreate, service: StaffLeaveService = Depends(get_leave_service)):
    return service.create(payload)


@router.patch("/{leave_id}", response_model=StaffLeaveResponse)
def update_staff_leave(
    leave_id: int,
    payload: StaffLeaveUpdate,
    service: StaffLeaveService = Depends(get_leave_service),
):
    return service.update(leave_id, payload)


@router.patch("/{leave_id}/approve", response_model=StaffLeaveResponse)
def approve_staff_leave(leave_id: int, service: StaffLeaveService = Depends(get_leave_service)):
    return service.set_status(leave_id, LeaveStatus.APPROVED.value)


@router.patch("/{leave_id}/reject", response_model=StaffLeaveResponse)
def reject_staff_leave(leave_id: int, service: StaffLeaveService = Depends(get_leave_service)):
    return service.set_status(leave_id, LeaveStatus.REJECTED.value)


@router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff_leave(leave_id: int, service: StaffLeaveService = Depends(get_leave_service)):
    service.delete(leave_id)
