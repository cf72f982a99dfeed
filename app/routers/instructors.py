from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.database import get_db
from app.models.instructor import Instructor
from app.schemas.instructor import InstructorCreate, InstructorResponse

router = APIRouter(prefix="/instructors", tags=["instructors"])


@router.get("", response_model=List[InstructorResponse])
def list_instructors(db: Session = Depends(get_db)):
    return db.query(Instructor).order_by(Instructor.name).all()


@router.get("/{instructor_id}", response_model=InstructorResponse)
def get_instructor(instructor_id: int, db: Session = Depends(get_db)):
    instructor = db.get(Instructor, instructor_id)
    if not instructor:
        raise NotFoundError("Instructor", instructor_id)
    return instructor


@router.post("", response_model=InstructorResponse, status_code=status.HTTP_201_CREATED)
def create_instructor(payload: InstructorCreate, db: Session = Depends(get_db)):
    instructor = Instructor(**payload.model_dump())
    db.add(instructor)
    db.commit()
    db.refresh(instructor)
    return instructor


@router.delete("/{instructor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_instructor(instructor_id: int, db: Session = Depends(get_db)):
    instructor = db.get(Instructor, instructor_id)
    if not instructor:
        raise NotFoundError("Instructor", instructor_id)
    # Leave records and balances cascade with the instructor
    db.delete(instructor)
    db.commit()
