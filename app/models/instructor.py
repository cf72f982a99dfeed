from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class Instructor(Base):
    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    nationality = Column(String, nullable=True)
    credentials = Column(String, nullable=True)
    school_id = Column(Integer, nullable=True, index=True)
    role = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Ledger and balances go with the instructor
    leave_records = relationship("StaffLeave", back_populates="instructor", cascade="all, delete-orphan")
    pto_balances = relationship("PtoBalance", back_populates="instructor", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Instructor {self.id} {self.name}>"
