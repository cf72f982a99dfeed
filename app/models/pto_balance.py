from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

# Portable range of the Integer year column (32-bit signed on PostgreSQL)
YEAR_MIN = -(2 ** 31)
YEAR_MAX = 2 ** 31 - 1

class PtoBalance(Base):
    """Per-year leave allowance bookkeeping for one instructor."""
    __tablename__ = "pto_balance"
    __table_args__ = (
        UniqueConstraint("instructor_id", "year", name="uq_pto_balance_instructor_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    total_days = Column(Integer, nullable=False, default=21)
    used_days = Column(Integer, nullable=False, default=0)
    remaining_days = Column(Integer, nullable=False, default=21)
    adjustments = Column(Integer, nullable=False, default=0)  # signed manual correction
    last_updated = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    instructor = relationship("Instructor", back_populates="pto_balances")
