"""
PTO Storage Layer

Relational queries consumed by the balance synchronizer. Every SQLAlchemy
failure is re-raised as StorageError so callers deal with a single error type.
"""
from datetime import date, MINYEAR, MAXYEAR
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import StorageError
from app.models.instructor import Instructor
from app.models.pto_balance import PtoBalance
from app.models.staff_leave import StaffLeave, LeaveStatus
from app.services.base import BaseService

# sqlite3 and psycopg2 raise OverflowError when binding an int the column cannot
# hold, and SQLAlchemy lets it through unwrapped
DB_ERRORS = (SQLAlchemyError, OverflowError)


class PtoStorage(BaseService):

    def get_instructor(self, instructor_id: int) -> Optional[Instructor]:
        try:
            return self.db.get(Instructor, instructor_id)
        except DB_ERRORS as e:
            raise StorageError(f"Failed to load instructor {instructor_id}: {e}") from e

    def list_all_instructors(self) -> List[Tuple[int, str]]:
        try:
            rows = self.db.query(Instructor.id, Instructor.name).order_by(Instructor.id).all()
        except DB_ERRORS as e:
            raise StorageError(f"Failed to list instructors: {e}") from e
        return [(row.id, row.name) for row in rows]

    def list_approved_leave_for_instructor_and_year(self, instructor_id: int, year: int) -> List[StaffLeave]:
        """Approved ledger rows whose start_date falls inside the calendar year."""
        if year < MINYEAR or year > MAXYEAR:
            return []
        try:
            return (
                self.db.query(StaffLeave)
                .filter(
                    StaffLeave.instructor_id == instructor_id,
                    StaffLeave.start_date >= date(year, 1, 1),
                    StaffLeave.start_date <= date(year, 12, 31),
                    func.lower(func.trim(StaffLeave.status)) == LeaveStatus.APPROVED.value.lower(),
                )
                .all()
            )
        except DB_ERRORS as e:
            raise StorageError(f"Failed to read leave records for instructor {instructor_id}: {e}") from e

    def get_balance_snapshot(self, instructor_id: int, year: int, for_update: bool = False) -> Optional[PtoBalance]:
        try:
            query = self.db.query(PtoBalance).filter(
                PtoBalance.instructor_id == instructor_id,
                PtoBalance.year == year,
            )
            if for_update:
                # Row lock on PostgreSQL; ignored by SQLite
                query = query.with_for_update()
            return query.first()
        except DB_ERRORS as e:
            raise StorageError(f"Failed to read PTO balance {instructor_id}/{year}: {e}") from e

    def list_balance_snapshots(self, year: Optional[int] = None, instructor_id: Optional[int] = None) -> List[PtoBalance]:
        try:
            query = self.db.query(PtoBalance)
            if year is not None:
                query = query.filter(PtoBalance.year == year)
            if instructor_id is not None:
                query = query.filter(PtoBalance.instructor_id == instructor_id)
            return query.order_by(PtoBalance.year.desc(), PtoBalance.instructor_id).all()
        except DB_ERRORS as e:
            raise StorageError(f"Failed to list PTO balances: {e}") from e

    def upsert_balance_snapshot(self, snapshot: PtoBalance) -> PtoBalance:
        """Insert a new snapshot or persist changes to a loaded one, in one commit."""
        try:
            self.db.add(snapshot)
            self.db.commit()
            self.db.refresh(snapshot)
        except DB_ERRORS as e:
            self.db.rollback()
            raise StorageError(
                f"Failed to save PTO balance {snapshot.instructor_id}/{snapshot.year}: {e}"
            ) from e
        return snapshot

    def rollback(self):
        try:
            self.db.rollback()
        except DB_ERRORS as e:
            self._logger.error(f"Rollback failed: {e}", exc_info=True)
