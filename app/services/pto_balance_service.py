"""
PTO Balance Service

Recomputes an instructor's yearly leave balance from the staff leave ledger.

Architecture:
- Router / leave service -> BalanceSynchronizer (this module) -> PtoStorage -> Models
- The synchronizer is the only writer of used_days, remaining_days and last_updated
- total_days and adjustments are operator fields: synchronize reads them, only
  adjust_balance writes them (together with the derived fields)
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.locks import KeyedLock, balance_locks
from app.core.metrics import record_sync
from app.models.pto_balance import PtoBalance, YEAR_MIN, YEAR_MAX
from app.models.staff_leave import StaffLeave, LeaveStatus, LeaveType, normalize
from app.schemas.pto_balance import SyncOutcome
from app.services.pto_storage import PtoStorage

logger = logging.getLogger(__name__)


def calculate_used_days(records: Iterable[StaffLeave], max_used_days: int) -> int:
    """
    Sum approved PTO and R&R days and clamp to the annual ceiling.

    R&R days draw from the same pool as PTO. This mirrors how the school has
    always booked R&R; whether the two should be separate allowances is still
    an open product question.
    """
    pto_sum = 0
    rr_sum = 0
    for record in records:
        if not record.is_approved:
            continue
        if record.is_pto:
            pto_sum += record.pto_days or 0
        elif record.is_rr:
            rr_sum += record.rr_days or 0
    # NOTE: the ceiling is a fixed policy value and deliberately ignores the
    # snapshot's own total_days. Likely a latent bug for instructors with a
    # non-default allowance; confirm with HR before switching to total_days.
    return min(pto_sum + rr_sum, max_used_days)


def calculate_remaining_days(total_days: int, used_days: int, adjustments: int) -> int:
    return max(0, (total_days or 0) - used_days + (adjustments or 0))


class BalanceSynchronizer:
    def __init__(
        self,
        storage: PtoStorage,
        default_total_days: Optional[int] = None,
        max_used_days: Optional[int] = None,
        locks: KeyedLock = balance_locks,
    ):
        self.storage = storage
        self.default_total_days = default_total_days if default_total_days is not None else settings.pto.default_total_days
        self.max_used_days = max_used_days if max_used_days is not None else settings.pto.max_used_days
        self.locks = locks

    def synchronize(self, instructor_id: int, year: int) -> PtoBalance:
        """
        Recompute and persist the balance snapshot for (instructor_id, year).

        Creates the snapshot on first use. Raises NotFoundError for an unknown
        instructor and StorageError when the database fails.
        """
        try:
            saved = self._reconcile(instructor_id, year)
        except Exception:
            record_sync(False)
            raise
        record_sync(True)
        logger.info(
            f"PTO balance synced for instructor {instructor_id}/{year}: "
            f"used={saved.used_days} remaining={saved.remaining_days}",
            extra={"instructor_id": instructor_id, "year": year},
        )
        return saved

    def _reconcile(
        self,
        instructor_id: int,
        year: int,
        total_days: Optional[int] = None,
        adjustments: Optional[int] = None,
    ) -> PtoBalance:
        """Apply operator fields (if any) and derived fields in one upsert."""
        if self.storage.get_instructor(instructor_id) is None:
            raise NotFoundError("Instructor", instructor_id)

        # Read-modify-write of one snapshot row is serialized per key
        with self.locks.hold((instructor_id, year)):
            records = self.storage.list_approved_leave_for_instructor_and_year(instructor_id, year)
            used_days = calculate_used_days(records, self.max_used_days)

            snapshot = self.storage.get_balance_snapshot(instructor_id, year, for_update=True)
            if snapshot is None:
                snapshot = PtoBalance(
                    instructor_id=instructor_id,
                    year=year,
                    total_days=self.default_total_days,
                    adjustments=0,
                )
            if total_days is not None:
                snapshot.total_days = total_days
            if adjustments is not None:
                snapshot.adjustments = adjustments
            snapshot.used_days = used_days
            snapshot.remaining_days = calculate_remaining_days(
                snapshot.total_days, used_days, snapshot.adjustments
            )
            snapshot.last_updated = datetime.now(timezone.utc)

            return self.storage.upsert_balance_snapshot(snapshot)

    def synchronize_all(self, year: int) -> List[SyncOutcome]:
        """
        Resync every instructor for a year, one at a time.

        A failure is recorded in that instructor's outcome and the loop moves
        on; only failing to list instructors aborts the batch.
        """
        outcomes: List[SyncOutcome] = []
        for instructor_id, name in self.storage.list_all_instructors():
            try:
                snapshot = self.synchronize(instructor_id, year)
            except Exception as e:
                self.storage.rollback()
                message = getattr(e, "message", None) or str(e) or e.__class__.__name__
                logger.warning(
                    f"PTO sync failed for instructor {instructor_id}/{year}: {message}",
                    exc_info=True,
                )
                outcomes.append(SyncOutcome(
                    instructor_id=instructor_id,
                    instructor_name=name,
                    succeeded=False,
                    error=message,
                ))
                continue
            outcomes.append(SyncOutcome(
                instructor_id=instructor_id,
                instructor_name=name,
                succeeded=True,
                used_days=snapshot.used_days,
                remaining_days=snapshot.remaining_days,
            ))
        return outcomes


def best_effort_sync(synchronizer: BalanceSynchronizer, instructor_id: int, year: int) -> Optional[PtoBalance]:
    """
    Sync called as a side effect of a ledger mutation.

    Failures are logged and discarded: the mutation has already been committed
    and a stale balance is repaired by the next successful sync.
    """
    try:
        return synchronizer.synchronize(instructor_id, year)
    except Exception as e:
        synchronizer.storage.rollback()
        logger.warning(
            f"Best-effort PTO sync failed for instructor {instructor_id}/{year}: {e}",
            exc_info=True,
        )
        return None


# --- Trigger rule ---

@dataclass(frozen=True)
class LeaveState:
    """The fields of a ledger row that decide whether a balance must be resynced."""
    instructor_id: int
    leave_type: str
    status: str
    start_date: date
    pto_days: int
    rr_days: int

    @classmethod
    def of(cls, record: StaffLeave) -> "LeaveState":
        return cls(
            instructor_id=record.instructor_id,
            leave_type=record.leave_type,
            status=record.status,
            start_date=record.start_date,
            pto_days=record.pto_days or 0,
            rr_days=record.rr_days or 0,
        )

    @property
    def counts_against_balance(self) -> bool:
        return normalize(self.status) == normalize(LeaveStatus.APPROVED.value) and normalize(self.leave_type) in (
            normalize(LeaveType.PTO.value),
            normalize(LeaveType.RR.value),
        )


def affected_balances(before: Optional[LeaveState], after: Optional[LeaveState]) -> List[Tuple[int, int]]:
    """
    (instructor_id, year) pairs to resync after a create (before=None),
    update, or delete (after=None) of one leave record.

    A change matters when the record counts against the balance on either
    side of the mutation; that also covers day-count edits on an approved
    record. Moving start_date across a year boundary touches both years.
    """
    states = [s for s in (before, after) if s is not None]
    if not any(s.counts_against_balance for s in states):
        return []
    return sorted({(s.instructor_id, s.start_date.year) for s in states})


# --- Operator helpers ---

def parse_year(value) -> int:
    """
    Accept an int or a base-10 integer string that the year column can hold;
    anything else is rejected.
    """
    if isinstance(value, bool):
        raise ValidationError("year must be an integer", error_code="INVALID_YEAR", details={"year": value})
    if isinstance(value, int):
        year = value
    elif isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
        year = int(value.strip())
    else:
        raise ValidationError("year must be an integer", error_code="INVALID_YEAR", details={"year": value})
    if year < YEAR_MIN or year > YEAR_MAX:
        raise ValidationError(
            f"year must be between {YEAR_MIN} and {YEAR_MAX}",
            error_code="INVALID_YEAR",
            details={"year": str(year)},
        )
    return year


def year_from_payload(payload) -> int:
    """Pull `year` out of a sync-all request body."""
    if not isinstance(payload, dict):
        raise ValidationError("request body must be an object with a year", error_code="INVALID_YEAR")
    return parse_year(payload.get("year"))


def adjust_balance(
    synchronizer: BalanceSynchronizer,
    instructor_id: int,
    year: int,
    total_days: Optional[int] = None,
    adjustments: Optional[int] = None,
) -> PtoBalance:
    """Change the operator-owned fields of a snapshot and recompute it in the same write."""
    saved = synchronizer._reconcile(instructor_id, year, total_days=total_days, adjustments=adjustments)
    logger.info(
        f"PTO balance settings changed for instructor {instructor_id}/{year}: "
        f"total_days={saved.total_days} adjustments={saved.adjustments} remaining={saved.remaining_days}",
        extra={"instructor_id": instructor_id, "year": year},
    )
    return saved
