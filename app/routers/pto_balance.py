"""
PTO Balance Router

Read, adjust and resync instructor leave balances.
All computation is delegated to the PTO balance service layer.
"""
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.core.schemas import ApiResponse
from app.database import get_db
from app.schemas.pto_balance import PtoBalanceResponse, PtoBalanceUpdate, SyncAllResult
from app.services.pto_balance_service import (
    BalanceSynchronizer,
    adjust_balance,
    parse_year,
    year_from_payload,
)
from app.services.pto_storage import PtoStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pto-balance", tags=["pto-balance"])


def get_synchronizer(db: Session = Depends(get_db)) -> BalanceSynchronizer:
    return BalanceSynchronizer(PtoStorage(db))


@router.get("", response_model=List[PtoBalanceResponse])
def list_balances(
    year: Optional[int] = None,
    instructor_id: Optional[int] = None,
    synchronizer: BalanceSynchronizer = Depends(get_synchronizer),
):
    return synchronizer.storage.list_balance_snapshots(year=year, instructor_id=instructor_id)


@router.post("/sync-all")
@limiter.limit(settings.pto.sync_all_rate_limit)
def sync_all_balances(
    request: Request,
    payload: Any = Body(default=None),
    synchronizer: BalanceSynchronizer = Depends(get_synchronizer),
):
    """
    Resync every instructor's balance for one year.

    Returns 200 even when some instructors fail; their outcomes carry the error.
    """
    year = year_from_payload(payload)
    outcomes = synchronizer.synchronize_all(year)

    failed = sum(1 for o in outcomes if not o.succeeded)
    result = SyncAllResult(
        year=year,
        succeeded=len(outcomes) - failed,
        failed=failed,
        results=outcomes,
    )
    message = f"Synchronized PTO balances for {result.succeeded} of {len(outcomes)} instructors for {year}"
    if failed:
        message += f" ({failed} failed)"
    logger.info(message)
    return ApiResponse.ok(result, message=message).to_dict()


@router.get("/{instructor_id}/{year}", response_model=PtoBalanceResponse)
def get_balance(
    instructor_id: int,
    year: int,
    synchronizer: BalanceSynchronizer = Depends(get_synchronizer),
):
    """Current balance, recomputed from the ledger on read."""
    return synchronizer.synchronize(instructor_id, parse_year(year))


@router.patch("/{instructor_id}/{year}", response_model=PtoBalanceResponse)
def update_balance(
    instructor_id: int,
    year: int,
    payload: PtoBalanceUpdate,
    synchronizer: BalanceSynchronizer = Depends(get_synchronizer),
):
    return adjust_balance(
        synchronizer,
        instructor_id,
        parse_year(year),
        total_days=payload.total_days,
        adjustments=payload.adjustments,
    )


@router.post("/{instructor_id}/{year}/sync", response_model=PtoBalanceResponse)
def sync_balance(
    instructor_id: int,
    year: int,
    synchronizer: BalanceSynchronizer = Depends(get_synchronizer),
):
    return synchronizer.synchronize(instructor_id, parse_year(year))
