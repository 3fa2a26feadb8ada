from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
import logging

from database import get_db
from utils.tenancy import get_tenant_id
import crud.feed_analytics as crud_feed_analytics
import crud.weight_sampling as crud_weight_sampling
import crud.flock as crud_flock
from schemas.fcr import FCRReport, FCRResult, MonthlyEfficiency
from schemas.weight_sampling import WeightSamplingStats, WeightTrendPoint

logger = logging.getLogger(__name__)

# Longest weight-trend window, about ten years
MAX_TREND_DAYS = 3650

router = APIRouter(
    prefix="/feed-analytics",
    tags=["Feed Analytics"],
)


def _validate_range(start_date: Optional[date], end_date: Optional[date]):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="Start date must be before end date")


@router.get("/fcr", response_model=FCRReport)
def get_feed_conversion_ratio(
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Feed conversion ratio from weight samplings and feed usage, for one flock
    or for every active flock when no flock_id is given.
    """
    _validate_range(start_date, end_date)
    try:
        return crud_feed_analytics.get_feed_conversion_ratio(
            db=db,
            tenant_id=tenant_id,
            flock_id=flock_id,
            start_date=start_date,
            end_date=end_date
        )
    except ValueError as e:
        logger.warning("FCR requested for unknown flock %s (tenant %s)", flock_id, tenant_id)
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception(f"Error calculating feed conversion ratio: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while calculating feed conversion ratio.")


@router.get("/efficiency-stats", response_model=MonthlyEfficiency)
def get_feed_efficiency_stats(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Current month's FCR, feed used and feed per bird per day across all flocks."""
    try:
        return crud_feed_analytics.get_feed_efficiency_stats(db=db, tenant_id=tenant_id)
    except Exception as e:
        logger.exception(f"Error getting feed efficiency stats: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while getting feed efficiency stats.")


@router.get("/weight-sampling-fcr", response_model=List[FCRResult])
def get_weight_sampling_with_fcr(
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    _validate_range(start_date, end_date)
    try:
        return crud_feed_analytics.get_weight_sampling_with_fcr(
            db=db,
            tenant_id=tenant_id,
            flock_id=flock_id,
            start_date=start_date,
            end_date=end_date
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception(f"Error getting weight sampling with FCR: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while getting weight sampling with FCR.")


@router.get("/weight-sampling-stats", response_model=WeightSamplingStats)
def get_weight_sampling_stats(
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    _validate_range(start_date, end_date)
    return crud_weight_sampling.get_weight_sampling_stats(
        db=db,
        tenant_id=tenant_id,
        flock_id=flock_id,
        start_date=start_date,
        end_date=end_date
    )


@router.get("/weight-trend/{flock_id}", response_model=List[WeightTrendPoint])
def get_flock_weight_trend(
    flock_id: str,
    days: int = 30,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Average weight per sampling over the last `days` days."""
    if days <= 0 or days > MAX_TREND_DAYS:
        raise HTTPException(status_code=400, detail=f"Days must be between 1 and {MAX_TREND_DAYS}")
    if crud_flock.get_flock(db, flock_id=flock_id, tenant_id=tenant_id) is None:
        raise HTTPException(status_code=404, detail="Flock not found")
    return crud_weight_sampling.get_flock_weight_trend(db, flock_id=flock_id, tenant_id=tenant_id, days=days)
