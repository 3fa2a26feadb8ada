from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional
from models.weight_sampling import WeightSampling
from schemas.weight_sampling import LatestSampling, WeightSamplingStats
from utils.date_utils import farm_today


def _filtered(query, tenant_id: str, flock_id: Optional[str], start_date: Optional[date], end_date: Optional[date]):
    query = query.filter(WeightSampling.tenant_id == tenant_id)
    if flock_id:
        query = query.filter(WeightSampling.flock_id == flock_id)
    if start_date:
        query = query.filter(WeightSampling.date >= start_date)
    if end_date:
        query = query.filter(WeightSampling.date <= end_date)
    return query


def get_weight_samples(
    db: Session,
    tenant_id: str,
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[WeightSampling]:
    """Weight samplings ordered ascending by date; the date range is inclusive."""
    return _filtered(db.query(WeightSampling), tenant_id, flock_id, start_date, end_date).order_by(
        WeightSampling.date.asc(), WeightSampling.id.asc()
    ).all()


def get_first_ever_sample_date(db: Session, flock_id: str, tenant_id: str) -> Optional[date]:
    """The flock's earliest sampling date across its whole history, or None."""
    return db.query(func.min(WeightSampling.date)).filter(
        WeightSampling.flock_id == flock_id,
        WeightSampling.tenant_id == tenant_id
    ).scalar()


def get_first_sample_dates(db: Session, flock_ids: Iterable[str], tenant_id: str) -> Dict[str, date]:
    """Same as get_first_ever_sample_date for several flocks in one grouped query."""
    flock_ids = list(flock_ids)
    if not flock_ids:
        return {}
    results = db.query(
        WeightSampling.flock_id,
        func.min(WeightSampling.date).label('first_date')
    ).filter(
        WeightSampling.flock_id.in_(flock_ids),
        WeightSampling.tenant_id == tenant_id
    ).group_by(WeightSampling.flock_id).all()
    return {flock_id: first_date for flock_id, first_date in results}


def get_weight_sampling_stats(
    db: Session,
    tenant_id: str,
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> WeightSamplingStats:
    total_samplings = _filtered(
        db.query(func.count(WeightSampling.id)), tenant_id, flock_id, start_date, end_date
    ).scalar() or 0
    average_weight = _filtered(
        db.query(func.avg(WeightSampling.average_weight)), tenant_id, flock_id, start_date, end_date
    ).scalar()
    latest = _filtered(db.query(WeightSampling), tenant_id, flock_id, start_date, end_date).order_by(
        WeightSampling.date.desc(), WeightSampling.id.desc()
    ).first()

    latest_sampling = None
    if latest:
        latest_sampling = LatestSampling(
            date=latest.date,
            average_weight=latest.average_weight,
            sample_size=latest.sample_size,
            flock_batch_code=latest.flock.batch_code,
        )

    return WeightSamplingStats(
        total_samplings=total_samplings,
        average_weight=float(average_weight or 0),
        latest_sampling=latest_sampling,
    )


def get_flock_weight_trend(
    db: Session,
    flock_id: str,
    tenant_id: str,
    days: int = 30,
    today: Optional[date] = None,
) -> List[WeightSampling]:
    end_date = today or farm_today()
    start_date = end_date - timedelta(days=days)
    return get_weight_samples(db, tenant_id, flock_id=flock_id, start_date=start_date, end_date=end_date)
