from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from models.feed_usage import FeedUsage


def _filtered(query, tenant_id: str, flock_id: Optional[str], start_date: Optional[date], end_date: Optional[date]):
    query = query.filter(FeedUsage.tenant_id == tenant_id)
    if flock_id:
        query = query.filter(FeedUsage.flock_id == flock_id)
    if start_date:
        query = query.filter(FeedUsage.date >= start_date)
    if end_date:
        query = query.filter(FeedUsage.date <= end_date)
    return query


def get_feed_usage(
    db: Session,
    tenant_id: str,
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[FeedUsage]:
    """Feed usage records ordered ascending by date; the date range is inclusive."""
    return _filtered(db.query(FeedUsage), tenant_id, flock_id, start_date, end_date).order_by(
        FeedUsage.date.asc(), FeedUsage.id.asc()
    ).all()


def get_total_feed_used(
    db: Session,
    tenant_id: str,
    start_date: date,
    end_date: date,
    flock_id: Optional[str] = None,
) -> float:
    total = _filtered(
        db.query(func.sum(FeedUsage.amount_used)), tenant_id, flock_id, start_date, end_date
    ).scalar()
    return float(total or 0)
