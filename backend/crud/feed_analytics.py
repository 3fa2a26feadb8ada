from sqlalchemy.orm import Session
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
import logging

import crud.flock as crud_flock
import crud.feed_usage as crud_feed_usage
import crud.weight_sampling as crud_weight_sampling
from models.flock import Flock
from schemas.fcr import FCRReport, FCRResult, FlockFCRSummary, MonthlyEfficiency, WeightGainDetails
from utils.date_utils import (
    FCR_DEFAULT_RANGE_DAYS,
    WEIGHT_SAMPLING_DEFAULT_RANGE_DAYS,
    days_in_month,
    farm_today,
    month_start,
    resolve_date_range,
)
from utils.fcr_utils import reconcile, safe_ratio, whole_window_summary

logger = logging.getLogger(__name__)


def _group_by_flock(rows) -> Dict[str, list]:
    grouped = defaultdict(list)
    for row in rows:
        grouped[row.flock_id].append(row)
    return grouped


def _flock_summary(flock: Flock, details: WeightGainDetails, feed_used: float) -> FlockFCRSummary:
    """Whole-window FCR for one flock from the first and last sampling in range."""
    has_weight_data = details.sample_count >= 2

    return FlockFCRSummary(
        flock_id=flock.id,
        batch_code=flock.batch_code,
        feed_used=feed_used,
        weight_gain=details.weight_gain,
        fcr=safe_ratio(feed_used, details.weight_gain) if has_weight_data else 0.0,
        has_weight_data=has_weight_data,
        sample_count=details.sample_count,
        initial_weight=details.initial_weight,
        final_weight=details.final_weight,
        average_daily_gain=details.average_daily_gain,
        first_sampling_date=details.first_sampling_date,
        last_sampling_date=details.last_sampling_date,
    )


def _total_feed(usage: list) -> float:
    return sum(float(u.amount_used or 0) for u in usage)


def get_feed_conversion_ratio(
    db: Session,
    tenant_id: str,
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> FCRReport:
    """
    Feed conversion ratio over a date range, defaulting to the last 90 days.

    With a flock_id the report covers that flock only and carries per-sampling
    insight records. Without one, every active flock gets its own summary and
    the overall figure divides the active flocks' feed by the summed weight
    gain of those that have weight data. Feed and samplings of inactive flocks
    are left out of the totals, so they always add up to the per_flock rows.
    """
    start_date, end_date = resolve_date_range(start_date, end_date, FCR_DEFAULT_RANGE_DAYS, today)

    if flock_id:
        flock = crud_flock.get_flock(db, flock_id=flock_id, tenant_id=tenant_id)
        if flock is None:
            raise ValueError(f"Flock with ID {flock_id} not found.")
        current_count = flock.current_count or 0
        samples = crud_weight_sampling.get_weight_samples(db, tenant_id, flock_id=flock_id, start_date=start_date, end_date=end_date)
        usage = crud_feed_usage.get_feed_usage(db, tenant_id, flock_id=flock_id, start_date=start_date, end_date=end_date)
        first_sample_date = crud_weight_sampling.get_first_ever_sample_date(db, flock_id=flock_id, tenant_id=tenant_id)

        details = whole_window_summary(samples, current_count)
        summary = _flock_summary(flock, details, _total_feed(usage))
        insights = reconcile(flock_id, samples, usage, current_count, first_sample_date)
        logger.info(
            "FCR for flock %s between %s and %s: feed=%.3f gain=%.3f fcr=%.4f (%d samplings)",
            flock_id, start_date, end_date, summary.feed_used, summary.weight_gain, summary.fcr, summary.sample_count
        )

        return FCRReport(
            start_date=start_date,
            end_date=end_date,
            total_feed_used=summary.feed_used,
            weight_gain=summary.weight_gain,
            fcr=summary.fcr,
            has_weight_data=summary.has_weight_data,
            sample_count=summary.sample_count,
            weight_gain_details=details,
            per_flock=[summary],
            weight_sampling_insights=insights,
        )

    flocks = crud_flock.get_active_flocks(db, tenant_id=tenant_id)
    samples = crud_weight_sampling.get_weight_samples(db, tenant_id, start_date=start_date, end_date=end_date)
    usage = crud_feed_usage.get_feed_usage(db, tenant_id, start_date=start_date, end_date=end_date)
    samples_by_flock = _group_by_flock(samples)
    usage_by_flock = _group_by_flock(usage)

    # Each flock only reads its own slice of the two series
    per_flock = [
        _flock_summary(
            flock,
            whole_window_summary(samples_by_flock.get(flock.id, []), flock.current_count or 0),
            _total_feed(usage_by_flock.get(flock.id, [])),
        )
        for flock in flocks
    ]

    total_feed_used = sum(s.feed_used for s in per_flock)
    weight_gain = sum(s.weight_gain for s in per_flock if s.has_weight_data)
    has_weight_data = any(s.has_weight_data for s in per_flock)
    logger.info(
        "FCR across %d active flocks between %s and %s: feed=%.3f gain=%.3f",
        len(flocks), start_date, end_date, total_feed_used, weight_gain
    )

    return FCRReport(
        start_date=start_date,
        end_date=end_date,
        total_feed_used=total_feed_used,
        weight_gain=weight_gain,
        fcr=safe_ratio(total_feed_used, weight_gain) if has_weight_data else 0.0,
        has_weight_data=has_weight_data,
        sample_count=sum(s.sample_count for s in per_flock),
        per_flock=per_flock,
    )


def get_weight_sampling_with_fcr(
    db: Session,
    tenant_id: str,
    flock_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> List[FCRResult]:
    """
    Weight samplings in range (last 30 days by default) with lifetime and
    previous-interval FCR, reconciled flock by flock and returned in date order.
    """
    start_date, end_date = resolve_date_range(start_date, end_date, WEIGHT_SAMPLING_DEFAULT_RANGE_DAYS, today)

    if flock_id:
        # Unknown flocks raise before anything else is fetched
        crud_flock.get_flock_current_count(db, flock_id=flock_id, tenant_id=tenant_id)

    samples = crud_weight_sampling.get_weight_samples(db, tenant_id, flock_id=flock_id, start_date=start_date, end_date=end_date)
    usage = crud_feed_usage.get_feed_usage(db, tenant_id, flock_id=flock_id, start_date=start_date, end_date=end_date)
    samples_by_flock = _group_by_flock(samples)
    usage_by_flock = _group_by_flock(usage)
    first_sample_dates = crud_weight_sampling.get_first_sample_dates(db, samples_by_flock.keys(), tenant_id=tenant_id)
    flocks = crud_flock.get_flocks_by_ids(db, samples_by_flock.keys(), tenant_id=tenant_id)

    results = []
    for sample_flock_id, flock_samples in samples_by_flock.items():
        flock = flocks.get(sample_flock_id)
        results.extend(reconcile(
            sample_flock_id,
            flock_samples,
            usage_by_flock.get(sample_flock_id, []),
            flock.current_count or 0 if flock else 0,
            first_sample_dates.get(sample_flock_id),
        ))

    results.sort(key=lambda r: r.date)
    logger.info("Computed FCR for %d weight samplings across %d flocks", len(results), len(samples_by_flock))
    return results


def get_feed_efficiency_stats(db: Session, tenant_id: str, today: Optional[date] = None) -> MonthlyEfficiency:
    """
    Feed efficiency KPIs for the current calendar month across all flocks.

    Flocks with fewer than two samplings this month add nothing to the weight
    gain, but their feed is still part of the month's feed total.
    """
    today = today or farm_today()
    start_date = month_start(today)

    feed_used = crud_feed_usage.get_total_feed_used(db, tenant_id, start_date=start_date, end_date=today)
    flocks = crud_flock.get_active_flocks(db, tenant_id=tenant_id)
    birds = sum(flock.current_count or 0 for flock in flocks)
    current_counts = {flock.id: flock.current_count or 0 for flock in flocks}

    samples = crud_weight_sampling.get_weight_samples(db, tenant_id, start_date=start_date, end_date=today)
    monthly_weight_gain = 0.0
    has_monthly_weight_data = False
    for sample_flock_id, flock_samples in _group_by_flock(samples).items():
        if len(flock_samples) < 2:
            continue
        details = whole_window_summary(flock_samples, current_counts.get(sample_flock_id, 0))
        monthly_weight_gain += details.weight_gain
        has_monthly_weight_data = True

    stats = MonthlyEfficiency(
        monthly_fcr=safe_ratio(feed_used, monthly_weight_gain),
        feed_used=feed_used,
        monthly_weight_gain=monthly_weight_gain,
        has_monthly_weight_data=has_monthly_weight_data,
        active_flocks=len(flocks),
        avg_feed_per_bird_per_day=safe_ratio(feed_used, birds * days_in_month(today)),
        birds=birds,
        weight_sampling_count=len(samples),
    )
    logger.info("Feed efficiency stats for %s: %s", start_date.strftime('%Y-%m'), stats.model_dump())
    return stats
