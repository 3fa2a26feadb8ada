"""
Feed Conversion Ratio helpers.

Everything in this module is a pure function over rows that were already
fetched for the request. Weight samplings are anything with `flock_id`,
`date`, `sample_size`, `total_weight` and `average_weight` attributes (ORM rows
or `WeightSample` schemas); feed usage rows need `date` and `amount_used`.

FCR is feed consumed divided by weight gained over the same interval. It is
only defined for positive growth: a zero or negative gain yields an FCR of 0,
which the presentation layer shows as "N/A".
"""
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from schemas.fcr import FCRResult, WeightGainDetails


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator when the denominator is positive, else 0.0."""
    if denominator is None or denominator <= 0:
        return 0.0
    return float(numerator or 0) / float(denominator)


def as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def sort_samples(samples: Iterable) -> list:
    # Stable, so same-day samplings keep their recorded order
    return sorted(samples, key=lambda s: as_date(s.date))


def sum_feed(usage: Iterable, start: date, end: date, include_start: bool = True) -> float:
    """
    Total `amount_used` dated within [start, end], or (start, end] when
    `include_start` is False.
    """
    total = 0.0
    for record in usage:
        day = as_date(record.date)
        after_start = day >= start if include_start else day > start
        if after_start and day <= end:
            total += float(record.amount_used or 0)
    return total


def weight_gain(from_average: float, to_average: float, biomass_multiplier: int) -> float:
    """
    Per-bird average weight delta scaled to flock biomass.

    `biomass_multiplier` is the flock's current bird count, applied to both the
    earlier and the later sampling alike; mortality between the two dates is
    not accounted for.
    """
    return (float(to_average) - float(from_average)) * biomass_multiplier


def _base_result(flock_id: str, sample) -> FCRResult:
    return FCRResult(
        flock_id=flock_id,
        date=as_date(sample.date),
        sample_size=sample.sample_size,
        total_weight=sample.total_weight,
        average_weight=sample.average_weight,
    )


def reconcile(
    flock_id: str,
    ordered_samples: Sequence,
    usage: Sequence,
    biomass_multiplier: int,
    true_first_sample_date: Optional[date],
) -> List[FCRResult]:
    """
    Compute lifetime and previous-interval FCR for every weight sampling of one flock.

    The lifetime window runs from the earliest supplied sampling to the current
    one with feed counted on both end days. The previous window runs from the
    preceding sampling to the current one, excluding feed dated on the
    preceding sampling's day so that adjacent intervals never count it twice.

    A sampling dated on `true_first_sample_date` (the flock's first sampling
    ever, not just the first in the window) has no baseline and is flagged
    `is_first_recording` with all figures at 0. When `true_first_sample_date`
    is None the earliest supplied sampling is treated as the first one.
    """
    samples = sort_samples(
        s for s in ordered_samples if getattr(s, "flock_id", flock_id) == flock_id
    )
    flock_usage = [u for u in usage if getattr(u, "flock_id", flock_id) == flock_id]

    if true_first_sample_date is None and samples:
        true_first_sample_date = as_date(samples[0].date)
    else:
        true_first_sample_date = as_date(true_first_sample_date)

    results = []
    for index, sample in enumerate(samples):
        result = _base_result(flock_id, sample)
        current_date = as_date(sample.date)

        if current_date == true_first_sample_date:
            result.is_first_recording = True
        elif index > 0:
            baseline = samples[0]
            previous = samples[index - 1]

            result.weight_gain_lifetime = weight_gain(
                baseline.average_weight, sample.average_weight, biomass_multiplier
            )
            feed_used_lifetime = sum_feed(flock_usage, as_date(baseline.date), current_date)
            result.fcr_lifetime = safe_ratio(feed_used_lifetime, result.weight_gain_lifetime)

            result.weight_gain_previous = weight_gain(
                previous.average_weight, sample.average_weight, biomass_multiplier
            )
            feed_used_previous = sum_feed(
                flock_usage, as_date(previous.date), current_date, include_start=False
            )
            result.fcr_previous = safe_ratio(feed_used_previous, result.weight_gain_previous)
        # index 0 but not the first ever sampling: the window opened after
        # history began and there is no in-window baseline.

        results.append(result)
    return results


def whole_window_summary(samples: Sequence, biomass_multiplier: int) -> WeightGainDetails:
    """
    Weight gain over a date range using only the first and last sampling in it.
    Fewer than two samplings give an empty summary.
    """
    ordered = sort_samples(samples)
    details = WeightGainDetails(sample_count=len(ordered))
    if len(ordered) < 2:
        return details

    first, last = ordered[0], ordered[-1]
    details.first_sampling_date = as_date(first.date)
    details.last_sampling_date = as_date(last.date)
    details.initial_average_weight = float(first.average_weight)
    details.final_average_weight = float(last.average_weight)
    details.initial_weight = details.initial_average_weight * biomass_multiplier
    details.final_weight = details.final_average_weight * biomass_multiplier
    details.weight_gain = weight_gain(first.average_weight, last.average_weight, biomass_multiplier)

    days = (details.last_sampling_date - details.first_sampling_date).days
    details.average_daily_gain = details.weight_gain / days if days > 0 else 0.0
    return details
