import random
from datetime import date, timedelta

import pytest

from schemas.feed_usage import FeedUsageRecord
from schemas.weight_sampling import WeightSample
from utils.fcr_utils import reconcile, safe_ratio, sum_feed, whole_window_summary

DAY_0 = date(2026, 3, 1)
FLOCK_ID = "F1"


def sample(day_offset, average_weight, flock_id=FLOCK_ID):
    return WeightSample(
        flock_id=flock_id,
        date=DAY_0 + timedelta(days=day_offset),
        sample_size=2,
        sample_weights=[average_weight, average_weight],
        total_weight=average_weight * 2,
    )


def feed(day_offset, amount_used, flock_id=FLOCK_ID):
    return FeedUsageRecord(flock_id=flock_id, date=DAY_0 + timedelta(days=day_offset), amount_used=amount_used)


@pytest.fixture
def three_samplings():
    samples = [sample(0, 0.10), sample(7, 0.25), sample(14, 0.45)]
    # 80 kg within [day 0, day 7], 95 kg within (day 7, day 14]
    usage = [feed(0, 30), feed(7, 50), feed(10, 45), feed(14, 50)]
    return samples, usage


def test_safe_ratio_guards_degenerate_denominators():
    assert safe_ratio(10, 4) == 2.5
    assert safe_ratio(10, 0) == 0.0
    assert safe_ratio(10, -3) == 0.0
    assert safe_ratio(0, 5) == 0.0


def test_sum_feed_start_boundary():
    usage = [feed(0, 1), feed(3, 2), feed(5, 4), feed(6, 8)]
    assert sum_feed(usage, DAY_0, DAY_0 + timedelta(days=5)) == 7
    assert sum_feed(usage, DAY_0, DAY_0 + timedelta(days=5), include_start=False) == 6


def test_reconcile_weekly_scenario(three_samplings):
    samples, usage = three_samplings
    results = reconcile(FLOCK_ID, samples, usage, 1000, DAY_0)

    assert [r.is_first_recording for r in results] == [True, False, False]

    last = results[2]
    assert last.weight_gain_lifetime == pytest.approx(350)
    assert last.fcr_lifetime == pytest.approx(175 / 350)
    assert last.fcr_lifetime == pytest.approx(0.5)
    assert last.weight_gain_previous == pytest.approx(200)
    assert last.fcr_previous == pytest.approx(0.475)


def test_first_recording_has_all_zero_metrics(three_samplings):
    _, usage = three_samplings
    results = reconcile(FLOCK_ID, [sample(0, 0.10)], usage, 1000, DAY_0)

    assert len(results) == 1
    only = results[0]
    assert only.is_first_recording is True
    assert only.fcr_lifetime == 0
    assert only.fcr_previous == 0
    assert only.weight_gain_lifetime == 0
    assert only.weight_gain_previous == 0


def test_feed_on_previous_sampling_day_is_not_counted_twice(three_samplings):
    samples, usage = three_samplings
    results = reconcile(FLOCK_ID, samples, usage, 1000, DAY_0)

    # the 50 kg on day 7 belongs to the (day 0, day 7] interval only
    assert results[1].fcr_previous == pytest.approx(50 / 150)
    assert results[2].fcr_previous == pytest.approx(95 / 200)
    # lifetime windows include the baseline day
    assert results[1].fcr_lifetime == pytest.approx(80 / 150)


def test_weight_loss_gives_zero_fcr_not_negative():
    samples = [sample(0, 1.0), sample(7, 1.4), sample(14, 1.2)]
    usage = [feed(3, 100), feed(10, 100)]
    results = reconcile(FLOCK_ID, samples, usage, 500, DAY_0)

    assert results[2].weight_gain_previous == pytest.approx(-100)
    assert results[2].fcr_previous == 0.0
    assert results[2].fcr_lifetime == pytest.approx(200 / 100)


def test_static_weight_gives_zero_fcr():
    samples = [sample(0, 1.0), sample(7, 1.0)]
    results = reconcile(FLOCK_ID, samples, [feed(5, 70)], 100, DAY_0)

    assert results[1].weight_gain_lifetime == 0
    assert results[1].fcr_lifetime == 0.0
    assert results[1].fcr_previous == 0.0


def test_lifetime_fcr_matches_closed_form_for_increasing_weights():
    averages = [0.1, 0.3, 0.55, 0.9, 1.4]
    samples = [sample(i * 7, avg) for i, avg in enumerate(averages)]
    usage = [feed(day, 5.0 + day) for day in range(0, 29)]
    results = reconcile(FLOCK_ID, samples, usage, 250, DAY_0)

    for i, result in enumerate(results[1:], start=1):
        expected_feed = sum(5.0 + day for day in range(0, i * 7 + 1))
        expected_gain = (averages[i] - averages[0]) * 250
        assert result.fcr_lifetime >= 0
        assert result.fcr_lifetime == pytest.approx(expected_feed / expected_gain)


def test_unsorted_input_gives_identical_output(three_samplings):
    samples, usage = three_samplings
    expected = reconcile(FLOCK_ID, samples, usage, 1000, DAY_0)

    shuffled = list(reversed(samples))
    random.Random(7).shuffle(shuffled)
    assert reconcile(FLOCK_ID, shuffled, list(reversed(usage)), 1000, DAY_0) == expected


def test_window_after_history_start_is_not_first_recording(three_samplings):
    samples, usage = three_samplings
    # history began a month earlier than the queried window
    results = reconcile(FLOCK_ID, samples, usage, 1000, DAY_0 - timedelta(days=30))

    assert not any(r.is_first_recording for r in results)
    assert results[0].fcr_lifetime == 0
    assert results[0].weight_gain_previous == 0
    assert results[2].fcr_lifetime == pytest.approx(0.5)


def test_missing_first_date_falls_back_to_earliest_supplied(three_samplings):
    samples, usage = three_samplings
    results = reconcile(FLOCK_ID, samples, usage, 1000, None)
    assert [r.is_first_recording for r in results] == [True, False, False]


def test_other_flocks_rows_are_ignored(three_samplings):
    samples, usage = three_samplings
    noise = [sample(3, 5.0, flock_id="F2")]
    noisy_usage = usage + [feed(10, 1000, flock_id="F2")]
    results = reconcile(FLOCK_ID, samples + noise, noisy_usage, 1000, DAY_0)

    assert len(results) == 3
    assert results[2].fcr_previous == pytest.approx(0.475)


def test_whole_window_summary_uses_first_and_last_sampling(three_samplings):
    samples, _ = three_samplings
    details = whole_window_summary(list(reversed(samples)), 1000)

    assert details.sample_count == 3
    assert details.first_sampling_date == DAY_0
    assert details.last_sampling_date == DAY_0 + timedelta(days=14)
    assert details.initial_weight == pytest.approx(100)
    assert details.final_weight == pytest.approx(450)
    assert details.weight_gain == pytest.approx(350)
    assert details.average_daily_gain == pytest.approx(25)


def test_whole_window_summary_with_single_sampling():
    details = whole_window_summary([sample(0, 0.5)], 1000)

    assert details.sample_count == 1
    assert details.weight_gain == 0
    assert details.first_sampling_date is None
