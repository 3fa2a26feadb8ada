import calendar
import os
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import pytz
from dotenv import load_dotenv

load_dotenv()

# All "today" / "this month" figures are computed in the farm's local timezone.
FARM_TIMEZONE = pytz.timezone(os.getenv("FARM_TIMEZONE", "Asia/Kolkata"))

FCR_DEFAULT_RANGE_DAYS = int(os.getenv("FCR_DEFAULT_RANGE_DAYS", "90"))
WEIGHT_SAMPLING_DEFAULT_RANGE_DAYS = int(os.getenv("WEIGHT_SAMPLING_DEFAULT_RANGE_DAYS", "30"))


def farm_today() -> date:
    return datetime.now(FARM_TIMEZONE).date()


def month_start(day: date) -> date:
    return day.replace(day=1)


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def resolve_date_range(
    start_date: Optional[date],
    end_date: Optional[date],
    default_days: int,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """
    Fill in a missing end date with today and a missing start date with
    `default_days` before the end date.
    """
    end = end_date or today or farm_today()
    start = start_date or (end - timedelta(days=default_days))
    return start, end
