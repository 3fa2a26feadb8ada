from sqlalchemy import Column, DateTime
from datetime import datetime
from utils.date_utils import FARM_TIMEZONE


class TimestampMixin:
    """Mixin that provides created/updated timestamps.

    Analytics rows (flocks, weight samplings, feed usage) are only ever read by
    the FCR computations, so neither user columns nor soft-delete columns are
    carried here.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(FARM_TIMEZONE))
    updated_at = Column(DateTime(timezone=True), onupdate=lambda: datetime.now(FARM_TIMEZONE))
