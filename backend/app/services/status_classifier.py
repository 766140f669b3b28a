"""
Derived status for requests and stock levels.

Pure functions, no database access; called when building API responses and
when listing overdue loans.
"""

import enum
import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

from app.core.config import settings
from app.core.types import to_naive_utc, utcnow
from app.models.resource_request import RequestStatus

DateLike = Union[date, datetime, str]

# Statuses in which the borrower still has the stock
OUTSTANDING_STATUSES = frozenset({RequestStatus.APPROVED, RequestStatus.COLLECTED})

ONE_DAY = timedelta(days=1)


class AvailabilityTier(str, enum.Enum):
    """Coarse stock level shown as a badge in the catalogue"""
    OUT_OF_STOCK = "OUT_OF_STOCK"
    LOW_STOCK = "LOW_STOCK"
    AVAILABLE = "AVAILABLE"


def to_datetime(value: DateLike) -> datetime:
    """Coerce a date, datetime or ISO-8601 string to a naive UTC datetime"""
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return to_naive_utc(datetime.fromisoformat(text))
    raise TypeError(f"Unsupported date value: {value!r}")


def is_overdue(required_date: DateLike, now: Optional[DateLike] = None) -> bool:
    """True iff the required (expected return) date is strictly before now"""
    current = to_datetime(now) if now is not None else utcnow()
    return to_datetime(required_date) < current


def overdue_days(required_date: DateLike, now: Optional[DateLike] = None) -> int:
    """
    Whole or partial days elapsed since the required date, rounded up.

    Returns 0 when the date has not passed yet.
    """
    current = to_datetime(now) if now is not None else utcnow()
    elapsed = current - to_datetime(required_date)
    if elapsed <= timedelta(0):
        return 0
    return math.ceil(elapsed / ONE_DAY)


def is_request_overdue(status: RequestStatus, required_date: DateLike,
                       now: Optional[DateLike] = None) -> bool:
    """A request is only overdue while the borrower still holds the stock"""
    return status in OUTSTANDING_STATUSES and is_overdue(required_date, now)


def availability_tier(available: int, total: int,
                      low_stock_ratio: Optional[float] = None) -> AvailabilityTier:
    ratio = settings.LOW_STOCK_RATIO if low_stock_ratio is None else low_stock_ratio
    if total <= 0 or available <= 0:
        return AvailabilityTier.OUT_OF_STOCK
    if available < ratio * total:
        return AvailabilityTier.LOW_STOCK
    return AvailabilityTier.AVAILABLE
