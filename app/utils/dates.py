from datetime import datetime, timezone
from typing import Iterable, Optional

def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def days_since(value: datetime, now: Optional[datetime] = None) -> int:
    now = _naive(now or utcnow())
    return (now - _naive(value)).days

def average_age_days(values: Iterable[Optional[datetime]], now: Optional[datetime] = None) -> Optional[float]:
    now = now or utcnow()
    ages = [days_since(v, now) for v in values if v is not None]
    if not ages:
        return None
    return round(sum(ages) / len(ages), 2)
