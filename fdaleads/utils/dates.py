"""
Date helpers shared by the gateway and the scoring engine.

openFDA reports dates as YYYYMMDD, ClinicalTrials.gov as YYYY-MM or YYYY-MM-DD.
"""
from datetime import date, datetime, timedelta
from typing import Optional


def parse_date(value) -> Optional[date]:
    """Parse any upstream date string into a date, or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    for fmt in ("%Y-%m-%d", "%Y%m%d", "%Y-%m"):
        try:
            return datetime.strptime(text[:10] if fmt == "%Y-%m-%d" else text, fmt).date()
        except ValueError:
            continue
    return None


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (negative when end is earlier)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


def months_since(value, today: Optional[date] = None) -> Optional[int]:
    """Months elapsed since an upstream date string, None when unparseable."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return months_between(parsed, today or date.today())


def days_since(value, today: Optional[date] = None) -> Optional[int]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return ((today or date.today()) - parsed).days


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    for candidate in (day.day, 30, 29, 28):
        try:
            return date(year, month, min(day.day, candidate))
        except ValueError:
            continue
    return date(year, month, 28)


def format_window(days_back: int, today: Optional[date] = None, compact: bool = True):
    """Return (start, end) strings for a lookback window ending today."""
    end = today or date.today()
    start = end - timedelta(days=days_back)
    fmt = "%Y%m%d" if compact else "%Y-%m-%d"
    return start.strftime(fmt), end.strftime(fmt)
