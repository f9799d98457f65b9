from __future__ import annotations

import calendar
import re
from datetime import date, datetime

ROAST_DATE_PREFIX = "Data palenia:"
ROAST_DATE_FORMAT = "%d.%m.%Y"
FRESHNESS_MONTHS = 2


def normalize_label(value: str) -> str:
    return re.sub(r"\s+", " ", value or "").strip()


def parse_roast_date(text: str) -> date:
    value = normalize_label(text)
    if value.startswith(ROAST_DATE_PREFIX):
        value = value[len(ROAST_DATE_PREFIX):].strip()
    return datetime.strptime(value, ROAST_DATE_FORMAT).date()


def subtract_months(day: date, months: int) -> date:
    """Calendar-month subtraction; the day is clamped to the target month's length."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def freshness_cutoff(today: date, months: int = FRESHNESS_MONTHS) -> date:
    return subtract_months(today, months)


def is_fresh_roast(roast_date: date, today: date) -> bool:
    # Boundary inclusive: only dates strictly before the cutoff are stale.
    return not roast_date < freshness_cutoff(today)
