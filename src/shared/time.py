from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Tuple


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def week_window(as_of: date) -> Tuple[date, date]:
    """Monday through Sunday of the week containing ``as_of``."""
    start = as_of - timedelta(days=as_of.weekday())
    return start, start + timedelta(days=6)


def days_between(start: date, end: date) -> int:
    return (end - start).days
