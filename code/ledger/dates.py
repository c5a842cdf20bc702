"""
dates.py

Ledger date handling for SAP Business One exports.

Due dates and receipt dates arrive as "DD-Mon-YY" (sometimes "DD-Mon-YYYY").
Anything that cannot be read returns None; callers treat None as "unknown"
and leave the row out of ordering and overdue checks.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Union

MONTH_MAP: Dict[str, int] = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12
}

# Sort stand-in for receipts without a readable date.
EPOCH = date(1970, 1, 1)

_PLACEHOLDERS = {"", "-", "NULL"}


def parse_ledger_date(text: Optional[str]) -> Optional[date]:
    """
    Parse 'DD-Mon-YY' / 'DD-Mon-YYYY' into a date.

    Two-digit years are read as 20YY. Returns None for blanks, placeholders,
    unknown months and impossible calendar days.
    """
    if text is None:
        return None
    s = str(text).strip()
    if s in _PLACEHOLDERS:
        return None

    parts = s.split("-")
    if len(parts) != 3:
        return None

    day_s, month_s, year_s = (p.strip() for p in parts)
    if not day_s.isdigit() or not year_s.isdigit():
        return None

    month = MONTH_MAP.get(month_s.title()[:3])
    if month is None:
        return None

    year = int(year_s)
    if year < 100:
        year += 2000

    try:
        return date(year, month, int(day_s))
    except ValueError:
        return None


def today_midnight(as_of: Union[date, datetime, str, None] = None) -> date:
    """Reference day for overdue checks; defaults to the system clock."""
    if as_of is None:
        return date.today()
    if isinstance(as_of, datetime):
        return as_of.date()
    if isinstance(as_of, date):
        return as_of
    return datetime.strptime(str(as_of).strip(), "%Y-%m-%d").date()


def sort_date(text: Optional[str]) -> date:
    return parse_ledger_date(text) or EPOCH


def is_past_due(due_text: Optional[str], as_of: date) -> bool:
    due = parse_ledger_date(due_text)
    return due is not None and due < as_of
