"""WarrantyPolicy — warranty end date of an installed module."""

from __future__ import annotations

import calendar
from datetime import date

DEFAULT_WARRANTY_MONTHS = 12
MAX_WARRANTY_MONTHS = 120


def add_months(start: date, months: int) -> date:
    """Calendar month arithmetic, clamping to the last day of short months."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def warranty_expiration(
    installation_date: date,
    delivery_date: date | None = None,
    months: int = DEFAULT_WARRANTY_MONTHS,
) -> date:
    """Warranty starts at commercial delivery, or installation when undelivered.

    Raises:
        ValueError: if ``months`` is outside 0..120.
    """
    if not 0 <= months <= MAX_WARRANTY_MONTHS:
        raise ValueError(f"Warranty months must be between 0 and {MAX_WARRANTY_MONTHS}")
    start = delivery_date or installation_date
    return add_months(start, months)
