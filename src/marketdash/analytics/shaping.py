"""Response shaping helpers shared by the analytics endpoints."""

import math

from marketdash.data.models import ms_to_datetime


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from negative infinity, the way dashboard clients round.

    Python's ``round`` uses banker's rounding (``round(0.125, 2) == 0.12``);
    chart payloads round 0.5 up instead.
    """
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


def round_whole(value: float) -> int:
    """Round half up to an integer."""
    return math.floor(value + 0.5)


def month_index(timestamp_ms: int) -> int:
    """Months since year 0 for the UTC calendar month containing ``timestamp_ms``."""
    dt = ms_to_datetime(timestamp_ms)
    return dt.year * 12 + dt.month - 1


def month_label(timestamp_ms: int) -> str:
    """Label like "Jan 2024"."""
    return ms_to_datetime(timestamp_ms).strftime("%b %Y")


def short_month_label(timestamp_ms: int) -> str:
    """Label like "Jan 24"."""
    return ms_to_datetime(timestamp_ms).strftime("%b %y")
