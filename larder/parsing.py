"""Lenient parsers for the loosely typed fields of the dataset.

None of these raise. Unparseable input yields a defined default and the caller
decides what that default means.
"""

import math
import re
from typing import Any


HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)")
MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:minutes?|mins?|m)")
BARE_NUMBER_RE = re.compile(r"(\d+(?:\.\d+)?)")
LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def round_half_up(value: float, digits: int = 0) -> float:
    if not math.isfinite(value):
        return value
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def parse_minutes(value: Any) -> int:
    """Best-effort minutes from text such as "1h 30min", "45 minutes" or "90"."""
    if value is None or isinstance(value, bool):
        return 0
    text = str(value).lower().strip()
    if not text:
        return 0

    minutes = 0.0
    hours = HOURS_RE.search(text)
    mins = MINUTES_RE.search(text)
    if hours:
        minutes += round_half_up(float(hours.group(1)) * 60)
    if mins:
        minutes += round_half_up(float(mins.group(1)))
    if not (hours or mins):
        bare = BARE_NUMBER_RE.search(text)
        if bare is None:
            return 0
        minutes += round_half_up(float(bare.group(1)))

    return int(minutes) if math.isfinite(minutes) else 0


def parse_amount(value: Any) -> float | None:
    """Leading number of an amount, `None` when there is none.

    Reads like a `parseFloat`: "2" -> 2.0, "1.5 cups" -> 1.5, "1/2" -> 1.0,
    "a pinch" -> None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = LEADING_FLOAT_RE.match("" if value is None else str(value))
        if match is None:
            return None
        number = float(match.group(1))
    return number if math.isfinite(number) else None


def parse_number(value: Any) -> float | None:
    """A finite number from a number or a numeric string, else `None`."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
