"""Shared numeric and date helpers for Niche Vetter."""
from __future__ import annotations

import contextlib
import json
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean of ``values``; 0.0 for an empty sequence."""

    if not values:
        return 0.0
    return float(sum(values)) / float(len(values))


def population_stddev(values: Sequence[float]) -> float:
    """Standard deviation dividing by N, not N - 1."""

    if not values:
        return 0.0
    centre = mean(values)
    variance = sum((value - centre) ** 2 for value in values) / len(values)
    return math.sqrt(variance)


def clamp(value: float, lower: float, upper: float) -> float:
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def safe_float(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` if that is not possible."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "").lstrip("$")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def safe_int(value: Any) -> Optional[int]:
    number = safe_float(value)
    if number is None:
        return None
    return int(number)


def clean_numbers(values: Iterable[Any]) -> list[float]:
    """Drop ``None`` and non-numeric entries, keeping order."""

    cleaned = []
    for value in values:
        number = safe_float(value)
        if number is not None:
            cleaned.append(number)
    return cleaned


def parse_date(value: Any) -> Optional[date]:
    """Parse ISO dates, ``date``/``datetime`` objects and epoch milliseconds."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        with contextlib.suppress(OverflowError, OSError, ValueError):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        with contextlib.suppress(ValueError):
            return datetime.fromisoformat(text).date()
        for fmt in ("%m/%d/%Y", "%b %d, %Y", "%B %d, %Y", "%Y/%m/%d"):
            with contextlib.suppress(ValueError):
                return datetime.strptime(text, fmt).date()
    return None


def days_between(start: date, now: datetime) -> float:
    """Fractional days from midnight UTC of ``start`` until ``now``."""

    start_dt = datetime(start.year, start.month, start.day)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return (now - start_dt).total_seconds() / 86400.0


def now_utc() -> datetime:
    """Return the current UTC datetime without timezone info."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def ensure_directory(path: Path) -> None:
    """Create parent directories for ``path`` if they do not exist."""

    path.parent.mkdir(parents=True, exist_ok=True)


def dumps_json(data: object) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)
