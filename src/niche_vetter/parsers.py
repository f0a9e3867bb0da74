"""Parsers that convert raw competitor rows and history payloads into data models."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .history import analyse_history
from .models import (
    FULFILLMENT_AMAZON,
    FULFILLMENT_FBA,
    FULFILLMENT_FBM,
    CompetitorRecord,
    HistoricalAnalysis,
    HistoricalSeries,
    HistoryPoint,
)
from .utils import parse_date, safe_float, safe_int

_ASIN_IN_URL_RE = re.compile(r"dp/([A-Z0-9]{10})")

FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "asin": ("asin", "ASIN"),
    "title": ("title", "Title", "productTitle"),
    "brand": ("brand", "Brand"),
    "price": ("price", "Price"),
    "bsr": ("bsr", "BSR", "bestSellerRank"),
    "monthly_sales": ("monthly_sales", "monthlySales", "Monthly Sales"),
    "monthly_revenue": ("monthly_revenue", "monthlyRevenue", "Monthly Revenue"),
    "rating": ("rating", "Rating"),
    "reviews": ("reviews", "Reviews", "reviewCount"),
    "market_share_pct": ("market_share_pct", "marketShare", "Market Share"),
    "review_share_pct": ("review_share_pct", "reviewShare", "Review Share"),
    "fulfillment_method": (
        "fulfillment_method",
        "fulfillment",
        "fulfillmentMethod",
        "fulfilledBy",
        "Fulfilled By",
    ),
    "date_first_available": (
        "date_first_available",
        "dateFirstAvailable",
        "Date First Available",
    ),
}

_FULFILLMENT_NAMES = {
    "fba": FULFILLMENT_FBA,
    "fbm": FULFILLMENT_FBM,
    "amazon": FULFILLMENT_AMAZON,
    "amz": FULFILLMENT_AMAZON,
}


def extract_asin(value: Any) -> str:
    """Pull the ASIN out of a product URL, or take the first ten characters."""

    if not value:
        return ""
    text = str(value).strip()
    match = _ASIN_IN_URL_RE.search(text)
    return match.group(1) if match else text[:10]


def normalize_fulfillment(value: Any) -> Optional[str]:
    """Map free-form fulfillment labels onto ``FBA``, ``FBM`` or ``Amazon``.

    Unrecognised labels are kept as-is so they score as unknown.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return _FULFILLMENT_NAMES.get(text.lower(), text)


def _lookup(row: Mapping[str, Any], field_name: str) -> Any:
    for key in FIELD_ALIASES[field_name]:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def parse_competitor(row: Mapping[str, Any]) -> CompetitorRecord:
    title = _lookup(row, "title")
    brand = _lookup(row, "brand")
    return CompetitorRecord(
        asin=extract_asin(_lookup(row, "asin")),
        price=safe_float(_lookup(row, "price")),
        bsr=safe_int(_lookup(row, "bsr")),
        monthly_sales=safe_float(_lookup(row, "monthly_sales")),
        monthly_revenue=safe_float(_lookup(row, "monthly_revenue")),
        rating=safe_float(_lookup(row, "rating")),
        reviews=safe_int(_lookup(row, "reviews")),
        market_share_pct=safe_float(_lookup(row, "market_share_pct")),
        review_share_pct=safe_float(_lookup(row, "review_share_pct")),
        fulfillment_method=normalize_fulfillment(_lookup(row, "fulfillment_method")),
        date_first_available=parse_date(_lookup(row, "date_first_available")),
        title=str(title) if title is not None else "",
        brand=str(brand) if brand is not None else None,
    )


def parse_competitors(rows: Iterable[Mapping[str, Any]]) -> List[CompetitorRecord]:
    return [parse_competitor(row) for row in rows]


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    number = safe_float(value)
    if number is not None:
        try:
            return datetime.fromtimestamp(number / 1000, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    parsed = parse_date(value)
    if parsed is None:
        return None
    return datetime(parsed.year, parsed.month, parsed.day)


def parse_series(metric: str, payload: Iterable[Any]) -> HistoricalSeries:
    """Build a series from ``[timestamp, value]`` pairs, point dicts or bare values.

    Timestamps may be epoch milliseconds or ISO strings; points stay in the
    order given.
    """

    points: List[HistoryPoint] = []
    for item in payload or []:
        if isinstance(item, Mapping):
            timestamp, value = item.get("timestamp"), item.get("value")
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            timestamp, value = item
        else:
            timestamp, value = None, item
        points.append(HistoryPoint(timestamp=_parse_timestamp(timestamp), value=safe_float(value)))
    return HistoricalSeries(metric=metric, points=points)


def parse_history(payload: Mapping[str, Any]) -> Dict[str, HistoricalAnalysis]:
    """Analyse every ASIN in a ``{asin: {"bsr": [...], "price": [...]}}`` payload."""

    analyses: Dict[str, HistoricalAnalysis] = {}
    for raw_asin, series in (payload or {}).items():
        asin = extract_asin(raw_asin)
        if not asin:
            continue
        series = series or {}
        bsr_series = parse_series("bsr", series.get("bsr") or [])
        price_series = parse_series("price", series.get("price") or [])
        analyses[asin] = analyse_history(asin, bsr_series, price_series)
    return analyses
