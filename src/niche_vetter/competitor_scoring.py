"""Per-competitor weighted scoring and strength classification."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional, Sequence

from .metrics import (
    score_bsr,
    score_fulfillment,
    score_monthly_revenue,
    score_monthly_sales,
    score_price,
    score_rating,
    score_review_velocity,
    score_reviews,
    score_share,
)
from .models import (
    STRENGTH_DECENT,
    STRENGTH_STRONG,
    STRENGTH_WEAK,
    CompetitorRecord,
    CompetitorStrength,
)
from .utils import days_between, now_utc, parse_date, safe_float

# Importance weights for a single competitor. Market-level composition uses
# ScoringWeights in market.py, which is versioned separately.
COMPETITOR_WEIGHTS = {
    "monthly_sales": 2.0,
    "reviews": 1.8,
    "market_share": 1.5,
    "monthly_revenue": 1.5,
    "bsr": 1.3,
    "rating": 1.3,
    "review_share": 1.3,
    "price": 1.0,
    "fulfillment": 0.8,
}
MAX_POINTS = 10

DEFAULT_PRICE = 0
DEFAULT_BSR = 999999
DEFAULT_MONTHLY_SALES = 0
DEFAULT_MONTHLY_REVENUE = 0
DEFAULT_RATING = 0
DEFAULT_REVIEWS = 0
DEFAULT_FULFILLMENT = ""

STRONG_THRESHOLD = 60
DECENT_THRESHOLD = 45

SATURATED_COUNT = 30
HIGH_COUNT = 20
MODERATE_COUNT = 15


def _or_default(value: Any, default: float) -> float:
    number = safe_float(value)
    return default if number is None else number


def days_on_market(record: CompetitorRecord, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since ``date_first_available``, or ``None`` if it is unknown."""

    first_available = parse_date(record.date_first_available)
    if first_available is None:
        return None
    days = math.ceil(days_between(first_available, now or now_utc()))
    return max(days, 0)


def score_competitor(record: CompetitorRecord, *, now: Optional[datetime] = None) -> float:
    """Weighted percentage score (0-100) of one competitor, rounded to 2 decimals.

    Required metrics always count towards the possible total, falling back to
    worst-case defaults when missing. Market share and review share only count
    when present so that leaving them out does not drag the score down.
    """

    weighted_points = 0.0
    total_weight_possible = 0.0

    def add(metric: str, points: int) -> None:
        nonlocal weighted_points, total_weight_possible
        weight = COMPETITOR_WEIGHTS[metric]
        weighted_points += points * weight
        total_weight_possible += MAX_POINTS * weight

    monthly_revenue = _or_default(record.monthly_revenue, DEFAULT_MONTHLY_REVENUE)
    review_count = _or_default(record.reviews, DEFAULT_REVIEWS)

    add("price", score_price(_or_default(record.price, DEFAULT_PRICE)))
    add("bsr", score_bsr(_or_default(record.bsr, DEFAULT_BSR)))
    add("monthly_sales", score_monthly_sales(_or_default(record.monthly_sales, DEFAULT_MONTHLY_SALES)))
    add("monthly_revenue", score_monthly_revenue(monthly_revenue))
    add("rating", score_rating(_or_default(record.rating, DEFAULT_RATING)))

    days = days_on_market(record, now)
    if days is not None:
        add("reviews", score_review_velocity(days, review_count))
    else:
        add("reviews", score_reviews(review_count))

    if record.market_share_pct is not None:
        add("market_share", score_share(record.market_share_pct))
    if record.review_share_pct is not None:
        add("review_share", score_share(record.review_share_pct))

    add("fulfillment", score_fulfillment(record.fulfillment_method or DEFAULT_FULFILLMENT, monthly_revenue))

    return round(weighted_points / total_weight_possible * 100, 2)


def get_competitor_strength(score: float) -> CompetitorStrength:
    if score >= STRONG_THRESHOLD:
        return CompetitorStrength(label=STRENGTH_STRONG)
    if score >= DECENT_THRESHOLD:
        return CompetitorStrength(label=STRENGTH_DECENT)
    return CompetitorStrength(label=STRENGTH_WEAK)


def competition_level(competitors: Sequence[CompetitorRecord]) -> str:
    """Coarse saturation label for a niche from competitor and review counts."""

    count = len(competitors)
    review_counts = [_or_default(record.reviews, 0) for record in competitors]
    total_reviews = sum(review_counts)
    top_reviews = max(review_counts, default=0)

    if count > SATURATED_COUNT or total_reviews > 10000 or top_reviews > 5000:
        return "SATURATED"
    if count > HIGH_COUNT or total_reviews > 5000:
        return "HIGH"
    if count > MODERATE_COUNT or total_reviews > 2000:
        return "MODERATE"
    return "LOW"
