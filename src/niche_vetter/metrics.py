"""Rubric lookups mapping one raw metric value to integer points.

Every function is pure. Inputs that are not numbers, NaN, or outside the
metric's valid range land in the worst bucket instead of raising.
"""
from __future__ import annotations

import math
from typing import Any, Optional

from .models import FULFILLMENT_AMAZON, FULFILLMENT_FBA, FULFILLMENT_FBM
from .utils import safe_float

WORST_POINTS = 1
FBM_REVENUE_FLOOR = 2000

BSR_BANDS = (
    (5000, 9),
    (10000, 8),
    (20000, 7),
    (30000, 6),
    (50000, 5),
    (75000, 4),
    (100000, 3),
    (150000, 2),
)
MONTHLY_SALES_BANDS = (
    (30, 1),
    (60, 2),
    (120, 3),
    (180, 4),
    (240, 5),
    (300, 6),
    (400, 7),
    (500, 8),
    (600, 9),
)
MONTHLY_REVENUE_BANDS = (
    (10000, 10),
    (9000, 9),
    (7500, 8),
    (6000, 7),
    (5000, 6),
    (4000, 5),
    (3000, 4),
    (2500, 3),
    (1000, 2),
)
# 4.2 to 4.3 scores 5, not 6.
RATING_BANDS = (
    (4.8, 10),
    (4.6, 9),
    (4.5, 8),
    (4.3, 7),
    (4.2, 5),
    (4.0, 4),
    (3.8, 3),
    (3.6, 2),
)
# There is no 9 band; 500+ reviews jump straight to 10.
REVIEW_BANDS = (
    (10, 2),
    (50, 3),
    (100, 4),
    (200, 5),
    (300, 6),
    (400, 7),
    (500, 8),
)
REVIEW_VELOCITY_BANDS = (
    (10, 10),
    (15, 7),
    (20, 5),
    (30, 2),
)


def score_price(price: Any) -> int:
    value = safe_float(price)
    if value is None or value < 20 or value > 75:
        return WORST_POINTS
    return 10


def score_bsr(bsr: Any) -> int:
    value = safe_float(bsr)
    if value is None or value <= 0:
        return WORST_POINTS
    if value < 1000:
        return 10
    for upper, points in BSR_BANDS:
        if value <= upper:
            return points
    return WORST_POINTS


def score_monthly_sales(units: Any) -> int:
    value = safe_float(units)
    if value is None:
        return WORST_POINTS
    for upper, points in MONTHLY_SALES_BANDS:
        if value <= upper:
            return points
    return 10


def score_monthly_revenue(revenue: Any) -> int:
    value = safe_float(revenue)
    if value is None:
        return WORST_POINTS
    for lower, points in MONTHLY_REVENUE_BANDS:
        if value >= lower:
            return points
    return WORST_POINTS


def score_rating(rating: Any) -> int:
    value = safe_float(rating)
    if value is None or value > 5:
        return WORST_POINTS
    for lower, points in RATING_BANDS:
        if value >= lower:
            return points
    return WORST_POINTS


def score_reviews(count: Any) -> int:
    value = safe_float(count)
    if value is None or value <= 0:
        return WORST_POINTS
    for upper, points in REVIEW_BANDS:
        if value < upper:
            return points
    return 10


def score_review_velocity(days_on_market: Any, reviews: Any) -> int:
    """Score how quickly a listing accumulates reviews.

    ``days_per_review`` is ``max(days_on_market, 1) / reviews``; a listing
    without reviews has an infinite interval and gets the worst score.
    """

    days = safe_float(days_on_market)
    count = safe_float(reviews)
    if days is None or count is None or days < 0 or count < 0:
        return WORST_POINTS
    days_per_review = max(days, 1) / count if count > 0 else math.inf
    for upper, points in REVIEW_VELOCITY_BANDS:
        if days_per_review <= upper:
            return points
    return WORST_POINTS


def score_fulfillment(method: Any, monthly_revenue: Optional[Any] = None) -> int:
    if method == FULFILLMENT_AMAZON:
        return 10
    if method == FULFILLMENT_FBA:
        return 8
    if method == FULFILLMENT_FBM:
        revenue = safe_float(monthly_revenue)
        if revenue is not None and revenue >= FBM_REVENUE_FLOOR:
            return 6
        return 2
    return 0


def score_share(pct: Any) -> int:
    """Points for an optional share metric (market or review share)."""

    value = safe_float(pct)
    if value is None:
        return WORST_POINTS
    return min(10, max(1, math.ceil(value / 3)))
