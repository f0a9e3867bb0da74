"""Stability and trend analysis over historical price and BSR series."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, List, Optional

from .models import (
    HistoricalAnalysis,
    HistoricalSeries,
    HistoryPoint,
    StabilityResult,
    TrendMovement,
    TrendResult,
)
from .utils import clean_numbers, mean, population_stddev, safe_float

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 12
BSR_MIN_POINTS = 12
PRICE_MIN_POINTS = 2
TREND_MIN_POINTS = 2
PRICE_TREND_MIN_POINTS = 12

MOVEMENT_THRESHOLD = 0.05
MOVEMENT_CONFIDENCE = 0.8

DEGENERATE_SERIES = "degenerate series"
DEGENERATE_TREND_BASE = "degenerate trend base"

STABILITY_CATEGORIES = (
    (0.8, "Very Stable"),
    (0.6, "Moderate"),
    (0.4, "Somewhat Stable"),
    (0.2, "Unstable"),
)


def series_values(series: Any) -> List[Optional[float]]:
    """Return the raw values of ``series`` with non-numeric entries as ``None``.

    Accepts a :class:`HistoricalSeries`, a sequence of :class:`HistoryPoint`
    or a sequence of plain numbers.

    Raises
    ------
    TypeError
        If ``series`` is not an iterable of points or numbers.
    """

    if isinstance(series, HistoricalSeries):
        return [safe_float(value) for value in series.values()]
    if series is None or isinstance(series, (str, bytes, Mapping)) or not isinstance(series, Iterable):
        raise TypeError(f"Expected a sequence of history points, got {type(series).__name__}")
    values: List[Optional[float]] = []
    for item in series:
        if isinstance(item, HistoryPoint):
            values.append(safe_float(item.value))
        else:
            values.append(safe_float(item))
    return values


def compute_stability(
    series: Any,
    *,
    metric: str = "bsr",
    minimum_points: int = BSR_MIN_POINTS,
    window: Optional[int] = HISTORY_WINDOW,
) -> StabilityResult:
    """Score how little ``series`` fluctuates, as ``max(0, 1 - stddev / mean)``.

    Missing points are dropped first. Only the trailing ``window`` points are
    used (the whole series when ``window`` is ``None``).
    """

    values = clean_numbers(series_values(series))
    if len(values) < minimum_points:
        return StabilityResult(
            score=None,
            warning=(
                f"{metric}: insufficient history "
                f"({len(values)} points, need {minimum_points})"
            ),
        )

    if window is not None:
        values = values[-window:]
    centre = mean(values)
    if centre <= 0:
        return StabilityResult(score=None, warning=DEGENERATE_SERIES)

    score = max(0.0, 1 - population_stddev(values) / centre)
    return StabilityResult(score=score, warning=None)


def compute_bsr_stability(series: Any) -> StabilityResult:
    """Strict variant: twelve monthly points over the trailing year."""

    return compute_stability(
        series, metric="bsr", minimum_points=BSR_MIN_POINTS, window=HISTORY_WINDOW
    )


def compute_price_stability(series: Any) -> StabilityResult:
    """Loose variant: any two clean points, computed over the whole series."""

    return compute_stability(series, metric="price", minimum_points=PRICE_MIN_POINTS, window=None)


def stability_category(score: Optional[float]) -> str:
    if score is None:
        return "Unknown"
    for lower, label in STABILITY_CATEGORIES:
        if score >= lower:
            return label
    return "Poor"


def _percent_change(first: Optional[float], last: Optional[float]) -> TrendResult:
    if first is None or last is None or first == 0:
        return TrendResult(trend_pct=None, warning=DEGENERATE_TREND_BASE)
    return TrendResult(trend_pct=(first - last) / first * 100, warning=None)


def compute_bsr_trend(series: Any) -> TrendResult:
    """Percent change from the first to the last clean point.

    A falling rank is an improvement and yields a positive number.
    """

    values = clean_numbers(series_values(series))
    if len(values) < TREND_MIN_POINTS:
        return TrendResult(
            trend_pct=None,
            warning=f"bsr: insufficient history ({len(values)} points, need {TREND_MIN_POINTS})",
        )
    return _percent_change(values[0], values[-1])


def compute_price_trend(series: Any) -> TrendResult:
    """Percent change between the value twelve points from the end and the last one."""

    values = series_values(series)
    if len(values) < PRICE_TREND_MIN_POINTS:
        return TrendResult(
            trend_pct=None,
            warning=(
                f"price: insufficient history "
                f"({len(values)} points, need {PRICE_TREND_MIN_POINTS})"
            ),
        )
    return _percent_change(values[-PRICE_TREND_MIN_POINTS], values[-1])


compute_trend = compute_bsr_trend


def classify_movement(series: Any) -> Optional[TrendMovement]:
    """Compare the mean of the later half of ``series`` against the earlier half.

    For BSR an ``up`` direction means the rank number grew, i.e. sales got
    worse.
    """

    values = clean_numbers(series_values(series))
    if len(values) < 2:
        return None
    middle = len(values) // 2
    earlier = mean(values[:middle])
    later = mean(values[middle:])
    if earlier == 0:
        return None

    change = (later - earlier) / earlier
    if change > MOVEMENT_THRESHOLD:
        direction = "up"
    elif change < -MOVEMENT_THRESHOLD:
        direction = "down"
    else:
        direction = "stable"
    return TrendMovement(
        direction=direction,
        strength=min(abs(change), 1.0),
        confidence=MOVEMENT_CONFIDENCE,
    )


def analyse_history(asin: str, bsr_series: Any = None, price_series: Any = None) -> HistoricalAnalysis:
    """Build the full historical analysis of one competitor.

    Either series may be ``None`` when it was not collected; the matching
    results then carry an insufficiency warning.
    """

    bsr_series = [] if bsr_series is None else bsr_series
    price_series = [] if price_series is None else price_series
    analysis = HistoricalAnalysis(
        asin=asin,
        bsr=compute_bsr_stability(bsr_series),
        price=compute_price_stability(price_series),
        bsr_trend=compute_bsr_trend(bsr_series),
        price_trend=compute_price_trend(price_series),
        bsr_movement=classify_movement(bsr_series),
    )
    for warning in analysis.warnings():
        logger.debug("History warning for %s: %s", asin, warning)
    return analysis
