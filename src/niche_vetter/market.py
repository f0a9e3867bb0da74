"""Market-level aggregation into a PASS/RISKY/FAIL verdict.

The order of operations matters: auto-fail gates are checked before any
modifier is applied, and a failed gate returns immediately with the base
score capped below the RISKY band.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Dict, Mapping, Optional, Sequence

from .competitor_scoring import score_competitor
from .config import DEFAULT_CONFIG, EngineConfig
from .models import (
    STATUS_FAIL,
    STATUS_PASS,
    STATUS_RISKY,
    CompetitorRecord,
    HistoricalAnalysis,
    MarketVerdict,
)
from .utils import clamp, days_between, mean, now_utc, parse_date, safe_float

logger = logging.getLogger(__name__)

# Whole-market composition weights. Only revenue_per_competitor feeds the
# base score today; the per-competitor importance weights live in
# competitor_scoring.COMPETITOR_WEIGHTS.
SCORING_WEIGHTS = {
    "monthly_revenue": 0.25,
    "monthly_sales": 0.15,
    "bsr": 0.10,
    "market_share": 0.15,
    "reviews": 0.15,
    "review_share": 0.10,
    "rating": 0.10,
    "fulfilled_by": 0.08,
    "price": 0.08,
    "bsr_consistency": 0.20,
    "price_consistency": 0.12,
    "revenue_per_competitor": 0.15,
    "listing_age": 0.04,
}
COMPETITOR_SCORE_SHARE = 0.85
REVENUE_PER_COMPETITOR_DIVISOR = 1500

REVENUE_MODIFIERS = (
    (12000, 15),
    (8000, 10),
    (5000, 5),
)
LOW_REVENUE_PENALTIES = (
    (3000, -10),
    (4000, -5),
)
# 31-35 competitors share the -5 band; more than 35 is an auto-fail.
COMPETITOR_COUNT_MODIFIERS = (
    (10, 15),
    (15, 8),
    (20, 0),
    (30, -5),
)
OVER_THIRTY_MODIFIER = -5

MATURITY_NEUTRAL = 50
MATURITY_IMPACT = 0.05
MATURITY_BANDS = (
    (18, 100),
    (12, 70),
    (6, 40),
)
NEW_LISTING_WEIGHT = 10
DAYS_PER_MONTH = 30

CONCENTRATION_PENALTIES = (
    (60, -15),
    (40, -5),
)

UPTREND_STRENGTH = 0.5
UPTREND_PENALTY = -15


def _revenue(record: CompetitorRecord) -> float:
    value = safe_float(record.monthly_revenue)
    return 0.0 if value is None else value


def average_revenue(competitors: Sequence[CompetitorRecord]) -> float:
    return sum(_revenue(record) for record in competitors) / (len(competitors) or 1)


def calculate_base_market_score(
    competitors: Sequence[CompetitorRecord], *, now: Optional[datetime] = None
) -> float:
    """Blend the mean competitor score with a direct revenue-per-competitor signal."""

    competitor_scores = [score_competitor(record, now=now) for record in competitors]
    avg_competitor_score = mean(competitor_scores)
    avg_revenue = average_revenue(competitors)
    revenue_per_comp_score = clamp(avg_revenue / REVENUE_PER_COMPETITOR_DIVISOR, 1, 10)
    base_score = (
        avg_competitor_score * COMPETITOR_SCORE_SHARE
        + revenue_per_comp_score * SCORING_WEIGHTS["revenue_per_competitor"] * 10
    )
    logger.debug(
        "Base score %.4f (avg competitor %.4f, avg revenue %.2f, revenue score %.4f)",
        base_score,
        avg_competitor_score,
        avg_revenue,
        revenue_per_comp_score,
    )
    return base_score


def top_competitor_stability(
    competitors: Sequence[CompetitorRecord],
    historical_analyses: Mapping[str, HistoricalAnalysis],
    metric: str,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """Mean ``metric`` stability across the best-selling competitors.

    Competitors without an analysis, or whose stability could not be computed,
    count as ``config.neutral_stability``.
    """

    ranked = sorted(
        competitors,
        key=lambda record: safe_float(record.monthly_sales) or 0.0,
        reverse=True,
    )
    top = ranked[: config.top_competitor_count]

    scores = []
    for record in top:
        analysis = historical_analyses.get(record.asin)
        result = getattr(analysis, metric, None) if analysis is not None else None
        if result is None or result.score is None:
            scores.append(config.neutral_stability)
        else:
            scores.append(result.score)
    return sum(scores) / (len(scores) or 1)


def revenue_modifier(avg_revenue: float) -> float:
    for lower, modifier in REVENUE_MODIFIERS:
        if avg_revenue >= lower:
            return modifier
    for upper, penalty in LOW_REVENUE_PENALTIES:
        if avg_revenue < upper:
            return penalty
    return 0


def competitor_count_modifier(count: int) -> float:
    for upper, modifier in COMPETITOR_COUNT_MODIFIERS:
        if count <= upper:
            return modifier
    return OVER_THIRTY_MODIFIER


def _age_in_months(first_available, now: datetime) -> int:
    return math.ceil(abs(days_between(first_available, now)) / DAYS_PER_MONTH)


def calculate_market_maturity(
    competitors: Sequence[CompetitorRecord], *, now: Optional[datetime] = None
) -> float:
    """0-100 maturity of the niche from the age mix of dated competitors.

    Competitors without a usable date are left out; with none dated the market
    is treated as neutral (50).
    """

    now = now or now_utc()
    dates = [parse_date(record.date_first_available) for record in competitors]
    ages = [_age_in_months(value, now) for value in dates if value is not None]
    if not ages:
        return MATURITY_NEUTRAL

    weighted = 0.0
    for age in ages:
        for lower, weight in MATURITY_BANDS:
            if age > lower:
                weighted += weight
                break
        else:
            weighted += NEW_LISTING_WEIGHT
    return weighted / len(ages)


def maturity_modifier(maturity: float) -> float:
    return (maturity - MATURITY_NEUTRAL) * MATURITY_IMPACT


def concentration_modifier(competitors: Sequence[CompetitorRecord]) -> float:
    shares = [safe_float(record.market_share_pct) or 0.0 for record in competitors]
    max_share = max(shares, default=0.0)
    for lower, penalty in CONCENTRATION_PENALTIES:
        if max_share > lower:
            return penalty
    return 0


def uptrend_modifier(historical_analyses: Mapping[str, HistoricalAnalysis]) -> float:
    """Penalty when most analysed competitors show a strong BSR up-trend."""

    rising = [
        analysis
        for analysis in historical_analyses.values()
        if analysis.bsr_movement is not None
        and analysis.bsr_movement.direction == "up"
        and analysis.bsr_movement.strength > UPTREND_STRENGTH
    ]
    if len(rising) > len(historical_analyses) / 2:
        return UPTREND_PENALTY
    return 0


def classify_market(score: float, config: EngineConfig = DEFAULT_CONFIG) -> str:
    if score >= config.pass_threshold:
        return STATUS_PASS
    if score >= config.risky_threshold:
        return STATUS_RISKY
    return STATUS_FAIL


def _auto_fail(base_score: float, reason: str, config: EngineConfig) -> MarketVerdict:
    logger.debug("Auto-fail: %s", reason)
    return MarketVerdict(
        score=min(config.auto_fail_ceiling, base_score),
        status=STATUS_FAIL,
        base_score=base_score,
        auto_fail=reason,
    )


def score_market(
    competitors: Sequence[CompetitorRecord],
    historical_analyses: Optional[Mapping[str, HistoricalAnalysis]] = None,
    *,
    config: Optional[EngineConfig] = None,
    now: Optional[datetime] = None,
) -> MarketVerdict:
    """Score a niche and classify it as PASS, RISKY or FAIL.

    ``historical_analyses`` maps ASIN to that competitor's analysis. It may be
    empty or partial; the stability gates are skipped entirely when it is
    empty.
    """

    config = config or DEFAULT_CONFIG
    historical_analyses = historical_analyses or {}
    now = now or now_utc()
    logger.debug(
        "Scoring market with %d competitors and %d historical analyses",
        len(competitors),
        len(historical_analyses),
    )

    if len(competitors) > config.max_competitors:
        base_score = calculate_base_market_score(competitors, now=now)
        return _auto_fail(
            base_score, f"more than {config.max_competitors} competitors", config
        )

    if historical_analyses:
        avg_bsr_stability = top_competitor_stability(
            competitors, historical_analyses, "bsr", config=config
        )
        avg_price_stability = top_competitor_stability(
            competitors, historical_analyses, "price", config=config
        )
        logger.debug(
            "Top competitor stability: bsr=%.4f price=%.4f",
            avg_bsr_stability,
            avg_price_stability,
        )
        if avg_bsr_stability < config.bsr_stability_floor:
            base_score = calculate_base_market_score(competitors, now=now)
            return _auto_fail(
                base_score,
                f"BSR stability {avg_bsr_stability:.2f} below {config.bsr_stability_floor:.2f}",
                config,
            )
        if avg_price_stability < config.price_stability_floor:
            base_score = calculate_base_market_score(competitors, now=now)
            return _auto_fail(
                base_score,
                f"price stability {avg_price_stability:.2f} below {config.price_stability_floor:.2f}",
                config,
            )

    base_score = calculate_base_market_score(competitors, now=now)
    modifiers: Dict[str, float] = {
        "revenue": revenue_modifier(average_revenue(competitors)),
        "competitor_count": competitor_count_modifier(len(competitors)),
        "maturity": maturity_modifier(calculate_market_maturity(competitors, now=now)),
        "concentration": concentration_modifier(competitors),
        "bsr_uptrend": uptrend_modifier(historical_analyses),
    }
    raw_score = base_score
    for name, delta in modifiers.items():
        raw_score += delta
        logger.debug("Modifier %s: %+.4f -> %.4f", name, delta, raw_score)

    final_score = clamp(raw_score, 0, 100)
    status = classify_market(final_score, config)
    logger.debug("Final market score %.4f (%s)", final_score, status)
    return MarketVerdict(
        score=final_score,
        status=status,
        base_score=base_score,
        modifiers=modifiers,
    )
