"""Tabular summaries of scored competitors."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from .competitor_scoring import get_competitor_strength, score_competitor
from .models import (
    STRENGTH_DECENT,
    STRENGTH_STRONG,
    STRENGTH_WEAK,
    CompetitorRecord,
    MarketVerdict,
)
from .utils import ensure_directory

SUMMARY_COLUMNS = [
    "asin",
    "title",
    "price",
    "bsr",
    "monthly_sales",
    "monthly_revenue",
    "rating",
    "reviews",
    "fulfillment",
    "score",
    "strength",
]


def competitor_summary(
    records: Sequence[CompetitorRecord], now: Optional[datetime] = None
) -> pd.DataFrame:
    rows = []
    for record in records:
        score = score_competitor(record, now=now)
        rows.append(
            {
                "asin": record.asin,
                "title": record.title,
                "price": record.price,
                "bsr": record.bsr,
                "monthly_sales": record.monthly_sales,
                "monthly_revenue": record.monthly_revenue,
                "rating": record.rating,
                "reviews": record.reviews,
                "fulfillment": record.fulfillment_method,
                "score": score,
                "strength": get_competitor_strength(score).label,
            }
        )
    frame = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    if frame.empty:
        return frame
    return frame.sort_values("score", ascending=False, kind="stable").reset_index(drop=True)


def competitor_stats(summary: pd.DataFrame, top: int = 3) -> pd.DataFrame:
    """Collapse a :func:`competitor_summary` frame into one market digest row.

    Missing metrics are ignored; an empty summary yields an empty frame.
    """

    if summary.empty:
        return pd.DataFrame()

    frame = summary.copy()
    for column in ("price", "bsr", "monthly_revenue", "rating", "reviews", "score"):
        frame[column] = pd.to_numeric(frame[column], errors="coerce")
    strengths = frame["strength"].value_counts()

    def leaders(column: str, smallest: bool = False) -> list[str]:
        ranked = frame.dropna(subset=[column])
        ranked = ranked.nsmallest(top, column) if smallest else ranked.nlargest(top, column)
        return ranked["asin"].tolist()

    digest = {
        "competitors": len(frame),
        "average_score": frame["score"].mean(),
        "strong": int(strengths.get(STRENGTH_STRONG, 0)),
        "decent": int(strengths.get(STRENGTH_DECENT, 0)),
        "weak": int(strengths.get(STRENGTH_WEAK, 0)),
        "min_price": frame["price"].min(),
        "median_price": frame["price"].median(),
        "max_price": frame["price"].max(),
        "average_rating": frame["rating"].mean(),
        "total_monthly_revenue": frame["monthly_revenue"].sum(),
        "top_scored": leaders("score"),
        "best_bsr": leaders("bsr", smallest=True),
        "most_reviewed": leaders("reviews"),
    }
    return pd.DataFrame([digest])


def export_summary_csv(frame: pd.DataFrame, destination: Path | str) -> Path:
    path = Path(destination)
    ensure_directory(path)
    frame.to_csv(path, index=False)
    return path


def verdict_to_dict(verdict: MarketVerdict) -> Dict[str, Any]:
    data = verdict.to_dict()
    data["score"] = round(verdict.score, 2)
    data["base_score"] = round(verdict.base_score, 2)
    data["modifiers"] = {name: round(delta, 2) for name, delta in verdict.modifiers.items()}
    return data
