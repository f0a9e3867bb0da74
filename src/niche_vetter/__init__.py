"""Niche Vetter package."""

from .competitor_scoring import get_competitor_strength, score_competitor
from .config import EngineConfig
from .history import analyse_history, compute_stability, compute_trend
from .market import score_market
from .models import CompetitorRecord, HistoricalAnalysis, MarketVerdict

__all__ = [
    "CompetitorRecord",
    "EngineConfig",
    "HistoricalAnalysis",
    "MarketVerdict",
    "analyse_history",
    "compute_stability",
    "compute_trend",
    "get_competitor_strength",
    "score_competitor",
    "score_market",
]
