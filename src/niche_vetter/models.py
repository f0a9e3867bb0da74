"""Data models for competitor records, historical series and verdicts."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

STATUS_PASS = "PASS"
STATUS_RISKY = "RISKY"
STATUS_FAIL = "FAIL"

STRENGTH_STRONG = "STRONG"
STRENGTH_DECENT = "DECENT"
STRENGTH_WEAK = "WEAK"

FULFILLMENT_AMAZON = "Amazon"
FULFILLMENT_FBA = "FBA"
FULFILLMENT_FBM = "FBM"


@dataclass
class CompetitorRecord:
    """One marketplace listing competing in the niche.

    Every metric is optional; ``None`` means the value was not observed.
    """

    asin: str
    price: Optional[float] = None
    bsr: Optional[int] = None
    monthly_sales: Optional[float] = None
    monthly_revenue: Optional[float] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    market_share_pct: Optional[float] = None
    review_share_pct: Optional[float] = None
    fulfillment_method: Optional[str] = None
    date_first_available: Optional[date] = None
    title: str = ""
    brand: Optional[str] = None


@dataclass
class HistoryPoint:
    timestamp: Optional[datetime]
    value: Optional[float]


@dataclass
class HistoricalSeries:
    metric: str
    points: List[HistoryPoint] = field(default_factory=list)

    def values(self) -> List[Optional[float]]:
        return [point.value for point in self.points]

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class StabilityResult:
    score: Optional[float] = None
    warning: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.score is not None


@dataclass
class TrendResult:
    trend_pct: Optional[float] = None
    warning: Optional[str] = None


@dataclass
class TrendMovement:
    direction: str
    strength: float
    confidence: float


@dataclass
class HistoricalAnalysis:
    asin: str
    bsr: StabilityResult = field(default_factory=StabilityResult)
    price: StabilityResult = field(default_factory=StabilityResult)
    bsr_trend: TrendResult = field(default_factory=TrendResult)
    price_trend: TrendResult = field(default_factory=TrendResult)
    bsr_movement: Optional[TrendMovement] = None

    def warnings(self) -> List[str]:
        results = (self.bsr, self.price, self.bsr_trend, self.price_trend)
        return [result.warning for result in results if result.warning]


@dataclass
class CompetitorStrength:
    label: str


@dataclass
class MarketVerdict:
    score: float
    status: str
    base_score: float = 0.0
    modifiers: Dict[str, float] = field(default_factory=dict)
    auto_fail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
