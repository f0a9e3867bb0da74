from datetime import datetime

import pytest

from niche_vetter.models import CompetitorRecord, HistoricalAnalysis, StabilityResult

NOW = datetime(2025, 1, 1, 12, 0, 0)

# Car ramp niche: nine competitors, average monthly revenue ~$4,130.
CAR_RAMP_ROWS = [
    ("B01KZ5X6Z0", 38.88, 180, 7000, 4.3, 500, 20, 9178, "FBA"),
    ("B07DNVYB92", 32.03, 150, 4800, 4.2, 320, 15, 13132, "FBA"),
    ("B07S8TQRN3", 49.90, 130, 6500, 4.5, 280, 18, 18739, "FBA"),
    ("B07K87KV95", 27.31, 100, 2730, 4.1, 180, 12, 9316, "FBA"),
    ("B083J8DMHB", 42.99, 95, 4084, 4.2, 210, 10, 21500, "FBA"),
    ("B07GQ9GT6N", 38.95, 85, 3311, 4.3, 150, 8, 22700, "FBA"),
    ("B01N1ZOZ8I", 52.35, 80, 4188, 4.4, 190, 7, 25300, "FBA"),
    ("B09B89DSB2", 35.99, 70, 2519, 4.0, 120, 6, 29700, "FBM"),
    ("B08TM8QTHQ", 31.25, 65, 2031, 4.2, 140, 4, 34500, "FBM"),
]

CAR_RAMP_STABILITY = {
    "B01KZ5X6Z0": (1.0, 0.617),
    "B07DNVYB92": (0.568, 0.904),
    "B07S8TQRN3": (0.849, 0.934),
    "B07K87KV95": (1.0, 0.561),
    "B083J8DMHB": (0.75, 0.7),
    "B07GQ9GT6N": (0.7, 0.65),
    "B01N1ZOZ8I": (0.68, 0.72),
    "B09B89DSB2": (0.65, 0.68),
    "B08TM8QTHQ": (0.62, 0.66),
}


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def car_ramp_competitors():
    return [
        CompetitorRecord(
            asin=asin,
            price=price,
            monthly_sales=sales,
            monthly_revenue=revenue,
            rating=rating,
            reviews=reviews,
            market_share_pct=share,
            bsr=bsr,
            fulfillment_method=fulfillment,
        )
        for asin, price, sales, revenue, rating, reviews, share, bsr, fulfillment in CAR_RAMP_ROWS
    ]


@pytest.fixture
def car_ramp_analyses():
    return {
        asin: HistoricalAnalysis(
            asin=asin,
            bsr=StabilityResult(score=bsr),
            price=StabilityResult(score=price),
        )
        for asin, (bsr, price) in CAR_RAMP_STABILITY.items()
    }


def make_strong_record(asin: str) -> CompetitorRecord:
    return CompetitorRecord(
        asin=asin,
        price=50,
        bsr=500,
        monthly_sales=700,
        monthly_revenue=20000,
        rating=4.9,
        reviews=600,
        market_share_pct=30,
        review_share_pct=30,
        fulfillment_method="Amazon",
    )


@pytest.fixture
def strong_record_factory():
    return make_strong_record
