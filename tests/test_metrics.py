import math

import pytest

from niche_vetter import metrics


@pytest.mark.parametrize(
    "price, expected",
    [(20.00, 10), (19.99, 1), (75, 10), (75.01, 1), (0, 1), (-5, 1), ("abc", 1), (math.nan, 1)],
)
def test_score_price_band(price, expected):
    assert metrics.score_price(price) == expected


@pytest.mark.parametrize(
    "bsr, expected",
    [
        (999, 10),
        (1000, 9),
        (5000, 9),
        (5001, 8),
        (10000, 8),
        (20000, 7),
        (30000, 6),
        (50000, 5),
        (75000, 4),
        (100000, 3),
        (150000, 2),
        (150001, 1),
        (999999, 1),
        (0, 1),
        (-10, 1),
        (None, 1),
    ],
)
def test_score_bsr_bands(bsr, expected):
    assert metrics.score_bsr(bsr) == expected


@pytest.mark.parametrize(
    "units, expected",
    [(0, 1), (30, 1), (31, 2), (60, 2), (120, 3), (180, 4), (240, 5), (300, 6), (400, 7), (500, 8), (600, 9), (601, 10)],
)
def test_score_monthly_sales_bands(units, expected):
    assert metrics.score_monthly_sales(units) == expected


@pytest.mark.parametrize(
    "revenue, expected",
    [(10000, 10), (9999.99, 9), (9000, 9), (7500, 8), (6000, 7), (5000, 6), (4000, 5), (3000, 4), (2500, 3), (1000, 2), (999, 1), (-1, 1)],
)
def test_score_monthly_revenue_bands(revenue, expected):
    assert metrics.score_monthly_revenue(revenue) == expected


@pytest.mark.parametrize(
    "rating, expected",
    [(5.0, 10), (4.8, 10), (4.6, 9), (4.5, 8), (4.3, 7), (4.25, 5), (4.2, 5), (4.19, 4), (4.0, 4), (3.8, 3), (3.6, 2), (3.59, 1), (0, 1), (5.5, 1)],
)
def test_score_rating_skips_six(rating, expected):
    assert metrics.score_rating(rating) == expected


@pytest.mark.parametrize(
    "count, expected",
    [(0, 1), (1, 2), (9, 2), (10, 3), (49, 3), (99, 4), (199, 5), (299, 6), (399, 7), (499, 8), (500, 10), (5000, 10), (-3, 1)],
)
def test_score_reviews_has_no_nine_band(count, expected):
    assert metrics.score_reviews(count) == expected


@pytest.mark.parametrize(
    "days, reviews, expected",
    [
        (100, 10, 10),
        (150, 10, 7),
        (200, 10, 5),
        (300, 10, 2),
        (301, 10, 1),
        (0, 1, 10),
        (100, 0, 1),
        (-1, 10, 1),
        (100, -2, 1),
    ],
)
def test_score_review_velocity(days, reviews, expected):
    assert metrics.score_review_velocity(days, reviews) == expected


@pytest.mark.parametrize(
    "method, revenue, expected",
    [
        ("Amazon", None, 10),
        ("FBA", None, 8),
        ("FBM", 2000, 6),
        ("FBM", 1999.99, 2),
        ("FBM", None, 2),
        ("fba", None, 0),
        ("", None, 0),
        (None, 5000, 0),
    ],
)
def test_score_fulfillment(method, revenue, expected):
    assert metrics.score_fulfillment(method, revenue) == expected


@pytest.mark.parametrize("pct, expected", [(0, 1), (3, 1), (3.1, 2), (15, 5), (20, 7), (30, 10), (100, 10)])
def test_score_share(pct, expected):
    assert metrics.score_share(pct) == expected
