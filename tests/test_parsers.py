from datetime import date, datetime

import pytest

from niche_vetter.parsers import (
    extract_asin,
    normalize_fulfillment,
    parse_competitor,
    parse_competitors,
    parse_history,
    parse_series,
)


def test_parse_competitor_reads_aliases():
    record = parse_competitor(
        {
            "ASIN": "https://www.amazon.com/Ramp/dp/B01KZ5X6Z0?ref=x",
            "Title": "MaxxHaul Car Ramp",
            "price": "$38.88",
            "BSR": "9,178",
            "monthlySales": 180,
            "monthlyRevenue": "7,000.00",
            "rating": "4.3",
            "reviews": 500,
            "marketShare": 20,
            "fulfilledBy": "fba",
            "dateFirstAvailable": "2019-05-02",
        }
    )
    assert record.asin == "B01KZ5X6Z0"
    assert record.title == "MaxxHaul Car Ramp"
    assert record.price == pytest.approx(38.88)
    assert record.bsr == 9178
    assert record.monthly_revenue == pytest.approx(7000)
    assert record.rating == pytest.approx(4.3)
    assert record.market_share_pct == 20
    assert record.review_share_pct is None
    assert record.fulfillment_method == "FBA"
    assert record.date_first_available == date(2019, 5, 2)


def test_parse_competitor_missing_fields_stay_none():
    record = parse_competitor({"asin": "B000000001", "price": "", "rating": "n/a"})
    assert record.price is None
    assert record.rating is None
    assert record.fulfillment_method is None
    assert record.date_first_available is None


def test_parse_competitors_keeps_order():
    records = parse_competitors([{"asin": "B000000002"}, {"asin": "B000000001"}])
    assert [record.asin for record in records] == ["B000000002", "B000000001"]


@pytest.mark.parametrize(
    "value, expected",
    [("B07DNVYB92", "B07DNVYB92"), ("https://amazon.com/dp/B07DNVYB92/", "B07DNVYB92"), ("B07DNVYB92-extra", "B07DNVYB92"), ("", ""), (None, "")],
)
def test_extract_asin(value, expected):
    assert extract_asin(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [("FBA", "FBA"), (" fbm ", "FBM"), ("AMAZON", "Amazon"), ("Merchant", "Merchant"), ("", None), (None, None)],
)
def test_normalize_fulfillment(value, expected):
    assert normalize_fulfillment(value) == expected


def test_parse_series_accepts_mixed_shapes():
    series = parse_series(
        "bsr",
        [
            [1704067200000, 5000],
            {"timestamp": "2024-02-01", "value": "5200"},
            4800,
            {"timestamp": None, "value": None},
        ],
    )
    assert series.metric == "bsr"
    assert series.values() == [5000, 5200, 4800, None]
    assert series.points[0].timestamp == datetime(2024, 1, 1)
    assert series.points[1].timestamp == datetime(2024, 2, 1)
    assert series.points[2].timestamp is None


def test_parse_history_builds_analyses():
    payload = {
        "https://www.amazon.com/dp/B01KZ5X6Z0": {
            "bsr": [9000 + (i % 2) * 200 for i in range(12)],
            "price": [38.88, 38.88, 36.99],
        },
        "B07DNVYB92": {"bsr": [13000, 12000]},
    }
    analyses = parse_history(payload)
    assert set(analyses) == {"B01KZ5X6Z0", "B07DNVYB92"}

    full = analyses["B01KZ5X6Z0"]
    assert full.bsr.score == pytest.approx(1 - 100 / 9100)
    assert full.price.score is not None

    short = analyses["B07DNVYB92"]
    assert short.bsr.score is None
    assert short.price.score is None
    assert short.bsr_trend.trend_pct == pytest.approx((13000 - 12000) / 13000 * 100)
