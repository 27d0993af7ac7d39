"""Points rules: each rule's contribution in isolation, plus full receipts scored end to end."""

from decimal import Decimal

import pytest

from receipt_processor.models.receipt import Receipt
from receipt_processor.utils.errors import MalformedInputError
from receipt_processor.utils.pointsCalculator import PointsCalculator


TARGET_RECEIPT = {
    "retailer": "Target",
    "purchaseDate": "2022-01-01",
    "purchaseTime": "13:01",
    "items": [
        {"shortDescription": "Mountain Dew 12PK", "price": "6.49"},
        {"shortDescription": "Emils Cheese Pizza", "price": "12.25"},
        {"shortDescription": "Knorr Creamy Chicken", "price": "1.26"},
        {"shortDescription": "Doritos Nacho Cheese", "price": "3.35"},
        {"shortDescription": "   Klarbrunn 12-PK 12 FL OZ  ", "price": "12.00"},
    ],
    "total": "35.35",
}

CORNER_MARKET_RECEIPT = {
    "retailer": "M&M Corner Market",
    "purchaseDate": "2022-03-20",
    "purchaseTime": "14:33",
    "items": [
        {"shortDescription": "Gatorade", "price": "2.25"},
        {"shortDescription": "Gatorade", "price": "2.25"},
        {"shortDescription": "Gatorade", "price": "2.25"},
        {"shortDescription": "Gatorade", "price": "2.25"},
    ],
    "total": "9.00",
}


def make_receipt(**overrides) -> Receipt:
    data = {
        "retailer": "Shop",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "10:00",
        "items": [],
        "total": "1.01",
    }
    data.update(overrides)
    return Receipt.model_validate(data)


@pytest.fixture
def calculator():
    return PointsCalculator()


def test_target_receipt_scores_28(calculator):
    assert calculator.calculatePoints(Receipt.model_validate(TARGET_RECEIPT)) == 28


def test_corner_market_receipt_scores_109(calculator):
    receipt = Receipt.model_validate(CORNER_MARKET_RECEIPT)
    assert calculator.pointsBreakdown(receipt) == {
        "retailerName": 14,
        "roundDollarTotal": 50,
        "quarterMultipleTotal": 25,
        "itemPairs": 10,
        "itemDescriptions": 0,
        "oddPurchaseDay": 0,
        "afternoonPurchase": 10,
    }
    assert calculator.calculatePoints(receipt) == 109


def test_scoring_is_repeatable(calculator):
    """Same receipt scored 10x -> identical points."""
    receipt = Receipt.model_validate(TARGET_RECEIPT)
    results = [calculator.calculatePoints(receipt) for _ in range(10)]
    assert results == [28] * 10


def test_retailer_name_ignores_punctuation_and_spaces():
    assert PointsCalculator.retailerNamePoints("M&M Corner Market") == 14
    assert PointsCalculator.retailerNamePoints("MM Corner Market") == 14
    assert PointsCalculator.retailerNamePoints("  M & M   Corner -- Market!! ") == 14
    assert PointsCalculator.retailerNamePoints("") == 0


def test_retailer_name_counts_unicode_letters_and_digits():
    assert PointsCalculator.retailerNamePoints("Café 7") == 5
    assert PointsCalculator.retailerNamePoints("東京ストア") == 5


@pytest.mark.parametrize(
    "total, expected",
    [("100.00", 75), ("200.00", 75), ("100.50", 25), ("100.25", 25), ("100.49", 0), ("0.00", 75)],
)
def test_total_rules(total, expected):
    amount = Decimal(total)
    points = PointsCalculator.roundDollarPoints(amount) + PointsCalculator.quarterMultiplePoints(amount)
    assert points == expected


@pytest.mark.parametrize("count, expected", [(0, 0), (1, 0), (2, 5), (3, 5), (4, 10), (7, 15)])
def test_item_pairs(count, expected):
    items = [{"shortDescription": "x", "price": "1.00"}] * count
    receipt = make_receipt(items=items)
    assert PointsCalculator.itemPairPoints(receipt.items) == expected


def test_item_description_multiple_of_three_rounds_each_item_up():
    receipt = make_receipt(items=[
        {"shortDescription": "abc", "price": "1.01"},
        {"shortDescription": "abcdef", "price": "5.00"},
        {"shortDescription": "abcd", "price": "100.00"},
    ])
    # ceil(0.202) + ceil(1.0)
    assert PointsCalculator.itemDescriptionPoints(receipt.items) == 2


def test_item_description_is_trimmed_before_measuring():
    receipt = make_receipt(items=[{"shortDescription": "  abc \t", "price": "10.00"}])
    assert PointsCalculator.itemDescriptionPoints(receipt.items) == 2


def test_blank_item_description_earns_nothing():
    receipt = make_receipt(items=[
        {"shortDescription": "", "price": "10.00"},
        {"shortDescription": "     ", "price": "10.00"},
    ])
    assert PointsCalculator.itemDescriptionPoints(receipt.items) == 0


@pytest.mark.parametrize("purchaseDate, expected", [("2022-01-01", 6), ("2022-01-31", 6), ("2022-01-02", 0), ("2024-02-29", 6)])
def test_odd_purchase_day(purchaseDate, expected):
    assert PointsCalculator.oddDayPoints(purchaseDate) == expected


@pytest.mark.parametrize(
    "purchaseTime, expected",
    [
        ("14:00", 0),
        ("14:00:00", 0),
        ("14:01", 10),
        ("14:00:01", 10),
        ("15:59", 10),
        ("16:00", 0),
        ("16:00:00", 0),
        ("13:59", 0),
        ("00:00", 0),
    ],
)
def test_afternoon_window_is_exclusive(purchaseTime, expected):
    assert PointsCalculator.afternoonPoints(purchaseTime) == expected


@pytest.mark.parametrize("purchaseDate", ["2022-02-30", "2022/01/01", "22-01-01", "2022-1-1", ""])
def test_malformed_date_fails_scoring(purchaseDate):
    with pytest.raises(MalformedInputError):
        PointsCalculator.oddDayPoints(purchaseDate)


@pytest.mark.parametrize("purchaseTime", ["24:00", "2:30pm", "14:60", "1401", ""])
def test_malformed_time_fails_scoring(purchaseTime):
    with pytest.raises(MalformedInputError):
        PointsCalculator.afternoonPoints(purchaseTime)


def test_malformed_time_is_not_scored_as_zero(calculator):
    """A receipt built without validation still fails instead of scoring 0 for the rule."""
    receipt = Receipt.model_construct(
        retailer="Shop",
        purchaseDate="2022-01-01",
        purchaseTime="not a time",
        items=(),
        total=Decimal("1.00"),
    )
    with pytest.raises(MalformedInputError):
        calculator.calculatePoints(receipt)
