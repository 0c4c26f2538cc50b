import math

import pytest
from pydantic import ValidationError

from grocery.services.schemas import (
    ProductFilters,
    ProductModel,
    is_truthy,
    missing_fields,
    parse_float,
    parse_int,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("25", 25.0), (" 3.5kg", 3.5), (".5", 0.5), ("1e2", 100.0), (7, 7.0), ("-2", -2.0)],
)
def test_parse_float_reads_leading_number(raw, expected):
    assert parse_float(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", None, True])
def test_parse_float_without_number(raw):
    assert math.isnan(parse_float(raw))


@pytest.mark.parametrize("raw, expected", [("10", 10), ("10.7", 10), (10.7, 10), ("-3x", -3), (4, 4)])
def test_parse_int_reads_leading_integer(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw", ["", "x1", None, False, float("nan")])
def test_parse_int_without_integer(raw):
    assert parse_int(raw) is None


def test_truthiness_follows_loose_rules():
    assert is_truthy("false") is True
    assert is_truthy([]) is True
    assert is_truthy(0) is False
    assert is_truthy("") is False
    assert is_truthy(float("nan")) is False


def test_missing_fields_allows_falsy_numbers():
    payload = {"name": "A", "category": "B", "brand": "C", "price": 0, "inStock": False, "quantity": 0}
    assert missing_fields(payload) == []
    assert missing_fields({}) == ["name", "category", "price", "inStock", "quantity", "brand"]


def test_product_model_drops_unknown_keys():
    model = ProductModel(
        name="Apple", category="Fruits", price="2", inStock=1, quantity="5", brand="X", colour="red"
    )
    assert model.to_record(4) == {
        "id": 4,
        "name": "Apple",
        "category": "Fruits",
        "price": 2.0,
        "inStock": True,
        "quantity": 5,
        "brand": "X",
    }


def test_product_model_rejects_non_numeric_price():
    with pytest.raises(ValidationError):
        ProductModel(name="Apple", category="Fruits", price="free", inStock=True, quantity=1, brand="X")


def test_filters_from_args_keeps_missing_and_empty_apart():
    filters = ProductFilters.from_args({"category": "", "limit": "5", "unknown": "1"})
    assert filters.category == ""
    assert filters.brand is None
    assert filters.limit == "5"


def test_parse_float_caps_huge_integers():
    assert parse_float(int("9" * 400)) == math.inf
    assert parse_float(-int("9" * 400)) == -math.inf
