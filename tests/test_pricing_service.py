from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from services.pricing_service import (
    TAX_RATE,
    effective_nightly_rate,
    group_discount,
    number_of_nights,
    price_package,
    price_stay,
)
from utils.exceptions import ValidationError

NOW = datetime(2026, 3, 1, 12, 0)


def room(id=1, base_price=1000.0, discount_percentage=0, valid_from=None, valid_to=None):
    return SimpleNamespace(
        id=id,
        room_type="Double",
        base_price=base_price,
        discount_percentage=discount_percentage,
        discount_valid_from=valid_from,
        discount_valid_to=valid_to,
    )


def package(**overrides):
    values = dict(
        base_price=5000.0,
        discount_percentage=5,
        group_discounts=[
            {"min_people": 4, "max_people": 6, "discount_percentage": 10},
            {"min_people": 5, "max_people": 10, "discount_percentage": 20},
        ],
        group_size_min=1,
        group_size_max=10,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_discount_applies_only_inside_window():
    discounted = room(
        discount_percentage=20,
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=1),
    )
    assert effective_nightly_rate(discounted, NOW) == 800.0
    assert effective_nightly_rate(discounted, NOW + timedelta(days=2)) == 1000.0
    assert effective_nightly_rate(discounted, NOW - timedelta(days=2)) == 1000.0


def test_discount_window_bounds_are_inclusive():
    discounted = room(discount_percentage=10, valid_from=NOW, valid_to=NOW)
    assert effective_nightly_rate(discounted, NOW) == 900.0


def test_zero_percentage_leaves_base_price():
    assert effective_nightly_rate(room(discount_percentage=0, valid_from=NOW, valid_to=NOW), NOW) == 1000.0


def test_nights_round_partial_days_up():
    assert number_of_nights(NOW, NOW + timedelta(days=2, hours=1)) == 3
    assert number_of_nights(NOW, NOW + timedelta(days=3)) == 3


def test_price_stay_two_rooms_three_nights():
    quote = price_stay([(room(), 2)], NOW, NOW + timedelta(days=3), now=NOW)

    assert quote.number_of_nights == 3
    assert quote.room_charges == 6000.0
    assert quote.taxes_and_fees == 1080.0
    assert quote.discount == 0.0
    assert quote.total_price == 7080.0
    assert quote.per_night_price == 2000.0
    assert quote.lines[0].base_price == 1000.0
    assert quote.lines[0].final_price == 6000.0


def test_price_stay_sums_lines_in_order():
    suite = room(id=2, base_price=2500.5)
    quote = price_stay([(room(), 1), (suite, 1)], NOW, NOW + timedelta(days=2), now=NOW)

    assert [line.room_type_id for line in quote.lines] == [1, 2]
    assert quote.room_charges == 7001.0
    assert quote.taxes_and_fees == round(7001.0 * TAX_RATE, 2)
    assert quote.total_price == round(quote.room_charges + quote.taxes_and_fees, 2)


def test_price_stay_rejects_inverted_dates():
    with pytest.raises(ValidationError):
        price_stay([(room(), 1)], NOW, NOW, now=NOW)


def test_first_matching_group_band_wins():
    # 5 people matches both bands, the first declared one applies
    assert group_discount(package(), 5) == 10
    assert group_discount(package(), 8) == 20


def test_group_discount_falls_back_to_flat_percentage():
    assert group_discount(package(), 2) == 5
    assert group_discount(package(group_discounts=[]), 5) == 5


def test_price_package_totals():
    quote = price_package(package(), 4)

    assert quote.discount_percentage == 10
    assert quote.price_per_person == 4500.0
    assert quote.total_price == 18000.0


def test_price_package_enforces_group_size():
    with pytest.raises(ValidationError, match="Minimum group size is 2"):
        price_package(package(group_size_min=2), 1)
    with pytest.raises(ValidationError, match="Maximum group size is 10"):
        price_package(package(), 11)
