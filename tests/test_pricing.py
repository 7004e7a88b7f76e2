import pytest

from cleanbook.domain.pricing.calculator import calculate_price, estimate_quote_price


def test_price_scales_with_area_above_base():
    assert calculate_price(100, 100) == 200


def test_small_areas_pay_the_base_price():
    assert calculate_price(100, 20) == 100
    assert calculate_price(100, 50) == 100


def test_price_never_decreases_with_area():
    areas = [1, 10, 49.9, 50, 50.1, 75, 120, 500]
    prices = [calculate_price(80, a) for a in areas]
    assert prices == sorted(prices)
    assert all(p >= 80 for p in prices)


@pytest.mark.parametrize("base, area", [(0, 50), (-10, 50), (100, 0), (100, -5)])
def test_non_positive_inputs_are_rejected(base, area):
    with pytest.raises(ValueError):
        calculate_price(base, area)


def test_quote_surcharge_applies_to_long_requirements():
    assert estimate_quote_price(100, 100, "x" * 101) == 240


def test_quote_without_long_requirements_matches_booking_price():
    assert estimate_quote_price(100, 100, "x" * 100) == 200
    assert estimate_quote_price(100, 100, None) == 200
