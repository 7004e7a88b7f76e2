"""Pricing calculator - price derivation for bookings and quotes"""

from typing import Optional

from ...config import (
    PRICING_BASE_AREA,
    QUOTE_COMPLEXITY_SURCHARGE,
    QUOTE_COMPLEXITY_THRESHOLD,
)


def size_multiplier(square_meters: float) -> float:
    """Linear scale above the base area, never below 1"""
    return max(1.0, square_meters / PRICING_BASE_AREA)


def calculate_price(base_price: float, square_meters: float) -> float:
    """
    Price a cleaning job.

    total = base_price * max(1, square_meters / 50)

    Raises:
        ValueError: If the base price or area is not strictly positive
    """
    if base_price is None or base_price <= 0:
        raise ValueError("Base price must be greater than 0")
    if square_meters is None or square_meters <= 0:
        raise ValueError("Square meters must be greater than 0")

    return round(base_price * size_multiplier(square_meters), 2)


def estimate_quote_price(
    base_price: float, square_meters: float, special_requirements: Optional[str] = None
) -> float:
    """Quote estimate: booking price plus a surcharge for long special requirements"""
    estimate = calculate_price(base_price, square_meters)
    if special_requirements and len(special_requirements) > QUOTE_COMPLEXITY_THRESHOLD:
        estimate = round(estimate * (1 + QUOTE_COMPLEXITY_SURCHARGE), 2)
    return estimate
