"""Tests for the logarithmic price slider mapping."""
from __future__ import annotations

import pytest

from housers.services.price_range import (
    DEFAULT_PRICE_RANGE,
    MAX_PRICE,
    MIN_PRICE,
    PriceRange,
    format_price,
    position_to_price,
    price_to_position,
)


def test_ends_of_the_slider_hit_the_bounds() -> None:
    assert position_to_price(0.0) == MIN_PRICE
    assert position_to_price(1.0) == MAX_PRICE
    assert price_to_position(MIN_PRICE) == pytest.approx(0.0)
    assert price_to_position(MAX_PRICE) == pytest.approx(1.0)


def test_out_of_range_inputs_are_clamped() -> None:
    assert position_to_price(-0.5) == MIN_PRICE
    assert position_to_price(1.5) == MAX_PRICE
    assert price_to_position(1_000) == pytest.approx(0.0)
    assert price_to_position(900_000_000) == pytest.approx(1.0)


def test_midpoint_is_geometric_mean_rounded_to_step() -> None:
    # sqrt(25K * 50M) is about 1.118M, rounded to the 100K step
    assert position_to_price(0.5) == 1_100_000


@pytest.mark.parametrize(
    ("price", "step"),
    [(60_000, 5_000), (250_000, 10_000), (750_000, 25_000), (2_300_000, 100_000), (12_500_000, 500_000)],
)
def test_prices_snap_to_friendly_steps(price: float, step: float) -> None:
    snapped = position_to_price(price_to_position(price))

    assert snapped == pytest.approx(price)
    assert snapped % step == 0


def test_position_is_monotonic() -> None:
    prices = [position_to_price(step / 20) for step in range(21)]

    assert prices == sorted(prices)


def test_handles_keep_a_minimum_gap() -> None:
    slider = DEFAULT_PRICE_RANGE

    assert slider.drag_min_handle(0.9, 0.92) == pytest.approx(0.87)
    assert slider.drag_min_handle(-0.2, 0.5) == 0.0
    assert slider.drag_max_handle(0.1, 0.3) == pytest.approx(0.35)
    assert slider.drag_max_handle(1.4, 0.3) == 1.0


def test_custom_bounds() -> None:
    slider = PriceRange(absolute_min=100_000.0, absolute_max=1_000_000.0)

    assert slider.position_to_price(0.0) == 100_000
    assert slider.position_to_price(1.0) == 1_000_000


def test_format_price() -> None:
    assert format_price(25_000) == "$25K"
    assert format_price(750_000) == "$750K"
    assert format_price(2_500_000) == "$2.5M"
    assert format_price(50_000_000) == "$50M"
    assert format_price(900) == "$900"
