"""Tests for math utility functions."""

from __future__ import annotations

import math

from brandlattice.core.utils.math import clamp, is_finite_number, lerp, round_to


def test_clamp_within_range():
    """Test clamping values within range."""
    assert clamp(5, 0, 10) == 5
    assert clamp(0, 0, 10) == 0
    assert clamp(10, 0, 10) == 10


def test_clamp_outside_range():
    """Test clamping values outside the range."""
    assert clamp(-5, 0, 10) == 0
    assert clamp(15, 0, 10) == 10
    assert clamp(-1.5, 0.0, 10.0) == 0.0


def test_lerp():
    """Test linear interpolation endpoints and midpoint."""
    assert lerp(0, 10, 0.0) == 0.0
    assert lerp(0, 10, 1.0) == 10.0
    assert lerp(-10, 10, 0.5) == 0.0
    assert lerp(48, 8, 0.2) == 40.0


def test_is_finite_number():
    """Test finite number detection."""
    assert is_finite_number(3)
    assert is_finite_number(-2.5)
    assert not is_finite_number(True)
    assert not is_finite_number(math.nan)
    assert not is_finite_number(math.inf)
    assert not is_finite_number("3")


def test_round_to_strips_negative_zero():
    """Test rounding never yields negative zero."""
    assert round_to(1.23456) == 1.2346
    assert math.copysign(1.0, round_to(-0.00001)) == 1.0
