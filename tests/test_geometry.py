"""Tests for the heart curve sampling and normalization."""

import math

import pytest

from heartwall.geometry import compute_heart_positions, heart_point


class TestHeartPoint:
    def test_raw_points_at_quarter_turns(self):
        expected = [(0, -5), (16, -4), (0, 17), (-16, -4)]
        for i, (ex, ey) in enumerate(expected):
            x, y = heart_point(i / 4 * 2 * math.pi)
            assert x == pytest.approx(ex, abs=1e-9)
            assert y == pytest.approx(ey, abs=1e-9)


class TestComputeHeartPositions:
    def test_four_point_vector(self):
        """Four samples normalize to the top notch, the two lobes and the tip."""
        points = compute_heart_positions(4)
        expected = [(0.5, 0.0), (1.0, 0.0455), (0.5, 1.0), (0.0, 0.0455)]
        assert len(points) == 4
        for (x, y), (ex, ey) in zip(points, expected):
            assert x == pytest.approx(ex, abs=1e-9)
            assert y == pytest.approx(ey, abs=0.001)

    @pytest.mark.parametrize("n", [2, 3, 4, 7, 50, 185, 1000])
    def test_axes_span_exactly_zero_to_one(self, n):
        points = compute_heart_positions(n)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        assert min(xs) == 0.0 and max(xs) == 1.0
        assert min(ys) == 0.0 and max(ys) == 1.0

    def test_single_point_uses_unit_range(self):
        assert compute_heart_positions(1) == [(0.0, 0.0)]

    def test_deterministic_and_in_curve_order(self):
        a = compute_heart_positions(185)
        b = compute_heart_positions(185)
        assert a == b
        # t=0 is the notch between the lobes, centered horizontally
        assert a[0][0] == pytest.approx(0.5, abs=0.01)
        # the tip (t=pi) sits at the very bottom
        tip = max(a, key=lambda p: p[1])
        assert tip[0] == pytest.approx(0.5, abs=0.01)

    @pytest.mark.parametrize("n", [0, -3])
    def test_non_positive_count_rejected(self, n):
        with pytest.raises(ValueError, match="num_points"):
            compute_heart_positions(n)
