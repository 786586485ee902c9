"""Tests for the streaming least-squares line fitter."""

import math
import random

import pytest
from scipy import stats

from trend_overlay.fitting import LinearFitter, create_fitter
from trend_overlay.geometry.models import Point


def fitted(points: list[tuple[float, float]]) -> LinearFitter:
    fitter = LinearFitter()
    for x, y in points:
        fitter.add(x, y)
    return fitter


class TestLinearFitter:
    """Tests for LinearFitter."""

    def test_new_fitter_is_empty(self):
        """A fresh fitter has no points and sentinel extrema."""
        fitter = LinearFitter()
        assert fitter.count == 0
        assert fitter.min_x == math.inf
        assert fitter.max_x == -math.inf
        assert not fitter.has_fit

    def test_two_points_define_the_line(self):
        """Slope 1 through (0, 10) and (10, 20)."""
        fitter = fitted([(0, 10), (10, 20)])

        assert fitter.slope() == pytest.approx(1.0)
        assert fitter.intercept() == pytest.approx(10.0)
        assert fitter.has_fit

    def test_indexed_series_exact_values(self):
        """[10, 20, 30, 40, 50] indexed 0..4 gives slope 10, intercept 10."""
        fitter = fitted([(i, v) for i, v in enumerate([10, 20, 30, 40, 50])])

        assert fitter.slope() == 10
        assert fitter.intercept() == 10

    def test_points_exactly_on_line_round_trip(self):
        """Points on y = 0.5x - 3 recover m and c, also outside the data range."""
        fitter = fitted([(x, 0.5 * x - 3) for x in (-4, 1, 2, 7, 11)])

        assert fitter.slope() == pytest.approx(0.5)
        assert fitter.intercept() == pytest.approx(-3.0)
        for x in (-100, 0, 5.5, 250):
            assert fitter.value_at(x) == pytest.approx(0.5 * x - 3)

    def test_matches_scipy_linregress(self):
        """Noisy data agrees with scipy's regression."""
        rng = random.Random(7)
        xs = [float(i) for i in range(40)]
        ys = [3.2 * x - 11 + rng.uniform(-5, 5) for x in xs]
        fitter = fitted(list(zip(xs, ys)))

        expected = stats.linregress(xs, ys)

        assert fitter.slope() == pytest.approx(expected.slope)
        assert fitter.intercept() == pytest.approx(expected.intercept)

    def test_order_invariance(self):
        """Any permutation of the same points gives the same fit."""
        points = [(1, 4), (2, 3.5), (5, 9), (8, 8.25), (13, 20)]
        shuffled = points[:]
        random.Random(3).shuffle(shuffled)

        a, b = fitted(points), fitted(shuffled)

        assert a.slope() == pytest.approx(b.slope())
        assert a.intercept() == pytest.approx(b.intercept())
        assert (a.min_x, a.max_x) == (b.min_x, b.max_x)

    def test_extrema_tracked(self):
        """min_x and max_x follow the added points."""
        fitter = fitted([(5, 1), (-2, 3), (9, 0), (4, 4)])
        assert fitter.min_x == -2
        assert fitter.max_x == 9

    def test_first_point_sets_both_extrema(self):
        """Even a negative first x replaces both sentinels."""
        fitter = fitted([(-7, 1)])
        assert fitter.min_x == -7
        assert fitter.max_x == -7

    def test_cache_invalidated_on_add(self):
        """Adding a point after reading the slope changes the answer."""
        fitter = fitted([(0, 0), (1, 1)])
        assert fitter.slope() == pytest.approx(1.0)

        fitter.add(2, 4)

        assert fitter.slope() == pytest.approx(2.0)

    def test_add_points_consumes_stream(self):
        """add_points feeds every Point and reports how many."""
        fitter = LinearFitter()
        consumed = fitter.add_points(Point(x, 2 * x) for x in range(4))

        assert consumed == 4
        assert fitter.count == 4
        assert fitter.slope() == pytest.approx(2.0)

    def test_scale_is_slope(self):
        fitter = fitted([(0, 1), (2, -3)])
        assert fitter.scale() == fitter.slope()

    def test_create_fitter_by_kind(self):
        assert isinstance(create_fitter("linear"), LinearFitter)
        with pytest.raises(ValueError):
            create_fitter("quadratic")


class TestLinearFitterDegenerate:
    """Degenerate inputs produce non-finite values instead of raising."""

    def test_empty_fitter(self):
        fitter = LinearFitter()
        assert math.isnan(fitter.slope())
        assert math.isnan(fitter.intercept())
        assert math.isnan(fitter.value_at(3))

    def test_single_point(self):
        fitter = fitted([(4, 2)])
        assert math.isnan(fitter.slope())
        assert math.isnan(fitter.value_at(4))

    def test_identical_x(self):
        """A vertical cloud of points has no defined slope."""
        fitter = fitted([(3, 1), (3, 5), (3, 9)])
        assert math.isnan(fitter.slope())
        assert math.isnan(fitter.intercept())
        assert math.isnan(fitter.x_intercept())

    def test_identical_fractional_x(self):
        """Cancellation noise in the discriminant still counts as degenerate."""
        fitter = fitted([(0.1, 1), (0.1, 2), (0.1, 3)])
        assert math.isnan(fitter.slope())


class TestXIntercept:
    """Tests for LinearFitter.x_intercept."""

    def test_rising_line(self):
        """y = 2x - 4 crosses zero at x = 2."""
        fitter = fitted([(0, -4), (3, 2)])
        assert fitter.x_intercept() == pytest.approx(2.0)

    def test_falling_line(self):
        """y = -2x + 100 crosses zero at x = 50."""
        fitter = fitted([(0, 100), (10, 80), (20, 60)])
        assert fitter.x_intercept() == pytest.approx(50.0)

    def test_horizontal_line_off_axis(self):
        """y = 5 never crosses zero."""
        fitter = fitted([(0, 5), (1, 5), (2, 5)])
        assert math.isinf(fitter.x_intercept())
        assert fitter.x_intercept() < 0

    def test_horizontal_negative_line(self):
        fitter = fitted([(0, -5), (1, -5)])
        assert fitter.x_intercept() == math.inf

    def test_line_on_axis(self):
        """y = 0 is the axis: crossing point undefined."""
        fitter = fitted([(0, 0), (1, 0), (2, 0)])
        assert math.isnan(fitter.x_intercept())
