"""Tests for angle, velocity and scoring helpers."""

import math

import pytest

from drillscore.cv.geometry import angle_at, clamp_score, midpoint, velocity, window_variance
from drillscore.cv.keypoints import Keypoint


def kp(x, y, score=0.9):
    return Keypoint(x=x, y=y, score=score)


class TestAngleAt:

    @pytest.mark.parametrize("low", [0, 1, 2])
    def test_low_confidence_point_gives_zero(self, low):
        points = [kp(0, 0), kp(1, 0), kp(1, 1)]
        points[low] = kp(points[low].x, points[low].y, score=0.29)
        assert angle_at(*points) == 0

    def test_missing_point_gives_zero(self):
        assert angle_at(None, kp(1, 0), kp(1, 1)) == 0
        assert angle_at(kp(0, 0), None, kp(1, 1)) == 0
        assert angle_at(kp(0, 0), kp(1, 0), None) == 0

    def test_confidence_exactly_at_threshold_is_usable(self):
        assert angle_at(kp(0, 0, 0.3), kp(1, 0, 0.3), kp(1, 1, 0.3)) == pytest.approx(90)

    def test_collinear_points_give_180(self):
        assert angle_at(kp(0, 0), kp(50, 50), kp(100, 100)) == pytest.approx(180, abs=1e-6)

    def test_right_angle(self):
        assert angle_at(kp(0, 100), kp(0, 0), kp(100, 0)) == pytest.approx(90, abs=1)

    def test_forty_five_degrees(self):
        assert angle_at(kp(10, 0), kp(0, 0), kp(10, 10)) == pytest.approx(45)

    def test_zero_length_ray_gives_zero(self):
        assert angle_at(kp(5, 5), kp(5, 5), kp(10, 10)) == 0

    def test_result_within_bounds_for_near_parallel_rays(self):
        angle = angle_at(kp(1e8, 1), kp(0, 0), kp(1e8, 1 + 1e-9))
        assert 0 <= angle <= 180


class TestVelocity:

    def test_identical_points_have_zero_velocity(self):
        point = kp(120, 340)
        assert velocity(point, point, 33) == 0

    def test_pixels_per_second(self):
        # 3-4-5 triangle over 100ms
        assert velocity(kp(0, 0), kp(3, 4), 100) == pytest.approx(50)

    def test_direction_reversal_gives_same_speed(self):
        a, b = kp(10, 20), kp(40, 60)
        assert velocity(a, b, 50) == pytest.approx(velocity(b, a, 50))
        assert velocity(b, a, 50) >= 0

    @pytest.mark.parametrize("dt", [0, -16])
    def test_non_positive_dt_gives_zero(self, dt):
        assert velocity(kp(0, 0), kp(10, 10), dt) == 0

    def test_missing_point_gives_zero(self):
        assert velocity(None, kp(1, 1), 33) == 0
        assert velocity(kp(1, 1), None, 33) == 0

    def test_low_confidence_points_give_zero(self):
        assert velocity(kp(0, 0, 0.1), kp(100, 0, 0.1), 1000) == 0
        assert velocity(kp(0, 0), kp(100, 0, 0.2), 1000) == 0
        assert velocity(kp(0, 0, 0.3), kp(100, 0, 0.3), 1000) == pytest.approx(100)

    def test_custom_confidence_threshold(self):
        assert velocity(kp(0, 0, 0.1), kp(100, 0, 0.1), 1000, min_confidence=0.05) == pytest.approx(100)

    def test_axis_components(self):
        a, b = kp(0, 0), kp(-30, 40)
        assert velocity(a, b, 1000, axis="x") == pytest.approx(30)
        assert velocity(a, b, 1000, axis="y") == pytest.approx(40)
        assert velocity(a, b, 1000) == pytest.approx(50)

    def test_magnitude_is_not_clamped(self):
        assert velocity(kp(0, 0), kp(10000, 0), 1) == pytest.approx(1e7)


def test_midpoint():
    mid = midpoint(kp(0, 0, 0.8), kp(10, 20, 0.5))
    assert (mid.x, mid.y) == (5, 10)
    assert mid.score == 0.5
    assert midpoint(kp(0, 0), None) is None


def test_window_variance():
    assert window_variance([]) == 0
    assert window_variance([7.0]) == 0
    assert window_variance([1.0, 3.0]) == pytest.approx(1.0)
    assert window_variance(iter([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])) == pytest.approx(4.0)


@pytest.mark.parametrize("value, expected", [
    (-20, 0),
    (0, 0),
    (49.6, 50),
    (100, 100),
    (250.0, 100),
    (math.inf, 100),
    (-math.inf, 0),
    (math.nan, 0),
])
def test_clamp_score(value, expected):
    result = clamp_score(value)
    assert result == expected
    assert isinstance(result, int)
