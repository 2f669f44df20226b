"""
Unit Tests for Head Pose Evaluation

This module tests:
- evaluate_axis band classification
- AxisBand construction and validation
- PoseEvaluator band boundaries, priority order and configuration

Usage:
    pytest tests/test_pose.py -v
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from capture_gate.pose import AxisBand, PoseEvaluator, evaluate_axis
from capture_gate.signals import Axis, CorrectPose, Direction, OutOfRange


BELOW = OutOfRange(Axis.Y, Direction.LEFT)
ABOVE = OutOfRange(Axis.Y, Direction.RIGHT)


# ============================================================
# Test evaluate_axis
# ============================================================

class TestEvaluateAxis:
    """Tests for the single-axis classifier."""

    def test_inside_band_is_correct(self):
        assert evaluate_axis(0.0, -1.0, 1.0, BELOW, ABOVE) == CorrectPose()

    def test_below_band(self):
        assert evaluate_axis(-1.5, -1.0, 1.0, BELOW, ABOVE) is BELOW

    def test_above_band(self):
        assert evaluate_axis(1.5, -1.0, 1.0, BELOW, ABOVE) is ABOVE

    def test_bounds_are_inclusive(self):
        assert evaluate_axis(-1.0, -1.0, 1.0, BELOW, ABOVE).is_valid
        assert evaluate_axis(1.0, -1.0, 1.0, BELOW, ABOVE).is_valid

    def test_extreme_angles(self):
        """Total over all reals, including values far outside the band."""
        assert evaluate_axis(-1e9, -1.0, 1.0, BELOW, ABOVE) is BELOW
        assert evaluate_axis(float("inf"), -1.0, 1.0, BELOW, ABOVE) is ABOVE


# ============================================================
# Test AxisBand
# ============================================================

class TestAxisBand:
    """Tests for AxisBand."""

    def test_from_range(self):
        band = AxisBand.from_range(Axis.X, [-5.5, 3.5], Direction.DOWN, Direction.UP)
        assert band.lower == -5.5
        assert band.upper == 3.5
        assert band.axis == Axis.X

    def test_inverted_band_rejected(self):
        with pytest.raises(ValueError, match="pitch"):
            AxisBand(Axis.X, 4.0, -4.0, Direction.DOWN, Direction.UP)

    def test_evaluate_reports_configured_directions(self):
        band = AxisBand(Axis.Z, -2.5, 2.5, Direction.LEFT, Direction.RIGHT)
        assert band.evaluate(-3.0) == OutOfRange(Axis.Z, Direction.LEFT)
        assert band.evaluate(3.0) == OutOfRange(Axis.Z, Direction.RIGHT)


# ============================================================
# Test PoseEvaluator
# ============================================================

class TestPoseEvaluator:
    """Tests for the three-axis pose evaluator with default bands."""

    @pytest.fixture
    def evaluator(self):
        return PoseEvaluator()

    @pytest.mark.parametrize("x, y, z", [
        (0.0, 0.0, 0.0),
        (-5.4, 3.4, 2.4),
        (3.4, -3.4, -2.4),
        (1.0, 1.0, 1.0),
    ])
    def test_inside_all_bands(self, evaluator, x, y, z):
        assert evaluator.evaluate(x, y, z) == CorrectPose()

    def test_yaw_lower_boundary_is_inclusive(self, evaluator):
        assert evaluator.evaluate(0.0, -3.5, 0.0).is_valid

    def test_yaw_just_below_boundary(self, evaluator):
        assert evaluator.evaluate(0.0, -3.50001, 0.0) == OutOfRange(Axis.Y, Direction.LEFT)

    def test_yaw_above(self, evaluator):
        assert evaluator.evaluate(0.0, 3.6, 0.0) == OutOfRange(Axis.Y, Direction.RIGHT)

    def test_pitch_band_is_asymmetric(self, evaluator):
        assert evaluator.evaluate(-5.5, 0.0, 0.0).is_valid
        assert evaluator.evaluate(3.5, 0.0, 0.0).is_valid
        assert evaluator.evaluate(-5.6, 0.0, 0.0) == OutOfRange(Axis.X, Direction.DOWN)
        assert evaluator.evaluate(3.6, 0.0, 0.0) == OutOfRange(Axis.X, Direction.UP)
        # -4.0 would fail a symmetric 3.5 band
        assert evaluator.evaluate(-4.0, 0.0, 0.0).is_valid

    def test_roll(self, evaluator):
        assert evaluator.evaluate(0.0, 0.0, 2.5).is_valid
        assert evaluator.evaluate(0.0, 0.0, -2.6) == OutOfRange(Axis.Z, Direction.LEFT)
        assert evaluator.evaluate(0.0, 0.0, 2.6) == OutOfRange(Axis.Z, Direction.RIGHT)

    def test_yaw_has_priority_over_pitch(self, evaluator):
        assert evaluator.evaluate(10.0, 10.0, 0.0) == OutOfRange(Axis.Y, Direction.RIGHT)

    def test_pitch_has_priority_over_roll(self, evaluator):
        assert evaluator.evaluate(-10.0, 0.0, 10.0) == OutOfRange(Axis.X, Direction.DOWN)

    def test_all_axes_invalid_reports_yaw(self, evaluator):
        assert evaluator.evaluate(-10.0, -10.0, -10.0) == OutOfRange(Axis.Y, Direction.LEFT)

    def test_bands_in_evaluation_order(self, evaluator):
        assert [band.axis for band in evaluator.bands] == [Axis.Y, Axis.X, Axis.Z]

    def test_custom_config(self):
        evaluator = PoseEvaluator({"yaw_range": [-10, 10], "roll_range": [-1, 1]})
        assert evaluator.evaluate(0.0, 9.0, 0.0).is_valid
        assert evaluator.evaluate(0.0, 0.0, 1.5) == OutOfRange(Axis.Z, Direction.RIGHT)
        # Pitch keeps its default band
        assert evaluator.pitch_band.lower == -5.5

    def test_invalid_config_raises(self):
        with pytest.raises(ValueError):
            PoseEvaluator({"roll_range": [3, -3]})
