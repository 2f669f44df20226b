"""
Head Pose Evaluation

Classifies head rotation against per-axis threshold bands and picks the
single corrective instruction to surface to the user.

Axes are checked in a fixed priority (yaw, then pitch, then roll) and the
first failing axis wins, so at most one hint is reported per frame even if
several axes are off at the same time.

Default bands (degrees, bounds inclusive):

    | Axis      | Lower | Upper |
    |-----------|-------|-------|
    | Y (yaw)   | -3.5  |  3.5  |
    | X (pitch) | -5.5  |  3.5  |
    | Z (roll)  | -2.5  |  2.5  |

The pitch band is intentionally asymmetric.

Usage:
    from capture_gate.pose import PoseEvaluator

    evaluator = PoseEvaluator(config)
    result = evaluator.evaluate(x=0.0, y=-4.0, z=0.0)
    # OutOfRange(axis=Axis.Y, direction=Direction.LEFT)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from capture_gate.signals import (
    Axis,
    AxisResult,
    CorrectPose,
    Direction,
    OutOfRange,
)


DEFAULT_YAW_RANGE = (-3.5, 3.5)
DEFAULT_PITCH_RANGE = (-5.5, 3.5)
DEFAULT_ROLL_RANGE = (-2.5, 2.5)

_CORRECT = CorrectPose()


def evaluate_axis(
    angle: float,
    lower_bound: float,
    upper_bound: float,
    below: AxisResult,
    above: AxisResult,
) -> AxisResult:
    """
    Classify one angle against an inclusive band.

    Args:
        angle: Measured angle in degrees.
        lower_bound: Smallest accepted angle.
        upper_bound: Largest accepted angle.
        below: Result to return when the angle is under the band.
        above: Result to return when the angle is over the band.

    Returns:
        below, above, or CorrectPose.
    """
    if angle < lower_bound:
        return below
    if angle > upper_bound:
        return above
    return _CORRECT


@dataclass(frozen=True)
class AxisBand:
    """
    Accepted range for one axis, with the deviation reported on each side.

    Attributes:
        axis: Axis this band applies to.
        lower: Lower bound in degrees (inclusive).
        upper: Upper bound in degrees (inclusive).
        below: Direction reported when the angle is under the band.
        above: Direction reported when the angle is over the band.
    """

    axis: Axis
    lower: float
    upper: float
    below: Direction
    above: Direction

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(
                f"Invalid {self.axis.label} band: lower bound {self.lower} "
                f"is greater than upper bound {self.upper}"
            )

    @classmethod
    def from_range(
        cls,
        axis: Axis,
        bounds: Sequence[float],
        below: Direction,
        above: Direction,
    ) -> "AxisBand":
        lower, upper = bounds
        return cls(axis=axis, lower=float(lower), upper=float(upper), below=below, above=above)

    def evaluate(self, angle: float) -> AxisResult:
        return evaluate_axis(
            angle,
            self.lower,
            self.upper,
            OutOfRange(self.axis, self.below),
            OutOfRange(self.axis, self.above),
        )


class PoseEvaluator:
    """
    Sequences the three axis checks with short-circuit priority Y -> X -> Z.

    Stateless: a single instance can be shared across frame sources.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the PoseEvaluator.

        Args:
            config: Optional pose configuration containing:
                - yaw_range: [lower, upper] for the Y axis
                - pitch_range: [lower, upper] for the X axis
                - roll_range: [lower, upper] for the Z axis
        """
        config = config or {}

        self.yaw_band = AxisBand.from_range(
            Axis.Y, config.get("yaw_range", DEFAULT_YAW_RANGE),
            below=Direction.LEFT, above=Direction.RIGHT,
        )
        self.pitch_band = AxisBand.from_range(
            Axis.X, config.get("pitch_range", DEFAULT_PITCH_RANGE),
            below=Direction.DOWN, above=Direction.UP,
        )
        self.roll_band = AxisBand.from_range(
            Axis.Z, config.get("roll_range", DEFAULT_ROLL_RANGE),
            below=Direction.LEFT, above=Direction.RIGHT,
        )

    @property
    def bands(self):
        """Bands in evaluation order."""
        return (self.yaw_band, self.pitch_band, self.roll_band)

    def evaluate(self, x: float, y: float, z: float) -> AxisResult:
        """
        Evaluate a head pose.

        Args:
            x: Pitch in degrees.
            y: Yaw in degrees.
            z: Roll in degrees.

        Returns:
            The first OutOfRange in priority order, or CorrectPose.
        """
        angles = {Axis.X: x, Axis.Y: y, Axis.Z: z}

        for band in self.bands:
            result = band.evaluate(angles[band.axis])
            if not result.is_valid:
                return result

        return _CORRECT
