"""
Signal Model

Value objects exchanged between the face detector, the decision engine and
the UI layer. Nothing in this module holds logic beyond simple accessors.

An Observation is built fresh for every processed frame and a Decision is
recomputed from it. Neither is ever mutated after construction.

Usage:
    from capture_gate.signals import Observation

    observation = Observation(
        face_count=1,
        smile_probability=0.1,
        left_eye_open_probability=0.9,
        right_eye_open_probability=0.9,
        head_angle_x=0.0,
        head_angle_y=0.0,
        head_angle_z=0.0,
    )
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class Axis(str, Enum):
    """Head rotation axis, named after the detector's Euler angle."""

    X = "x"  # pitch
    Y = "y"  # yaw
    Z = "z"  # roll

    @property
    def label(self) -> str:
        return {"x": "pitch", "y": "yaw", "z": "roll"}[self.value]


class Direction(str, Enum):
    """Direction in which the head deviates from the accepted band."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


# Corrective instruction shown to the user for each deviation.
# The UI layer maps these identifiers to its own assets.
CORRECTIVE_HINTS = {
    (Axis.Y, Direction.LEFT): "move_y_right",
    (Axis.Y, Direction.RIGHT): "move_y_left",
    (Axis.X, Direction.UP): "move_x_downward",
    (Axis.X, Direction.DOWN): "move_x_upward",
    (Axis.Z, Direction.LEFT): "move_z_right",
    (Axis.Z, Direction.RIGHT): "move_z_left",
}


class AxisResult(ABC):
    """
    Outcome of a head pose check.

    Closed set of variants: CorrectPose, or OutOfRange carrying the
    offending axis and the direction of the deviation.
    """

    @property
    @abstractmethod
    def is_valid(self) -> bool:
        """True if every checked axis is inside its band."""

    @property
    def hint(self) -> Optional[str]:
        return None

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize as {"status", "axis", "direction", "hint"}."""


@dataclass(frozen=True)
class CorrectPose(AxisResult):
    """All checked axes are inside their bands."""

    @property
    def is_valid(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "correct", "axis": None, "direction": None, "hint": None}


@dataclass(frozen=True)
class OutOfRange(AxisResult):
    """
    One axis is outside its band.

    Attributes:
        axis: The axis that failed.
        direction: Which way the head deviates on that axis.
    """

    axis: Axis
    direction: Direction

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def hint(self) -> Optional[str]:
        return CORRECTIVE_HINTS.get((self.axis, self.direction))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "out_of_range",
            "axis": self.axis.value,
            "direction": self.direction.value,
            "hint": self.hint,
        }


@dataclass(frozen=True)
class FaceSignals:
    """
    Per-face output of a detector backend.

    Attributes:
        bbox: Bounding box (x1, y1, x2, y2) in pixels.
        head_pose: Head rotation (yaw, pitch, roll) in degrees.
        smile_probability: Smile probability in [0, 1], None if not computed.
        left_eye_open_probability: Left eye openness in [0, 1], or None.
        right_eye_open_probability: Right eye openness in [0, 1], or None.
    """

    bbox: Tuple[int, int, int, int]
    head_pose: Tuple[float, float, float]  # (yaw, pitch, roll) in degrees
    smile_probability: Optional[float] = None
    left_eye_open_probability: Optional[float] = None
    right_eye_open_probability: Optional[float] = None


@dataclass(frozen=True)
class Observation:
    """
    One frame's extracted detector signals.

    Probabilities, when present, are expected in [0, 1]. Angles are in
    degrees and unconstrained; they are only meaningful when face_count > 0.

    Attributes:
        face_count: Number of faces in the frame (0 = no face).
        smile_probability: Optional smile probability.
        left_eye_open_probability: Optional left eye openness probability.
        right_eye_open_probability: Optional right eye openness probability.
        head_angle_x: Pitch in degrees.
        head_angle_y: Yaw in degrees.
        head_angle_z: Roll in degrees.
    """

    face_count: int
    smile_probability: Optional[float] = None
    left_eye_open_probability: Optional[float] = None
    right_eye_open_probability: Optional[float] = None
    head_angle_x: Optional[float] = None
    head_angle_y: Optional[float] = None
    head_angle_z: Optional[float] = None

    @classmethod
    def empty(cls) -> "Observation":
        """Observation for a frame without any face."""
        return cls(face_count=0)

    @classmethod
    def from_faces(cls, faces: Sequence[FaceSignals]) -> "Observation":
        """
        Build an Observation from detector output.

        Only the first face is evaluated; the others are counted.
        """
        if not faces:
            return cls.empty()

        face = faces[0]
        yaw, pitch, roll = face.head_pose
        return cls(
            face_count=len(faces),
            smile_probability=face.smile_probability,
            left_eye_open_probability=face.left_eye_open_probability,
            right_eye_open_probability=face.right_eye_open_probability,
            head_angle_x=pitch,
            head_angle_y=yaw,
            head_angle_z=roll,
        )


@dataclass(frozen=True)
class Decision:
    """
    Capture-readiness verdict for one frame.

    Trait fields are None when the frame has no face or when the detector
    did not supply the underlying probability. pose is None only when no
    face is visible.
    """

    visible: bool
    requirements_met: bool
    neutral_expression: Optional[bool] = None
    left_eye_open: Optional[bool] = None
    right_eye_open: Optional[bool] = None
    pose: Optional[AxisResult] = None

    @classmethod
    def not_visible(cls) -> "Decision":
        return cls(visible=False, requirements_met=False)

    @property
    def failed_checks(self) -> List[str]:
        """Names of the checks keeping this frame from being capture-ready."""
        if not self.visible:
            return ["visibility"]

        failed = []
        if self.neutral_expression is not True:
            failed.append("expression")
        if self.pose is None or not self.pose.is_valid:
            failed.append("pose")
        if self.left_eye_open is not True:
            failed.append("left_eye")
        if self.right_eye_open is not True:
            failed.append("right_eye")
        return failed

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["pose"] = self.pose.to_dict() if self.pose is not None else None
        return data
