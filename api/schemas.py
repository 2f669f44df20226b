"""
Pydantic Schemas for API Request/Response Models

These schemas provide:
- Type validation of detector signals at the HTTP boundary
- Automatic documentation in OpenAPI/Swagger
- Clear interface contracts for capture clients
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field, model_validator

from capture_gate.signals import Decision, Observation


# ============================================================
# Evaluation Schemas
# ============================================================

class ObservationRequest(BaseModel):
    """Detector signals for one frame."""
    face_count: int = Field(..., ge=0, description="Number of faces in the frame (0 = no face)")
    smile_probability: Optional[float] = Field(None, ge=0.0, le=1.0, description="Smile probability")
    left_eye_open_probability: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Left eye open probability"
    )
    right_eye_open_probability: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Right eye open probability"
    )
    head_angle_x: Optional[float] = Field(None, description="Pitch in degrees")
    head_angle_y: Optional[float] = Field(None, description="Yaw in degrees")
    head_angle_z: Optional[float] = Field(None, description="Roll in degrees")

    @model_validator(mode="after")
    def check_angles_present(self) -> "ObservationRequest":
        """A visible face must come with all three head angles."""
        if self.face_count > 0:
            missing = [
                name for name in ("head_angle_x", "head_angle_y", "head_angle_z")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"face_count > 0 requires head angles, missing: {missing}")
        return self

    def to_observation(self) -> Observation:
        return Observation(**self.model_dump())


class PoseResultModel(BaseModel):
    """Head pose check result."""
    status: str = Field(..., description="'correct' or 'out_of_range'")
    axis: Optional[str] = Field(None, description="Failing axis: 'x', 'y' or 'z'")
    direction: Optional[str] = Field(None, description="Deviation: 'left', 'right', 'up' or 'down'")
    hint: Optional[str] = Field(None, description="Corrective instruction identifier")


class DecisionResponse(BaseModel):
    """Capture-readiness verdict for one frame."""
    visible: bool = Field(..., description="Whether a face was visible")
    requirements_met: bool = Field(..., description="True if the frame is capture-ready")
    neutral_expression: Optional[bool] = Field(None, description="Neutral expression, if computed")
    left_eye_open: Optional[bool] = Field(None, description="Left eye open, if computed")
    right_eye_open: Optional[bool] = Field(None, description="Right eye open, if computed")
    pose: Optional[PoseResultModel] = Field(None, description="Head pose result if face visible")
    failed_checks: List[str] = Field(default_factory=list, description="Checks that did not pass")

    @classmethod
    def from_decision(cls, decision: Decision) -> "DecisionResponse":
        data = decision.to_dict()
        return cls(**data, failed_checks=decision.failed_checks)


class SinkEventModel(BaseModel):
    """One notification delivered to the result sink."""
    name: str = Field(..., description="Notification name, e.g. 'visibility' or 'pose'")
    value: Any = Field(..., description="Notification payload")


class EvaluationResponse(BaseModel):
    """Response of the evaluate endpoint."""
    decision: DecisionResponse
    events: List[SinkEventModel] = Field(default_factory=list, description="Sink notifications in order")


# ============================================================
# Capture (WebSocket) Schemas
# ============================================================

class FrameMessage(BaseModel):
    """Message sent by client for each frame."""
    type: str = Field(default="frame", description="Message type, should be 'frame'")
    data: str = Field(..., description="Base64-encoded JPEG image data")


class FrameStatusResponse(BaseModel):
    """Response sent to client for each processed frame."""
    type: str = Field(default="frame_status", description="Message type")
    frame_index: int = Field(..., description="Index of the frame within the session")
    decision: DecisionResponse
    events: List[SinkEventModel] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error message sent over the capture socket."""
    type: str = Field(default="error", description="Message type")
    error: str = Field(..., description="Error message")
    code: str = Field(default="CAPTURE_ERROR", description="Error code")


# ============================================================
# System Schemas
# ============================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Overall status")
    config_loaded: bool = Field(..., description="Whether config.yaml was loaded")
    pose_bands: dict = Field(default_factory=dict, description="Active pose bands per axis")
