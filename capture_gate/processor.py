"""
Capture Front End

Connects a face detector to the DecisionEngine. The same processor serves
both ways frames arrive:
- process_frame(): one image at a time (callback-style cameras)
- process_stream(): an iterable of frames (streaming cameras, video files)

Detector failures are logged and the frame is dropped: the sink hears
nothing about a frame that could not be analysed.

Usage:
    from capture_gate.face_detector import FaceDetector
    from capture_gate.decision import DecisionEngine
    from capture_gate.processor import FaceCaptureProcessor
    from capture_gate.sinks import LoggingSink

    processor = FaceCaptureProcessor(FaceDetector(config), DecisionEngine(), LoggingSink())
    for decision in processor.process_stream(frames):
        ...
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from capture_gate.decision import DecisionEngine, ResultSink
from capture_gate.signals import Decision, FaceSignals, Observation

logger = logging.getLogger(__name__)


class FaceCaptureProcessor:
    """
    Runs detection and decision for each incoming frame.

    Attributes:
        detector: Object with detect_faces(frame) -> List[FaceSignals] and close().
        engine: DecisionEngine evaluating each Observation.
        sink: ResultSink receiving the per-frame notifications.
        log_face_details: If True, every detected face is logged at DEBUG.
    """

    def __init__(
        self,
        detector,
        engine: DecisionEngine,
        sink: ResultSink,
        config: Optional[Dict[str, Any]] = None,
    ):
        config = config or {}
        self.detector = detector
        self.engine = engine
        self.sink = sink
        self.log_face_details = config.get("log_face_details", False)
        self.frames_processed = 0
        self.frames_failed = 0

    def process_frame(self, frame) -> Optional[Decision]:
        """
        Evaluate one frame.

        Returns:
            The Decision sent to the sink, or None if detection failed.
        """
        try:
            faces = self.detector.detect_faces(frame)
        except Exception as e:
            self.frames_failed += 1
            logger.error(f"Face detection failed: {e}")
            return None

        decision = self.engine.process(Observation.from_faces(faces), self.sink)
        self.frames_processed += 1

        if self.log_face_details:
            for face in faces:
                self._log_face(face)

        return decision

    def process_stream(self, frames: Iterable) -> Iterator[Decision]:
        """Evaluate frames lazily, skipping those whose detection failed."""
        for frame in frames:
            decision = self.process_frame(frame)
            if decision is not None:
                yield decision

    @staticmethod
    def _log_face(face: FaceSignals) -> None:
        yaw, pitch, roll = face.head_pose
        logger.debug(f"face bounding box: {face.bbox}")
        logger.debug(f"face Euler angles: x={pitch:.2f}, y={yaw:.2f}, z={roll:.2f}")
        logger.debug(f"face left eye open probability: {face.left_eye_open_probability}")
        logger.debug(f"face right eye open probability: {face.right_eye_open_probability}")
        logger.debug(f"face smiling probability: {face.smile_probability}")

    def close(self):
        """Release the detector."""
        self.detector.close()
        logger.info(
            f"Processor closed: {self.frames_processed} frames processed, "
            f"{self.frames_failed} failed"
        )
