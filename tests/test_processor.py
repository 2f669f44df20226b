"""
Unit Tests for the Capture Front End

The detector is replaced by mocks so these tests need neither a camera
nor MediaPipe.

Usage:
    pytest tests/test_processor.py -v
"""

import logging
import numpy as np
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from capture_gate.decision import DecisionEngine
from capture_gate.processor import FaceCaptureProcessor
from capture_gate.signals import Axis, Direction, FaceSignals, OutOfRange
from capture_gate.sinks import MemorySink


READY_FACE = FaceSignals(
    bbox=(100, 100, 300, 350),
    head_pose=(0.0, 0.0, 0.0),
    smile_probability=0.05,
    left_eye_open_probability=0.95,
    right_eye_open_probability=0.95,
)

TURNED_FACE = FaceSignals(
    bbox=(100, 100, 300, 350),
    head_pose=(-12.0, 0.0, 0.0),
    smile_probability=0.05,
    left_eye_open_probability=0.95,
    right_eye_open_probability=0.95,
)


@pytest.fixture
def frame():
    return np.zeros((480, 640, 3), dtype=np.uint8)


@pytest.fixture
def sink():
    return MemorySink()


def make_processor(detector, sink, **config):
    return FaceCaptureProcessor(detector, DecisionEngine(), sink, config)


class TestProcessFrame:
    """Tests for the single-frame front end."""

    def test_ready_face(self, frame, sink):
        detector = MagicMock()
        detector.detect_faces.return_value = [READY_FACE]

        decision = make_processor(detector, sink).process_frame(frame)

        detector.detect_faces.assert_called_once_with(frame)
        assert decision.requirements_met is True
        assert sink.ready is True

    def test_no_face(self, frame, sink):
        detector = MagicMock()
        detector.detect_faces.return_value = []

        decision = make_processor(detector, sink).process_frame(frame)

        assert decision.visible is False
        assert sink.names() == ["visibility"]

    def test_first_face_is_evaluated(self, frame, sink):
        detector = MagicMock()
        detector.detect_faces.return_value = [TURNED_FACE, READY_FACE]

        decision = make_processor(detector, sink).process_frame(frame)

        assert decision.pose == OutOfRange(Axis.Y, Direction.LEFT)

    def test_detector_failure_emits_nothing(self, frame, sink, caplog):
        detector = MagicMock()
        detector.detect_faces.side_effect = RuntimeError("inference error")
        processor = make_processor(detector, sink)

        with caplog.at_level(logging.ERROR):
            decision = processor.process_frame(frame)

        assert decision is None
        assert sink.events == []
        assert processor.frames_failed == 1
        assert "inference error" in caplog.text

    def test_face_details_logged(self, frame, sink, caplog):
        detector = MagicMock()
        detector.detect_faces.return_value = [READY_FACE]
        processor = make_processor(detector, sink, log_face_details=True)

        with caplog.at_level(logging.DEBUG, logger="capture_gate.processor"):
            processor.process_frame(frame)

        assert "face smiling probability: 0.05" in caplog.text


class TestProcessStream:
    """Tests for the streaming front end."""

    def test_skips_failed_frames(self, frame, sink):
        detector = MagicMock()
        detector.detect_faces.side_effect = [[READY_FACE], RuntimeError("boom"), [], [TURNED_FACE]]
        processor = make_processor(detector, sink)

        decisions = list(processor.process_stream([frame] * 4))

        assert [d.visible for d in decisions] == [True, False, True]
        assert [d.requirements_met for d in decisions] == [True, False, False]
        assert processor.frames_processed == 3
        assert processor.frames_failed == 1

    def test_stream_is_lazy(self, frame, sink):
        detector = MagicMock()
        detector.detect_faces.return_value = [READY_FACE]

        stream = make_processor(detector, sink).process_stream(iter([frame, frame]))
        detector.detect_faces.assert_not_called()

        next(stream)
        assert detector.detect_faces.call_count == 1

    def test_both_front_ends_agree(self, frame):
        faces = [[READY_FACE], [TURNED_FACE], []]

        single_detector = MagicMock()
        single_detector.detect_faces.side_effect = list(faces)
        single_sink = MemorySink()
        single = make_processor(single_detector, single_sink)
        single_decisions = [single.process_frame(frame) for _ in faces]

        stream_detector = MagicMock()
        stream_detector.detect_faces.side_effect = list(faces)
        stream_sink = MemorySink()
        stream_decisions = list(make_processor(stream_detector, stream_sink).process_stream([frame] * 3))

        assert single_decisions == stream_decisions
        assert single_sink.events == stream_sink.events


def test_close_releases_detector(sink):
    detector = MagicMock()
    make_processor(detector, sink).close()
    detector.close.assert_called_once()
