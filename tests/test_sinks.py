"""
Unit Tests for Result Sinks

Usage:
    pytest tests/test_sinks.py -v
"""

import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from capture_gate.decision import DecisionEngine
from capture_gate.signals import Axis, CorrectPose, Direction, Observation, OutOfRange
from capture_gate.sinks import CompositeSink, LoggingSink, MemorySink, NullSink, SinkEvent


READY = Observation(
    face_count=1,
    smile_probability=0.0,
    left_eye_open_probability=1.0,
    right_eye_open_probability=1.0,
    head_angle_x=0.0,
    head_angle_y=0.0,
    head_angle_z=0.0,
)


class TestMemorySink:
    """Tests for MemorySink."""

    def test_records_in_order(self):
        sink = MemorySink()
        sink.on_visibility(True)
        sink.on_pose(CorrectPose())
        assert sink.events == [SinkEvent("visibility", True), SinkEvent("pose", CorrectPose())]

    def test_ready_tracks_last_frame(self):
        engine = DecisionEngine()
        sink = MemorySink()
        assert sink.ready is False

        engine.process(READY, sink)
        assert sink.ready is True

        engine.process(Observation(face_count=0), sink)
        assert sink.ready is False

    def test_drain(self):
        sink = MemorySink()
        sink.on_expression(True)
        events = sink.drain()
        assert len(events) == 1
        assert sink.events == []
        assert sink.latest["expression"] is True

    def test_clear(self):
        sink = MemorySink()
        sink.on_requirements_met(True)
        sink.clear()
        assert sink.events == []
        assert sink.latest == {}

    def test_event_to_dict_serializes_pose(self):
        event = SinkEvent("pose", OutOfRange(Axis.Y, Direction.RIGHT))
        assert event.to_dict() == {
            "name": "pose",
            "value": {"status": "out_of_range", "axis": "y", "direction": "right", "hint": "move_y_left"},
        }


class TestLoggingSink:
    """Tests for LoggingSink."""

    def test_logs_readiness_transitions_once(self, caplog):
        engine = DecisionEngine()
        sink = LoggingSink()

        with caplog.at_level(logging.INFO, logger="capture_gate.sinks"):
            engine.process(READY, sink)
            engine.process(READY, sink)
            engine.process(Observation(face_count=0), sink)

        messages = [
            r.getMessage() for r in caplog.records
            if r.name == "capture_gate.sinks" and r.levelno == logging.INFO
        ]
        assert messages == ["Capture ready", "Capture not ready"]

    def test_logs_pose_hint_at_debug(self, caplog):
        sink = LoggingSink()
        with caplog.at_level(logging.DEBUG, logger="capture_gate.sinks"):
            sink.on_pose(OutOfRange(Axis.X, Direction.DOWN))
        assert "move_x_upward" in caplog.text


class TestCompositeSink:
    """Tests for CompositeSink."""

    def test_fans_out(self):
        first, second = MemorySink(), MemorySink()
        DecisionEngine().process(READY, CompositeSink(first, NullSink(), second))
        assert first.names() == second.names()
        assert len(first.events) == 6
