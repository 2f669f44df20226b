"""
Result sinks.

Ready-made ResultSink implementations:
- NullSink: ignores everything
- MemorySink: records notifications in order (tests, API responses)
- LoggingSink: logs notifications and readiness transitions
- CompositeSink: fans notifications out to several sinks
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from capture_gate.decision import ResultSink
from capture_gate.signals import AxisResult

logger = logging.getLogger(__name__)


class NullSink(ResultSink):
    """Sink that discards all notifications."""


@dataclass(frozen=True)
class SinkEvent:
    """One recorded notification: method name without the on_ prefix, and its value."""

    name: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        value = self.value.to_dict() if isinstance(self.value, AxisResult) else self.value
        return {"name": self.name, "value": value}


class MemorySink(ResultSink):
    """
    Sink that keeps every notification in memory.

    The latest value of each notification is also tracked, mirroring what a
    status screen would show after the frame.
    """

    def __init__(self):
        self.events: List[SinkEvent] = []
        self.latest: Dict[str, Any] = {}

    def _record(self, name: str, value: Any) -> None:
        self.events.append(SinkEvent(name, value))
        self.latest[name] = value

    def on_visibility(self, visible: bool) -> None:
        self._record("visibility", visible)

    def on_expression(self, neutral: bool) -> None:
        self._record("expression", neutral)

    def on_left_eye(self, is_open: bool) -> None:
        self._record("left_eye", is_open)

    def on_right_eye(self, is_open: bool) -> None:
        self._record("right_eye", is_open)

    def on_pose(self, result: AxisResult) -> None:
        self._record("pose", result)

    def on_requirements_met(self, ready: bool) -> None:
        self._record("requirements_met", ready)

    @property
    def ready(self) -> bool:
        """Last reported readiness; False until a face frame was seen."""
        return bool(self.latest.get("requirements_met", False)) and bool(
            self.latest.get("visibility", False)
        )

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def drain(self) -> List[SinkEvent]:
        """Return the recorded events and clear the buffer."""
        events, self.events = self.events, []
        return events

    def clear(self) -> None:
        self.events = []
        self.latest = {}


class LoggingSink(ResultSink):
    """Logs each notification at DEBUG and readiness changes at INFO."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self._ready: Optional[bool] = None

    def on_visibility(self, visible: bool) -> None:
        self.log.debug(f"Face visible: {visible}")
        if not visible:
            self._transition(False)

    def on_expression(self, neutral: bool) -> None:
        self.log.debug(f"Neutral expression: {neutral}")

    def on_left_eye(self, is_open: bool) -> None:
        self.log.debug(f"Left eye open: {is_open}")

    def on_right_eye(self, is_open: bool) -> None:
        self.log.debug(f"Right eye open: {is_open}")

    def on_pose(self, result: AxisResult) -> None:
        if result.is_valid:
            self.log.debug("Head pose: correct")
        else:
            self.log.debug(f"Head pose: {result.axis.label} {result.direction.value} -> {result.hint}")

    def on_requirements_met(self, ready: bool) -> None:
        self._transition(ready)

    def _transition(self, ready: bool) -> None:
        if ready != self._ready:
            self.log.info("Capture ready" if ready else "Capture not ready")
        self._ready = ready


class CompositeSink(ResultSink):
    """Forwards every notification to each wrapped sink, in order."""

    def __init__(self, *sinks: ResultSink):
        self.sinks = list(sinks)

    def on_visibility(self, visible: bool) -> None:
        for sink in self.sinks:
            sink.on_visibility(visible)

    def on_expression(self, neutral: bool) -> None:
        for sink in self.sinks:
            sink.on_expression(neutral)

    def on_left_eye(self, is_open: bool) -> None:
        for sink in self.sinks:
            sink.on_left_eye(is_open)

    def on_right_eye(self, is_open: bool) -> None:
        for sink in self.sinks:
            sink.on_right_eye(is_open)

    def on_pose(self, result: AxisResult) -> None:
        for sink in self.sinks:
            sink.on_pose(result)

    def on_requirements_met(self, ready: bool) -> None:
        for sink in self.sinks:
            sink.on_requirements_met(ready)
