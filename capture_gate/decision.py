"""
Decision Aggregator

Combines the pose and trait evaluators into one capture-readiness verdict
per frame and forwards it to a consumer-supplied sink.

A frame is capture-ready only when the expression is neutral, the head pose
is correct and both eyes are open. A probability the detector did not
supply counts as a failed check.

The engine is stateless: decide() is a pure function of the Observation,
and the only side effect of process() is calling the sink.

Usage:
    from capture_gate.decision import DecisionEngine
    from capture_gate.sinks import MemorySink

    engine = DecisionEngine()
    sink = MemorySink()
    decision = engine.process(observation, sink)
    if decision.requirements_met:
        take_picture()
"""

import logging
from typing import Any, Dict, Optional

from capture_gate.pose import PoseEvaluator
from capture_gate.signals import AxisResult, Decision, Observation
from capture_gate.traits import TraitEvaluator

logger = logging.getLogger(__name__)


class ResultSink:
    """
    Receiver for per-frame results.

    Every notification defaults to a no-op, so implementers only override
    the ones they display.
    """

    def on_visibility(self, visible: bool) -> None:
        pass

    def on_expression(self, neutral: bool) -> None:
        pass

    def on_left_eye(self, is_open: bool) -> None:
        pass

    def on_right_eye(self, is_open: bool) -> None:
        pass

    def on_pose(self, result: AxisResult) -> None:
        pass

    def on_requirements_met(self, ready: bool) -> None:
        pass


def _passed(check: Optional[bool]) -> bool:
    # Absent signals fail closed.
    return check is True


class DecisionEngine:
    """
    Per-frame capture-readiness evaluator.

    Attributes:
        pose_evaluator: Head pose classifier.
        trait_evaluator: Expression and eye classifiers.
        mirror_eye_callbacks: When True, on_left_eye receives the result
            derived from the right-eye probability and vice versa. The
            Decision itself is never mirrored.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        pose_evaluator: Optional[PoseEvaluator] = None,
        trait_evaluator: Optional[TraitEvaluator] = None,
    ):
        """
        Initialize the DecisionEngine.

        Args:
            config: Optional dictionary with "pose" and "traits" sections
                    (the layout of config.yaml). Missing keys use defaults.
            pose_evaluator: Overrides the evaluator built from config.
            trait_evaluator: Overrides the evaluator built from config.
        """
        config = config or {}
        pose_config = config.get("pose", {})
        trait_config = config.get("traits", {})

        self.pose_evaluator = pose_evaluator or PoseEvaluator(pose_config)
        self.trait_evaluator = trait_evaluator or TraitEvaluator(trait_config)
        self.mirror_eye_callbacks = trait_config.get("mirror_eye_callbacks", True)

        logger.info(
            f"DecisionEngine initialized (mirror_eye_callbacks={self.mirror_eye_callbacks})"
        )
        for band in self.pose_evaluator.bands:
            logger.debug(f"  {band.axis.label} band: [{band.lower}, {band.upper}]")

    def decide(self, observation: Observation) -> Decision:
        """
        Compute the Decision for one frame.

        No pose or trait evaluation happens when face_count is 0, so absent
        angles are never read.
        """
        if observation.face_count == 0:
            return Decision.not_visible()

        pose = self.pose_evaluator.evaluate(
            observation.head_angle_x,
            observation.head_angle_y,
            observation.head_angle_z,
        )
        traits = self.trait_evaluator.evaluate(observation)

        requirements_met = (
            _passed(traits.neutral_expression)
            and pose.is_valid
            and _passed(traits.left_eye_open)
            and _passed(traits.right_eye_open)
        )

        return Decision(
            visible=True,
            requirements_met=requirements_met,
            neutral_expression=traits.neutral_expression,
            left_eye_open=traits.left_eye_open,
            right_eye_open=traits.right_eye_open,
            pose=pose,
        )

    def notify(self, decision: Decision, sink: ResultSink) -> None:
        """
        Forward a Decision to a sink.

        A frame without a face produces a single on_visibility(False).
        Otherwise the sink receives, in order: visibility, expression and
        eyes (each only if computed), pose, and requirements_met.
        """
        sink.on_visibility(decision.visible)
        if not decision.visible:
            return

        if decision.neutral_expression is not None:
            sink.on_expression(decision.neutral_expression)

        if self.mirror_eye_callbacks:
            if decision.left_eye_open is not None:
                sink.on_right_eye(decision.left_eye_open)
            if decision.right_eye_open is not None:
                sink.on_left_eye(decision.right_eye_open)
        else:
            if decision.left_eye_open is not None:
                sink.on_left_eye(decision.left_eye_open)
            if decision.right_eye_open is not None:
                sink.on_right_eye(decision.right_eye_open)

        sink.on_pose(decision.pose)
        sink.on_requirements_met(decision.requirements_met)

    def process(self, observation: Observation, sink: ResultSink) -> Decision:
        """Decide on one frame and notify the sink."""
        decision = self.decide(observation)
        self.notify(decision, sink)
        return decision


# Singleton engine built from config.yaml (module-level variable)
_engine_instance: Optional[DecisionEngine] = None


def get_decision_engine(reload: bool = False) -> DecisionEngine:
    """
    Get the shared DecisionEngine configured from config.yaml.

    Args:
        reload: If True, rebuild the engine from a freshly loaded config.
    """
    global _engine_instance

    if _engine_instance is None or reload:
        from capture_gate.config import get_config

        config = get_config(reload=reload)
        _engine_instance = DecisionEngine(
            {"pose": config.get("pose", {}), "traits": config.get("traits", {})}
        )

    return _engine_instance
