"""
Face Capture Gate

Decides, frame by frame, whether a detected face is ready to be
photographed and which single correction to ask the user for if not.

Main components:
    - signals: Observation, Decision and pose result value objects
    - pose: per-axis band checks and the Y -> X -> Z pose evaluator
    - traits: expression and eye-openness classifiers
    - decision: DecisionEngine and the ResultSink interface
    - sinks: ready-made sinks (memory, logging, composite)
    - processor: detector -> engine front end
    - face_detector: MediaPipe detector backend (imported on demand)
    - config: configuration loading

Usage:
    from capture_gate import DecisionEngine, Observation, MemorySink

    engine = DecisionEngine()
    decision = engine.process(Observation(face_count=0), MemorySink())
"""

from capture_gate.config import (
    get_config,
    get_section,
    get_face_detection_config,
    get_pose_config,
    get_trait_config,
    get_processor_config,
    get_logging_config,
    get_api_config,
    get_server_config,
    setup_logging,
)

from capture_gate.signals import (
    Axis,
    Direction,
    AxisResult,
    CorrectPose,
    OutOfRange,
    FaceSignals,
    Observation,
    Decision,
)

from capture_gate.pose import AxisBand, PoseEvaluator, evaluate_axis

from capture_gate.traits import (
    TraitEvaluator,
    TraitResult,
    evaluate_expression,
    evaluate_eye,
)

from capture_gate.decision import ResultSink, DecisionEngine, get_decision_engine

from capture_gate.sinks import NullSink, MemorySink, LoggingSink, CompositeSink, SinkEvent

from capture_gate.processor import FaceCaptureProcessor

__all__ = [
    # Configuration
    "get_config",
    "get_section",
    "get_face_detection_config",
    "get_pose_config",
    "get_trait_config",
    "get_processor_config",
    "get_logging_config",
    "get_api_config",
    "get_server_config",
    "setup_logging",
    # Signals
    "Axis",
    "Direction",
    "AxisResult",
    "CorrectPose",
    "OutOfRange",
    "FaceSignals",
    "Observation",
    "Decision",
    # Evaluators
    "AxisBand",
    "PoseEvaluator",
    "evaluate_axis",
    "TraitEvaluator",
    "TraitResult",
    "evaluate_expression",
    "evaluate_eye",
    # Decision
    "ResultSink",
    "DecisionEngine",
    "get_decision_engine",
    # Sinks
    "NullSink",
    "MemorySink",
    "LoggingSink",
    "CompositeSink",
    "SinkEvent",
    # Front end
    "FaceCaptureProcessor",
]
