"""
Evaluation API Routes

REST endpoint for clients that run their own face detector and only need
the capture decision: the request carries the detector signals for one
frame and the response carries the Decision plus the ordered sink
notifications a live UI would have received.
"""

import logging
from fastapi import APIRouter

from api.schemas import (
    DecisionResponse,
    EvaluationResponse,
    ObservationRequest,
    SinkEventModel,
)
from capture_gate.decision import get_decision_engine
from capture_gate.sinks import MemorySink

logger = logging.getLogger(__name__)

router = APIRouter(tags=["evaluation"])


@router.post("/evaluate", response_model=EvaluationResponse)
async def evaluate(request: ObservationRequest):
    """
    Evaluate one frame's detector signals.

    Probabilities are validated to [0, 1]; angles are optional and only
    read when face_count > 0.
    """
    engine = get_decision_engine()
    sink = MemorySink()

    decision = engine.process(request.to_observation(), sink)

    return EvaluationResponse(
        decision=DecisionResponse.from_decision(decision),
        events=[SinkEventModel(**event.to_dict()) for event in sink.events],
    )
