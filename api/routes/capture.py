"""
Capture API Routes

WebSocket endpoint giving real-time capture guidance. The client streams
camera frames; for each one the server runs face detection and the
decision engine and answers with the verdict and the corrective hint.
"""

import base64
import binascii
import logging
import numpy as np
import cv2
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from api.schemas import (
    DecisionResponse,
    ErrorResponse,
    FrameMessage,
    FrameStatusResponse,
    SinkEventModel,
)
from capture_gate.config import get_face_detection_config, get_processor_config
from capture_gate.decision import get_decision_engine
from capture_gate.processor import FaceCaptureProcessor
from capture_gate.sinks import MemorySink

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["capture"])


def create_face_detector():
    """Build the MediaPipe detector (imported lazily, it loads a model)."""
    from capture_gate.face_detector import FaceDetector

    return FaceDetector(get_face_detection_config())


class CaptureSession:
    """
    State for a single capture connection.

    Attributes:
        processor: Front end running detection and decision per frame.
        sink: MemorySink collecting the notifications of the current frame.
        frame_index: Number of frames received so far.
    """

    def __init__(self, detector=None):
        self.sink = MemorySink()
        self.processor = FaceCaptureProcessor(
            detector if detector is not None else create_face_detector(),
            get_decision_engine(),
            self.sink,
            get_processor_config(),
        )
        self.frame_index = 0
        logger.info("Capture session started")

    def process_frame(self, frame_data: bytes):
        """
        Process one JPEG frame.

        Returns:
            FrameStatusResponse, or ErrorResponse if the image could not be
            decoded or detection failed.
        """
        index = self.frame_index
        self.frame_index += 1

        np_arr = np.frombuffer(frame_data, np.uint8)
        frame = cv2.imdecode(np_arr, cv2.IMREAD_COLOR) if np_arr.size else None

        if frame is None:
            return ErrorResponse(error="Could not decode image", code="INVALID_IMAGE")

        decision = self.processor.process_frame(frame)
        events = self.sink.drain()

        if decision is None:
            return ErrorResponse(error="Face detection failed", code="DETECTION_FAILED")

        return FrameStatusResponse(
            frame_index=index,
            decision=DecisionResponse.from_decision(decision),
            events=[SinkEventModel(**event.to_dict()) for event in events],
        )

    def cleanup(self):
        self.processor.close()
        logger.info(f"Capture session ended after {self.frame_index} frames")


@router.websocket("/capture")
async def websocket_capture(websocket: WebSocket):
    """
    WebSocket endpoint for real-time capture guidance.

    Protocol:
        Client -> Server (per frame):
        {"type": "frame", "data": "<base64-encoded JPEG>"}

        Server -> Client (per frame):
        {
            "type": "frame_status",
            "frame_index": int,
            "decision": {...},
            "events": [{"name": "visibility", "value": true}, ...]
        }

        Server -> Client (on a bad frame):
        {"type": "error", "error": "...", "code": "INVALID_IMAGE" | "DETECTION_FAILED"}
    """
    await websocket.accept()

    session: Optional[CaptureSession] = None

    try:
        session = CaptureSession()

        while True:
            message = await websocket.receive_json()

            message_type = message.get("type") if isinstance(message, dict) else None
            if message_type != "frame":
                logger.warning(f"Unknown message type: {message_type}")
                continue

            try:
                frame_message = FrameMessage.model_validate(message)
                image_data = base64.b64decode(frame_message.data, validate=True)
            except (ValidationError, binascii.Error, ValueError) as e:
                logger.warning(f"Failed to decode image data: {e}")
                await websocket.send_json(
                    ErrorResponse(error="Invalid image data", code="INVALID_IMAGE").model_dump()
                )
                continue

            response = session.process_frame(image_data)
            await websocket.send_json(response.model_dump())

    except WebSocketDisconnect:
        logger.info("Client disconnected from capture session")

    except Exception as e:
        logger.error(f"Unexpected error during capture: {e}")
        try:
            await websocket.send_json(
                ErrorResponse(error=f"Unexpected error: {e}", code="UNEXPECTED_ERROR").model_dump()
            )
            await websocket.close()
        except RuntimeError:
            logger.debug("Socket already closed")

    finally:
        if session:
            session.cleanup()
