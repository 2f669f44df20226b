"""
Capture Guidance Demo Script

Runs the face capture gate on a webcam feed and shows, for each frame:
- whether a face is visible
- expression and eye checks
- the corrective head pose hint
- whether the frame is capture-ready

Usage:
    python scripts/demo_capture.py
    python scripts/demo_capture.py --camera 1 --details

Controls:
    - Press 'q' to quit
    - Press 's' to save the current frame (only when capture-ready)
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import cv2
import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from capture_gate.config import get_config, get_face_detection_config, setup_logging
from capture_gate.decision import DecisionEngine
from capture_gate.face_detector import FaceDetector
from capture_gate.processor import FaceCaptureProcessor
from capture_gate.signals import Decision
from capture_gate.sinks import CompositeSink, LoggingSink, MemorySink

logger = logging.getLogger("demo_capture")

HINT_TEXT = {
    "move_y_right": "Turn your head right",
    "move_y_left": "Turn your head left",
    "move_x_upward": "Raise your chin",
    "move_x_downward": "Lower your chin",
    "move_z_right": "Straighten your head (tilt right)",
    "move_z_left": "Straighten your head (tilt left)",
}


def _mark(value) -> str:
    if value is None:
        return "?"
    return "OK" if value else "X"


def draw_status(frame: np.ndarray, decision: Decision) -> None:
    """Draw the decision as text in the top-left corner."""
    green, red = (0, 200, 0), (0, 0, 255)

    if not decision.visible:
        cv2.putText(frame, "No face detected", (15, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, red, 2, cv2.LINE_AA)
        return

    lines = [
        f"Expression: {_mark(decision.neutral_expression)}",
        f"Left eye:   {_mark(decision.left_eye_open)}",
        f"Right eye:  {_mark(decision.right_eye_open)}",
        f"Head pose:  {_mark(decision.pose.is_valid)}",
    ]
    if not decision.pose.is_valid:
        lines.append(HINT_TEXT.get(decision.pose.hint, decision.pose.hint))

    for i, line in enumerate(lines):
        cv2.putText(frame, line, (15, 30 + 25 * i),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1, cv2.LINE_AA)

    color = green if decision.requirements_met else red
    label = "READY - press 's'" if decision.requirements_met else "NOT READY"
    cv2.putText(frame, label, (15, frame.shape[0] - 20),
                cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2, cv2.LINE_AA)


def main():
    parser = argparse.ArgumentParser(description="Face capture gate webcam demo")
    parser.add_argument("--camera", type=int, default=0, help="Camera index")
    parser.add_argument("--details", action="store_true", help="Log per-face detector output")
    parser.add_argument("--output-dir", type=str, default="storage/captures",
                        help="Where saved frames go")
    args = parser.parse_args()

    config = get_config()
    setup_logging("DEBUG" if args.details else None)

    memory = MemorySink()
    processor = FaceCaptureProcessor(
        FaceDetector(get_face_detection_config()),
        DecisionEngine(config),
        CompositeSink(memory, LoggingSink()),
        {"log_face_details": args.details},
    )

    cap = cv2.VideoCapture(args.camera)
    if not cap.isOpened():
        logger.error(f"Could not open camera {args.camera}")
        sys.exit(1)

    output_dir = Path(args.output_dir)
    last_decision = None

    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                logger.warning("Failed to read frame")
                break

            decision = processor.process_frame(frame)
            memory.drain()
            if decision is not None:
                last_decision = decision

            display = frame.copy()
            if last_decision is not None:
                draw_status(display, last_decision)
            cv2.imshow("Face Capture Gate", display)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("s"):
                if memory.ready:
                    output_dir.mkdir(parents=True, exist_ok=True)
                    path = output_dir / f"capture_{time.strftime('%Y%m%d_%H%M%S')}.jpg"
                    cv2.imwrite(str(path), frame)
                    logger.info(f"Saved {path}")
                else:
                    logger.info("Not capture-ready, frame not saved")
    finally:
        cap.release()
        cv2.destroyAllWindows()
        processor.close()


if __name__ == "__main__":
    main()
