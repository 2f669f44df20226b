"""
Face Detection Module

MediaPipe Face Landmarker backend that turns a camera frame into the
per-face signals consumed by the decision engine:
- head rotation (yaw, pitch, roll) estimated with OpenCV solvePnP
- smile probability from the mouthSmile blendshapes
- eye-open probabilities from the eyeBlink blendshapes

Usage:
    from capture_gate.face_detector import FaceDetector
    from capture_gate.signals import Observation

    detector = FaceDetector(config)
    faces = detector.detect_faces(frame)
    observation = Observation.from_faces(faces)
"""

import logging
import urllib.request
import numpy as np
import cv2
from typing import Any, Dict, List, Mapping, Optional, Tuple

import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from capture_gate.signals import FaceSignals

logger = logging.getLogger(__name__)


# Landmarks used for head pose estimation
POSE_LANDMARKS = {
    "nose_tip": 1,
    "chin": 152,
    "left_eye_outer": 263,
    "right_eye_outer": 33,
    "left_mouth": 287,
    "right_mouth": 57,
}

# Canonical 3D face model (millimeters, centered at the nose tip)
MODEL_POINTS_3D = np.array(
    [
        [0.0, 0.0, 0.0],  # Nose tip
        [0.0, -63.6, -12.5],  # Chin
        [-43.3, 32.7, -26.0],  # Left eye outer corner
        [43.3, 32.7, -26.0],  # Right eye outer corner
        [-28.9, -28.9, -24.1],  # Left mouth corner
        [28.9, -28.9, -24.1],  # Right mouth corner
    ],
    dtype=np.float64,
)

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"
MODEL_FILENAME = "face_landmarker.task"


def get_model_path() -> str:
    """
    Get the path to the MediaPipe face landmarker model file.
    Downloads the model into storage/models if it doesn't exist locally.
    """
    from capture_gate.config import get_project_root

    model_dir = get_project_root() / "storage" / "models"
    model_dir.mkdir(parents=True, exist_ok=True)

    model_path = model_dir / MODEL_FILENAME

    if not model_path.exists():
        logger.info(f"Downloading MediaPipe face landmarker model from {MODEL_URL}")
        urllib.request.urlretrieve(MODEL_URL, str(model_path))
        logger.info(f"Model saved to {model_path}")

    return str(model_path)


def probabilities_from_blendshapes(
    scores: Mapping[str, float],
) -> Tuple[Optional[float], Optional[float], Optional[float]]:
    """
    Convert blendshape scores into (smile, left eye open, right eye open).

    Any probability whose blendshapes are missing is returned as None.
    """
    smile = None
    if "mouthSmileLeft" in scores and "mouthSmileRight" in scores:
        smile = (scores["mouthSmileLeft"] + scores["mouthSmileRight"]) / 2.0

    left_eye = None
    if "eyeBlinkLeft" in scores:
        left_eye = 1.0 - scores["eyeBlinkLeft"]

    right_eye = None
    if "eyeBlinkRight" in scores:
        right_eye = 1.0 - scores["eyeBlinkRight"]

    return smile, left_eye, right_eye


class FaceDetector:
    """
    Face signal extraction using MediaPipe Face Landmarker.

    Attributes:
        config: Configuration dictionary with detection parameters.
        landmarker: MediaPipe FaceLandmarker object for detection.
        min_face_size: Minimum face width as a fraction of the frame width.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the FaceDetector.

        Args:
            config: Configuration dictionary containing:
                - min_detection_confidence: Minimum confidence for detection (0-1)
                - min_tracking_confidence: Minimum confidence for tracking (0-1)
                - num_faces: Maximum number of faces to detect
                - min_face_size: Minimum face width relative to frame width
        """
        self.config = config

        min_detection_conf = config.get("min_detection_confidence", 0.5)
        min_tracking_conf = config.get("min_tracking_confidence", 0.5)
        num_faces = config.get("num_faces", 1)
        self.min_face_size = config.get("min_face_size", 0.15)

        base_options = mp_tasks.BaseOptions(model_asset_path=get_model_path())

        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.IMAGE,
            num_faces=num_faces,
            min_face_detection_confidence=min_detection_conf,
            min_face_presence_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf,
            output_face_blendshapes=True,  # smile / blink scores
            output_facial_transformation_matrixes=False,
        )

        self.landmarker = vision.FaceLandmarker.create_from_options(options)
        logger.info(f"FaceDetector initialized (num_faces={num_faces}, min_face_size={self.min_face_size})")

    def detect_faces(self, frame: np.ndarray) -> List[FaceSignals]:
        """
        Detect faces and extract their signals.

        Args:
            frame: Input image as BGR numpy array with shape (H, W, 3).

        Returns:
            One FaceSignals per detected face large enough to evaluate,
            in detector order. Empty list if no face is found.

        Raises:
            RuntimeError: If head pose estimation fails for a face.
        """
        h, w = frame.shape[:2]

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        results = self.landmarker.detect(mp_image)

        if not results.face_landmarks:
            return []

        faces = []
        for i, face_landmarks in enumerate(results.face_landmarks):
            landmarks_2d = np.array(
                [[lm.x * w, lm.y * h] for lm in face_landmarks], dtype=np.float32
            )
            bbox = self._calculate_bbox(landmarks_2d, w, h)

            if (bbox[2] - bbox[0]) < self.min_face_size * w:
                logger.debug(f"Skipping face {i}: narrower than {self.min_face_size:.0%} of frame")
                continue

            scores = {}
            if results.face_blendshapes and i < len(results.face_blendshapes):
                scores = {c.category_name: c.score for c in results.face_blendshapes[i]}
            smile, left_eye, right_eye = probabilities_from_blendshapes(scores)

            faces.append(
                FaceSignals(
                    bbox=bbox,
                    head_pose=self._calculate_head_pose(landmarks_2d, w, h),
                    smile_probability=smile,
                    left_eye_open_probability=left_eye,
                    right_eye_open_probability=right_eye,
                )
            )

        return faces

    @staticmethod
    def _calculate_bbox(
        landmarks_2d: np.ndarray, width: int, height: int
    ) -> Tuple[int, int, int, int]:
        """Bounding box of all landmarks, clamped to the image."""
        x1 = max(0, int(np.min(landmarks_2d[:, 0])))
        y1 = max(0, int(np.min(landmarks_2d[:, 1])))
        x2 = min(width, int(np.max(landmarks_2d[:, 0])))
        y2 = min(height, int(np.max(landmarks_2d[:, 1])))
        return (x1, y1, x2, y2)

    @staticmethod
    def _calculate_head_pose(
        landmarks_2d: np.ndarray, width: int, height: int
    ) -> Tuple[float, float, float]:
        """
        Estimate head pose (yaw, pitch, roll) in degrees with solvePnP.

        The camera is approximated with focal length = image width,
        principal point at the image center and no lens distortion.

        Raises:
            RuntimeError: If PnP fails.
        """
        image_points = np.array(
            [landmarks_2d[idx] for idx in POSE_LANDMARKS.values()],
            dtype=np.float64,
        )

        focal_length = width
        camera_matrix = np.array(
            [[focal_length, 0, width / 2], [0, focal_length, height / 2], [0, 0, 1]],
            dtype=np.float64,
        )
        dist_coeffs = np.zeros((4, 1))

        success, rotation_vec, translation_vec = cv2.solvePnP(
            MODEL_POINTS_3D,
            image_points,
            camera_matrix,
            dist_coeffs,
            flags=cv2.SOLVEPNP_ITERATIVE,
        )

        if not success:
            raise RuntimeError("Head pose estimation failed")

        rotation_mat, _ = cv2.Rodrigues(rotation_vec)
        proj_matrix = np.hstack((rotation_mat, translation_vec))
        euler_angles = cv2.decomposeProjectionMatrix(proj_matrix)[6]

        pitch = float(euler_angles[0][0])
        yaw = float(euler_angles[1][0])
        roll = float(euler_angles[2][0])

        return (yaw, pitch, roll)

    def close(self):
        """Clean up MediaPipe resources."""
        if hasattr(self, "landmarker"):
            self.landmarker.close()
