import logging
import os
from typing import Any, Dict, Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision

from .base_detector import BasePoseDetector
from .landmarks import Landmark, LandmarkFrame

# --- Logger Setup ---
logger = logging.getLogger("MediaPipePoseDetector")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)

_DELEGATES = {
    "cpu": mp_python.BaseOptions.Delegate.CPU,
    "gpu": mp_python.BaseOptions.Delegate.GPU,
}


class MediaPipePoseDetector(BasePoseDetector):
    """
    MediaPipe PoseLandmarker running in live-stream mode.

    Frames are submitted with ``detect_async``; MediaPipe analyzes only the
    newest frame once the previous one finishes and reports each completed
    detection through the result callback. A model that cannot be loaded
    leaves the detector inert: submissions are ignored and no landmarks are
    ever produced.
    """

    def __init__(
        self,
        model_path: str = "pose_landmarker_lite.task",
        min_pose_detection_confidence: float = 0.4,
        min_pose_presence_confidence: float = 0.4,
        min_tracking_confidence: float = 0.4,
        num_poses: int = 1,
        delegate: str = "cpu",
    ):
        """
        Initialize the MediaPipe pose landmarker.

        Args:
            model_path: Path to the ``.task`` model bundle
            min_pose_detection_confidence: Minimum confidence for pose detection
            min_pose_presence_confidence: Minimum confidence for pose presence
            min_tracking_confidence: Minimum confidence for pose tracking
            num_poses: Maximum number of poses; only the first is reported
            delegate: "cpu" or "gpu"
        """
        super().__init__()
        self.model_path = model_path
        self._landmarker = None
        self._setup_landmarker(
            min_pose_detection_confidence,
            min_pose_presence_confidence,
            min_tracking_confidence,
            num_poses,
            delegate,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MediaPipePoseDetector":
        cfg = config.get("pose_landmarker", {})
        return cls(
            model_path=cfg.get("model_path", "pose_landmarker_lite.task"),
            min_pose_detection_confidence=cfg.get("min_pose_detection_confidence", 0.4),
            min_pose_presence_confidence=cfg.get("min_pose_presence_confidence", 0.4),
            min_tracking_confidence=cfg.get("min_tracking_confidence", 0.4),
            num_poses=cfg.get("num_poses", 1),
            delegate=cfg.get("delegate", "cpu"),
        )

    def _setup_landmarker(self, detection_conf, presence_conf, tracking_conf, num_poses, delegate) -> None:
        if not os.path.isfile(self.model_path):
            logger.error(f"Model asset not found: {self.model_path}. Download a pose_landmarker .task bundle.")
            return
        try:
            base_options = mp_python.BaseOptions(
                model_asset_path=self.model_path,
                delegate=_DELEGATES.get(delegate.lower(), mp_python.BaseOptions.Delegate.CPU),
            )
            options = vision.PoseLandmarkerOptions(
                base_options=base_options,
                running_mode=vision.RunningMode.LIVE_STREAM,
                num_poses=num_poses,
                output_segmentation_masks=False,
                min_pose_detection_confidence=detection_conf,
                min_pose_presence_confidence=presence_conf,
                min_tracking_confidence=tracking_conf,
                result_callback=self._on_result,
            )
            self._landmarker = vision.PoseLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error(f"Failed to initialize pose landmarker: {e}")
            self._landmarker = None

    @property
    def is_available(self) -> bool:
        return self._landmarker is not None

    def detect_async(self, frame: np.ndarray, timestamp_ms: int) -> None:
        if self._landmarker is None:
            return
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        try:
            self._landmarker.detect_async(mp_image, int(timestamp_ms))
        except (RuntimeError, ValueError) as e:
            logger.error(f"Pose detection error at {timestamp_ms} ms: {e}")

    def _on_result(self, result, output_image, timestamp_ms: int) -> None:
        self._emit(self.to_landmark_frame(result, timestamp_ms))

    @staticmethod
    def to_landmark_frame(result, timestamp_ms: int) -> LandmarkFrame:
        """Convert a PoseLandmarkerResult into a LandmarkFrame for the first pose."""
        if not result.pose_landmarks:
            return LandmarkFrame.empty(timestamp_ms)
        landmarks = [
            Landmark(
                x=lm.x,
                y=lm.y,
                z=lm.z,
                visibility=lm.visibility if lm.visibility is not None else 0.0,
            )
            for lm in result.pose_landmarks[0]
        ]
        try:
            return LandmarkFrame.from_landmarks(landmarks, timestamp_ms)
        except ValueError as e:
            logger.warning(f"Discarding partial detection: {e}")
            return LandmarkFrame.empty(timestamp_ms)

    def close(self) -> None:
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
