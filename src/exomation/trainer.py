import logging
import threading
from typing import Callable, Optional

import numpy as np

from .channels import LatestValueSlot, ObservableState, SlotClosed
from .exercise_analysis.classifier import ExerciseClassifier, PoseDetectionState
from .pose_detection.base_detector import BasePoseDetector
from .pose_detection.landmarks import LandmarkFrame

# --- Logger Setup ---
logger = logging.getLogger("ExerciseTracker")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


class ExerciseTracker:
    """
    One camera tracking session.

    Frames go to the pose detector; its asynchronous results land in a
    latest-wins slot and a single worker thread classifies them one at a
    time. The newest status is always available from ``status``. Use as a
    context manager so the worker and detector are released deterministically.
    """

    def __init__(
        self,
        pose_detector: Optional[BasePoseDetector] = None,
        classifier: Optional[ExerciseClassifier] = None,
        poll_interval: float = 0.1,
    ):
        """
        Initialize the tracker.

        Args:
            pose_detector: Asynchronous landmark source (None for replay-only use)
            classifier: Exercise classifier, a fresh one per session by default
            poll_interval: Worker wake-up interval in seconds
        """
        self.pose_detector = pose_detector
        self.classifier = classifier or ExerciseClassifier()
        self.status: ObservableState[PoseDetectionState] = ObservableState(PoseDetectionState())
        self.frames_processed = 0

        self._slot: LatestValueSlot[LandmarkFrame] = LatestValueSlot()
        self._classify_lock = threading.Lock()
        self._poll_interval = poll_interval
        self._worker: Optional[threading.Thread] = None
        self._last_submitted_ms: Optional[int] = None
        self._released = False

        if self.pose_detector is not None:
            self.pose_detector.set_listener(self.on_landmarks)

    def __enter__(self) -> "ExerciseTracker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def dropped_frames(self) -> int:
        """Detections superseded before the worker could classify them."""
        return self._slot.dropped

    def subscribe(self, listener: Callable[[PoseDetectionState], None]) -> None:
        self.status.subscribe(listener)

    def start(self) -> None:
        """Start the classification worker."""
        if self._released:
            raise RuntimeError("Tracker has been released")
        if self._worker is not None:
            return
        self._worker = threading.Thread(target=self._classification_worker, name="exercise-classifier", daemon=True)
        self._worker.start()
        if self.pose_detector is not None and not self.pose_detector.is_available:
            logger.warning("Pose detector is not available; no landmarks will be produced")

    def submit_frame(self, frame: np.ndarray, timestamp_ms: int) -> bool:
        """
        Hand a camera frame to the pose detector.

        Returns:
            False if the frame was not submitted (no detector, released, or
            timestamp not strictly increasing)
        """
        if self.pose_detector is None or self._released:
            return False
        if self._last_submitted_ms is not None and timestamp_ms <= self._last_submitted_ms:
            logger.debug(f"Dropping frame with non-increasing timestamp {timestamp_ms} ms")
            return False
        self._last_submitted_ms = timestamp_ms
        self.pose_detector.detect_async(frame, timestamp_ms)
        return True

    def on_landmarks(self, frame: LandmarkFrame) -> None:
        """Detector callback: keep only the newest completed detection."""
        if self._slot.closed:
            logger.debug(f"Ignoring detection at {frame.timestamp_ms} ms after release")
            return
        if not self._slot.put(frame):
            logger.debug(f"Superseded pending detection with frame at {frame.timestamp_ms} ms")

    def _classification_worker(self) -> None:
        while True:
            try:
                frame = self._slot.take(timeout=self._poll_interval)
            except SlotClosed:
                break
            if frame is not None:
                self.process_landmarks(frame)

    def process_landmarks(self, frame: LandmarkFrame) -> PoseDetectionState:
        """
        Classify one landmark frame synchronously and publish the new status.

        Args:
            frame: Landmark frame, empty when nothing was detected

        Returns:
            The published PoseDetectionState
        """
        with self._classify_lock:
            state = self.classifier.next_state(frame, self.status.value)
            self.frames_processed += 1
            self.status.set(state)
            return state

    def reset_counter(self) -> None:
        """Zero the active exercise's count and phase, keeping the exercise type."""
        with self._classify_lock:
            self.classifier.reset_counter()
            self.status.update(repetitions=0)

    def release(self) -> None:
        """Stop the worker and release the pose detector. Safe to call twice."""
        if self._released:
            return
        self._released = True
        self._slot.close()
        if self._worker is not None:
            self._worker.join(timeout=2.0)
            self._worker = None
        if self.pose_detector is not None:
            self.pose_detector.set_listener(None)
            self.pose_detector.close()
        logger.info(f"Session released: {self.frames_processed} frames classified, {self.dropped_frames} dropped")
