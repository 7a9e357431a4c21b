import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from ..pose_detection.landmarks import Landmark, LandmarkFrame
from .base_analyzer import BaseExerciseDetector, ExerciseResult, ExerciseType, PoseSignals
from .curl_analyzer import BicepCurlDetector
from .kick_analyzer import KickDetector
from .plank_analyzer import PlankDetector
from .pose_utils import SMOOTHED_ANGLES, extract_joint_angles
from .pushup_analyzer import PushupDetector
from .smoothing import DEFAULT_SMOOTHING_ALPHA, ExponentialSmoother
from .squat_analyzer import LungeDetector, SquatDetector

# --- Logger Setup ---
logger = logging.getLogger("ExerciseClassifier")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)

CONFIDENCE_THRESHOLD = 0.7
UNRECOGNIZED_CONFIDENCE = 0.2
UNRECOGNIZED_FEEDBACK = "Position not recognized"


@dataclass
class SessionState:
    """Classifier-owned state for one tracking session."""
    active_exercise: ExerciseType = ExerciseType.NONE
    repetition_count: int = 0
    last_result_timestamp_ms: Optional[int] = None


@dataclass(frozen=True)
class PoseDetectionState:
    """Status published to observers after each completed frame."""
    exercise_type: ExerciseType = ExerciseType.NONE
    repetitions: int = 0
    confidence: float = 0.0
    is_in_position: bool = False
    landmarks: Optional[Tuple[Landmark, ...]] = None
    feedback_message: str = ""


class ExerciseClassifier:
    """
    Runs every exercise detector on each frame and arbitrates between them.

    Detectors are evaluated in a fixed priority order and the first whose
    confidence exceeds ``CONFIDENCE_THRESHOLD`` wins. Switching to a
    different exercise zeroes the winner's count before it is reported. When
    nothing is confident the previous exercise and count are held.
    """

    def __init__(self, smoothing_alpha: float = DEFAULT_SMOOTHING_ALPHA):
        self._smoother = ExponentialSmoother(smoothing_alpha)
        # Priority order matters: earlier detectors win ties above threshold
        self._detectors: List[BaseExerciseDetector] = [
            SquatDetector(),
            PushupDetector(),
            KickDetector(),
            BicepCurlDetector(),
            LungeDetector(),
            PlankDetector(),
        ]
        self.state = SessionState()

    @property
    def detectors(self) -> List[BaseExerciseDetector]:
        return list(self._detectors)

    def detector_for(self, exercise_type: ExerciseType) -> Optional[BaseExerciseDetector]:
        for detector in self._detectors:
            if detector.exercise_type == exercise_type:
                return detector
        return None

    def _signals(self, frame: LandmarkFrame) -> PoseSignals:
        raw = extract_joint_angles(frame)
        angles = dict(raw)
        for name in SMOOTHED_ANGLES:
            angles[name] = self._smoother.smooth(name, raw[name])
        return PoseSignals(angles=angles, frame=frame, timestamp_ms=frame.timestamp_ms)

    def classify(self, frame: LandmarkFrame) -> ExerciseResult:
        """
        Classify one non-empty landmark frame.

        Args:
            frame: Complete landmark frame

        Returns:
            ExerciseResult for the selected (or held) exercise

        Raises:
            ValueError: if the frame carries no landmarks
        """
        if frame.is_empty:
            raise ValueError("Cannot classify an empty landmark frame")

        signals = self._signals(frame)
        candidates = [(detector, detector.analyze(signals)) for detector in self._detectors]

        selected = None
        for detector, result in candidates:
            if result.confidence > CONFIDENCE_THRESHOLD:
                selected = (detector, result)
                break

        self.state.last_result_timestamp_ms = frame.timestamp_ms

        if selected is None:
            return ExerciseResult(
                type=self.state.active_exercise,
                repetitions=self.state.repetition_count,
                confidence=UNRECOGNIZED_CONFIDENCE,
                is_in_position=False,
                feedback=UNRECOGNIZED_FEEDBACK,
            )

        detector, result = selected
        if detector.exercise_type != self.state.active_exercise:
            logger.info(f"Exercise switched: {self.state.active_exercise.value} -> {detector.exercise_type.value}")
            detector.reset_repetitions()
            result = replace(result, repetitions=detector.repetitions)
            self.state.active_exercise = detector.exercise_type
        elif result.repetitions > self.state.repetition_count:
            logger.debug(f"{detector.exercise_type.value}: {result.repetitions} reps")
        self.state.repetition_count = result.repetitions
        return result

    def next_state(self, frame: LandmarkFrame, previous: PoseDetectionState) -> PoseDetectionState:
        """
        Produce the status that follows ``previous`` once ``frame`` is processed.

        An empty frame only flips the status to "no detection"; no detector,
        smoother or session field is touched.
        """
        if frame.is_empty:
            return replace(previous, exercise_type=ExerciseType.NONE, confidence=0.0, landmarks=None)
        result = self.classify(frame)
        return PoseDetectionState(
            exercise_type=result.type,
            repetitions=result.repetitions,
            confidence=result.confidence,
            is_in_position=result.is_in_position,
            landmarks=frame.landmarks,
            feedback_message=result.feedback,
        )

    def reset_counter(self) -> None:
        """Zero the active detector's phase and count without changing the exercise."""
        detector = self.detector_for(self.state.active_exercise)
        if detector is not None:
            detector.reset()
        self.state.repetition_count = 0
