from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from ..pose_detection.landmarks import LandmarkFrame


class ExerciseType(Enum):
    """Exercise recognized by the classifier."""
    NONE = "none"
    SQUATS = "squats"
    PUSHUPS = "pushups"
    KICKS = "kicks"
    BICEP_CURLS = "bicep_curls"
    LUNGES = "lunges"
    PLANK = "plank"
    JUMPING_JACKS = "jumping_jacks"


# Workout-log vocabulary used by goal/workout stores. This table is the only
# place exercise types are translated for collaborators outside the engine.
DOMAIN_EXERCISE_TYPES: Dict[ExerciseType, str] = {
    ExerciseType.NONE: "NONE",
    ExerciseType.SQUATS: "SQUATS",
    ExerciseType.PUSHUPS: "PUSHUPS",
    ExerciseType.KICKS: "KICKS",
    ExerciseType.BICEP_CURLS: "BICEP_CURLS",
    ExerciseType.LUNGES: "LUNGES",
    ExerciseType.PLANK: "PLANK",
    ExerciseType.JUMPING_JACKS: "OTHER",
}


def to_domain_type(exercise_type: ExerciseType) -> str:
    """Map an ExerciseType onto the workout-log name."""
    return DOMAIN_EXERCISE_TYPES[exercise_type]


class SquatPhase(Enum):
    STANDING = "standing"
    SQUATTING = "squatting"


class PushupPhase(Enum):
    UP = "up"
    DOWN = "down"


class KickPhase(Enum):
    NEUTRAL = "neutral"
    KICKING = "kicking"


@dataclass
class ExerciseResult:
    """Candidate produced by one detector for one frame."""
    type: ExerciseType
    repetitions: int
    confidence: float
    is_in_position: bool
    feedback: str


@dataclass
class PoseSignals:
    """
    Per-frame input handed to every detector.

    ``angles`` holds the smoothed knee and elbow angles plus the raw left
    shoulder and left hip angles. ``frame`` gives access to landmark
    positions for the position-based detectors.
    """
    angles: Dict[str, float]
    frame: LandmarkFrame
    timestamp_ms: int = 0


class BaseExerciseDetector(ABC):
    """Base class for the per-exercise repetition detectors."""

    exercise_type: ExerciseType = ExerciseType.NONE

    def __init__(self):
        self._repetitions = 0

    @property
    def repetitions(self) -> int:
        return self._repetitions

    @abstractmethod
    def analyze(self, signals: PoseSignals) -> ExerciseResult:
        """
        Update the detector with one frame and report its candidate result.

        Args:
            signals: Smoothed angles and landmarks for the current frame

        Returns:
            ExerciseResult for this exercise
        """
        pass

    def reset_repetitions(self) -> None:
        """Zero the repetition count, keeping the current phase."""
        self._repetitions = 0

    @abstractmethod
    def reset(self) -> None:
        """Zero the repetition count and return to the resting phase."""
        pass

    def _result(self, confidence: float, is_in_position: bool, feedback: str) -> ExerciseResult:
        return ExerciseResult(
            type=self.exercise_type,
            repetitions=self._repetitions,
            confidence=confidence,
            is_in_position=is_in_position,
            feedback=feedback,
        )


class ThresholdRepDetector(BaseExerciseDetector):
    """
    Two-threshold hysteresis counter over a single angle signal.

    The signal entering ``<= down_threshold`` moves the detector to its
    active phase; reaching ``>= up_threshold`` from the active phase returns
    it to rest and counts a repetition. Values in between change nothing.
    """

    down_threshold: float = 0.0
    up_threshold: float = 180.0
    down_confidence: float = 0.9
    up_confidence: float = 0.8
    idle_confidence: float = 0.4
    down_feedback: str = "Down"
    up_feedback: str = "Up"
    idle_feedback: str = "Hold"
    rest_phase: Optional[Enum] = None
    active_phase: Optional[Enum] = None

    def __init__(self):
        super().__init__()
        self.phase = self.rest_phase

    @abstractmethod
    def signal(self, signals: PoseSignals) -> float:
        """The angle this detector tracks."""
        pass

    def analyze(self, signals: PoseSignals) -> ExerciseResult:
        value = self.signal(signals)
        in_down = value <= self.down_threshold
        in_up = value >= self.up_threshold

        if in_down:
            if self.phase == self.rest_phase:
                self.phase = self.active_phase
            return self._result(self.down_confidence, True, self.down_feedback)
        if in_up:
            if self.phase == self.active_phase:
                self.phase = self.rest_phase
                self._repetitions += 1
            return self._result(self.up_confidence, True, self.up_feedback)
        return self._result(self.idle_confidence, False, self.idle_feedback)

    def reset(self) -> None:
        self._repetitions = 0
        self.phase = self.rest_phase
