from typing import Optional

from ..pose_detection.landmarks import LEFT_HIP, LEFT_SHOULDER, RIGHT_HIP, RIGHT_SHOULDER
from .base_analyzer import BaseExerciseDetector, ExerciseResult, ExerciseType, PoseSignals
from .pose_utils import average_y

ALIGNMENT_TOLERANCE = 0.10


class PlankDetector(BaseExerciseDetector):
    """
    Timed hold detector.

    Shoulders and hips at nearly the same image height count as aligned.
    ``repetitions`` reports whole seconds of uninterrupted alignment and
    drops back to zero on the first misaligned frame.
    """

    exercise_type = ExerciseType.PLANK

    def __init__(self):
        super().__init__()
        self._hold_start_ms: Optional[int] = None
        self._last_timestamp_ms: Optional[int] = None
        self._aligned = False

    @property
    def hold_seconds(self) -> int:
        return self._repetitions

    def analyze(self, signals: PoseSignals) -> ExerciseResult:
        frame = signals.frame
        now_ms = signals.timestamp_ms
        self._last_timestamp_ms = now_ms

        shoulder_y = average_y(frame, LEFT_SHOULDER, RIGHT_SHOULDER)
        hip_y = average_y(frame, LEFT_HIP, RIGHT_HIP)
        self._aligned = abs(shoulder_y - hip_y) < ALIGNMENT_TOLERANCE

        if self._aligned:
            if self._hold_start_ms is None:
                self._hold_start_ms = now_ms
            self._repetitions = max(0, now_ms - self._hold_start_ms) // 1000
        else:
            self._hold_start_ms = None
            self._repetitions = 0

        if self._aligned:
            return self._result(0.8, True, "Hold")
        return self._result(0.3, False, "Align hips")

    def reset_repetitions(self) -> None:
        # Restart the hold from the latest frame if the body is still aligned
        self._repetitions = 0
        self._hold_start_ms = self._last_timestamp_ms if self._aligned else None

    def reset(self) -> None:
        self.reset_repetitions()
