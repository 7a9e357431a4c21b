from typing import Optional

from ..pose_detection.landmarks import LEFT_ANKLE, LEFT_HIP, RIGHT_ANKLE, RIGHT_HIP
from .base_analyzer import (
    BaseExerciseDetector,
    ExerciseResult,
    ExerciseType,
    KickPhase,
    PoseSignals,
)
from .pose_utils import average_y

MIN_KICK_INTERVAL_MS = 350
KICK_VELOCITY_THRESHOLD = 1.2  # normalized image heights per second
RAISED_THRESHOLD = 0.16
DEFAULT_FRAME_INTERVAL_S = 0.016


class KickDetector(BaseExerciseDetector):
    """
    Event-triggered kick counter.

    A kick fires when either ankle moves upward faster than
    ``KICK_VELOCITY_THRESHOLD`` while raised above ``hip - RAISED_THRESHOLD``.
    Kicks closer than ``MIN_KICK_INTERVAL_MS`` to the previous counted kick
    are ignored. Image y grows downward, so upward velocity is
    ``(previous_y - current_y) / dt``.
    """

    exercise_type = ExerciseType.KICKS

    def __init__(self):
        super().__init__()
        self.phase = KickPhase.NEUTRAL
        self._prev_left_ankle_y: Optional[float] = None
        self._prev_right_ankle_y: Optional[float] = None
        self._last_update_ms: Optional[int] = None
        self._last_kick_ms: Optional[int] = None

    def _elapsed_seconds(self, now_ms: int) -> float:
        if self._last_update_ms is None:
            return DEFAULT_FRAME_INTERVAL_S
        dt = (now_ms - self._last_update_ms) / 1000.0
        return dt if dt > 0 else DEFAULT_FRAME_INTERVAL_S

    def _can_count(self, now_ms: int) -> bool:
        return self._last_kick_ms is None or now_ms - self._last_kick_ms >= MIN_KICK_INTERVAL_MS

    def analyze(self, signals: PoseSignals) -> ExerciseResult:
        frame = signals.frame
        now_ms = signals.timestamp_ms
        dt = self._elapsed_seconds(now_ms)
        self._last_update_ms = now_ms

        left_ankle_y = frame[LEFT_ANKLE].y
        right_ankle_y = frame[RIGHT_ANKLE].y
        hip_y = average_y(frame, LEFT_HIP, RIGHT_HIP)

        left_raised = left_ankle_y < hip_y - RAISED_THRESHOLD
        right_raised = right_ankle_y < hip_y - RAISED_THRESHOLD

        v_left = (self._prev_left_ankle_y - left_ankle_y) / dt if self._prev_left_ankle_y is not None else 0.0
        v_right = (self._prev_right_ankle_y - right_ankle_y) / dt if self._prev_right_ankle_y is not None else 0.0
        self._prev_left_ankle_y = left_ankle_y
        self._prev_right_ankle_y = right_ankle_y

        fast_up = v_left > KICK_VELOCITY_THRESHOLD or v_right > KICK_VELOCITY_THRESHOLD
        above_hip = left_raised or right_raised

        if fast_up and above_hip and self._can_count(now_ms):
            self._repetitions += 1
            self._last_kick_ms = now_ms
            self.phase = KickPhase.KICKING
            feedback = "Kick"
        elif not above_hip:
            self.phase = KickPhase.NEUTRAL
            feedback = "Ready"
        else:
            feedback = "Hold"

        if fast_up and above_hip:
            confidence = 0.95
        elif above_hip:
            confidence = 0.7
        else:
            confidence = 0.3
        return self._result(confidence, above_hip, feedback)

    def reset(self) -> None:
        # Velocity history and the debounce timestamp survive a reset
        self._repetitions = 0
        self.phase = KickPhase.NEUTRAL
