from .base_analyzer import (
    BaseExerciseDetector,
    ExerciseResult,
    ExerciseType,
    PoseSignals,
    PushupPhase,
)

ELBOW_DOWN_MAX = 90.0
ELBOW_EXTENDED_MIN = 160.0
SHOULDER_OPEN_MIN = 40.0
HIP_STRAIGHT_MIN = 160.0


class PushupDetector(BaseExerciseDetector):
    """
    Push-up counter on the left side of the body.

    The body line (shoulder-hip-knee) has to stay straight for either edge to
    count. DOWN is entered with the elbow at or below 90 degrees; returning
    to a locked-out elbow with the arm open from the torso completes a rep.
    """

    exercise_type = ExerciseType.PUSHUPS

    def __init__(self):
        super().__init__()
        self.phase = PushupPhase.UP

    def analyze(self, signals: PoseSignals) -> ExerciseResult:
        elbow = signals.angles["left_elbow"]
        shoulder = signals.angles["left_shoulder"]
        hip = signals.angles["left_hip"]

        body_straight = hip > HIP_STRAIGHT_MIN
        down_pos = elbow <= ELBOW_DOWN_MAX and body_straight
        up_pos = elbow > ELBOW_EXTENDED_MIN and shoulder > SHOULDER_OPEN_MIN and body_straight

        if self.phase == PushupPhase.UP and down_pos:
            self.phase = PushupPhase.DOWN
            feedback = "Down"
        elif self.phase == PushupPhase.DOWN and up_pos:
            self.phase = PushupPhase.UP
            self._repetitions += 1
            feedback = "Up"
        elif body_straight:
            feedback = "Ready" if self.phase == PushupPhase.UP else "Hold"
        else:
            feedback = "Fix Form"

        if down_pos or up_pos:
            confidence = 0.9
        elif body_straight:
            confidence = 0.6
        else:
            confidence = 0.3
        return self._result(confidence, body_straight, feedback)

    def reset(self) -> None:
        self._repetitions = 0
        self.phase = PushupPhase.UP
