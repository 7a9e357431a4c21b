from .base_analyzer import ExerciseType, PoseSignals, SquatPhase, ThresholdRepDetector


class SquatDetector(ThresholdRepDetector):
    """Counts squats on the average of both knee angles."""

    exercise_type = ExerciseType.SQUATS
    down_threshold = 70.0
    up_threshold = 160.0
    down_confidence = 0.9
    up_confidence = 0.8
    idle_confidence = 0.4
    idle_feedback = "Keep form"
    rest_phase = SquatPhase.STANDING
    active_phase = SquatPhase.SQUATTING

    def signal(self, signals: PoseSignals) -> float:
        return (signals.angles["left_knee"] + signals.angles["right_knee"]) / 2.0


class LungeDetector(ThresholdRepDetector):
    """Counts lunges on the front (more bent) knee."""

    exercise_type = ExerciseType.LUNGES
    down_threshold = 80.0
    up_threshold = 160.0
    down_confidence = 0.85
    up_confidence = 0.7
    idle_confidence = 0.4
    rest_phase = SquatPhase.STANDING
    active_phase = SquatPhase.SQUATTING

    def signal(self, signals: PoseSignals) -> float:
        return min(signals.angles["left_knee"], signals.angles["right_knee"])
