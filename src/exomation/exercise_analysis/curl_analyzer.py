from .base_analyzer import ExerciseType, PoseSignals, PushupPhase, ThresholdRepDetector


class BicepCurlDetector(ThresholdRepDetector):
    """
    Counts curls when the more flexed elbow closes below 50 degrees and then
    opens past 160 degrees.
    """

    exercise_type = ExerciseType.BICEP_CURLS
    down_threshold = 50.0
    up_threshold = 160.0
    down_confidence = 0.9
    up_confidence = 0.8
    idle_confidence = 0.4
    down_feedback = "Curl"
    up_feedback = "Extend"
    idle_feedback = "Hold"
    rest_phase = PushupPhase.UP
    active_phase = PushupPhase.DOWN

    def signal(self, signals: PoseSignals) -> float:
        return min(signals.angles["left_elbow"], signals.angles["right_elbow"])
