import copy

import pytest

from exomation.exercise_analysis.base_analyzer import ExerciseType, PushupPhase, SquatPhase
from exomation.exercise_analysis.classifier import (
    UNRECOGNIZED_FEEDBACK,
    ExerciseClassifier,
    PoseDetectionState,
)
from exomation.pose_detection.landmarks import LandmarkFrame

from pose_factory import make_frame


class FrameFeeder:
    """Feeds poses to a classifier with increasing timestamps."""

    def __init__(self, classifier, step_ms=33):
        self.classifier = classifier
        self.step_ms = step_ms
        self.t = 0

    def feed(self, count, **pose):
        results = []
        for _ in range(count):
            results.append(self.classifier.classify(make_frame(timestamp_ms=self.t, **pose)))
            self.t += self.step_ms
        return results

    def squat_rep(self):
        low = self.feed(10, left_knee=60, right_knee=60, left_elbow=120, right_elbow=120)
        high = self.feed(10, left_knee=170, right_knee=170, left_elbow=120, right_elbow=120)
        return low, high


@pytest.fixture
def classifier():
    return ExerciseClassifier()


@pytest.fixture
def feeder(classifier):
    return FrameFeeder(classifier)


def test_first_confident_detection_selects_exercise(feeder, classifier):
    result = feeder.feed(1, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)[0]
    assert result.type == ExerciseType.SQUATS
    assert result.confidence == 0.8
    assert classifier.state.active_exercise == ExerciseType.SQUATS


def test_squat_trace_counts_one_rep(feeder, classifier):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    low, high = feeder.squat_rep()

    bottom = [r for r in low if r.type == ExerciseType.SQUATS and r.confidence == 0.9]
    assert bottom, "smoothed knee angle should reach the squat threshold"
    assert all(r.repetitions == 0 for r in bottom)

    final = high[-1]
    assert final.type == ExerciseType.SQUATS
    assert final.confidence == 0.8
    assert final.repetitions == 1
    assert classifier.state.repetition_count == 1


def test_lunge_band_on_descent_restarts_squat_count(feeder):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    feeder.squat_rep()
    low, high = feeder.squat_rep()
    # The smoothed knee passes 80 before 70, so lunges win briefly on the way down
    assert any(r.type == ExerciseType.LUNGES for r in low)
    assert high[-1].type == ExerciseType.SQUATS
    assert high[-1].repetitions == 1


def test_continuous_squat_set_reports_one(feeder, classifier):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    finals = [feeder.squat_rep()[1][-1] for _ in range(3)]
    assert [r.type for r in finals] == [ExerciseType.SQUATS] * 3
    assert [r.repetitions for r in finals] == [1, 1, 1]
    assert classifier.detector_for(ExerciseType.SQUATS).repetitions == 1


def test_ambiguous_pose_holds_previous_state(feeder, classifier):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    feeder.squat_rep()
    results = feeder.feed(5, left_knee=120, right_knee=120, left_elbow=120, right_elbow=120)
    held = results[-1]
    assert held.type == ExerciseType.SQUATS
    assert held.repetitions == 1
    assert held.confidence == 0.2
    assert held.is_in_position is False
    assert held.feedback == UNRECOGNIZED_FEEDBACK


def test_unrecognized_before_any_exercise(feeder, classifier):
    result = feeder.feed(3, left_knee=120, right_knee=120, left_elbow=120, right_elbow=120)[-1]
    assert result.type == ExerciseType.NONE
    assert result.repetitions == 0
    assert result.confidence == 0.2
    assert classifier.state.active_exercise == ExerciseType.NONE


def test_switching_exercise_resets_count(feeder, classifier):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    feeder.squat_rep()
    assert classifier.state.repetition_count == 1

    down = feeder.feed(6, left_knee=120, right_knee=120, left_elbow=80, right_elbow=80)
    switched = [r for r in down if r.type == ExerciseType.PUSHUPS]
    assert switched
    assert switched[0].repetitions == 0
    assert classifier.state.active_exercise == ExerciseType.PUSHUPS

    up = feeder.feed(10, left_knee=120, right_knee=120, left_elbow=170, right_elbow=170, arm_raise=60)
    assert up[-1].type == ExerciseType.PUSHUPS
    assert max(r.repetitions for r in up) == 1

    back = feeder.feed(6, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    squats = [r for r in back if r.type == ExerciseType.SQUATS]
    assert squats
    # The earlier squat is gone
    assert all(r.repetitions == 0 for r in squats)
    assert classifier.state.repetition_count == 0


def test_detectors_keep_independent_phases(feeder, classifier):
    feeder.feed(12, left_knee=60, right_knee=60, left_elbow=180, right_elbow=180)
    squat = classifier.detector_for(ExerciseType.SQUATS)
    lunge = classifier.detector_for(ExerciseType.LUNGES)
    curl = classifier.detector_for(ExerciseType.BICEP_CURLS)
    assert squat.phase == SquatPhase.SQUATTING

    feeder.feed(12, left_knee=60, right_knee=60, left_elbow=40, right_elbow=40)
    assert curl.phase == PushupPhase.DOWN
    feeder.feed(12, left_knee=60, right_knee=60, left_elbow=170, right_elbow=170)

    assert curl.repetitions == 1
    assert squat.phase == SquatPhase.SQUATTING
    assert lunge.phase == SquatPhase.SQUATTING
    assert squat.repetitions == 0


def test_empty_frame_leaves_detectors_untouched(feeder, classifier):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    feeder.squat_rep()
    previous = classifier.next_state(
        make_frame(timestamp_ms=feeder.t, left_knee=170, right_knee=170, left_elbow=120, right_elbow=120),
        PoseDetectionState(),
    )
    before_detectors = copy.deepcopy([d.__dict__ for d in classifier.detectors])
    before_state = copy.deepcopy(classifier.state)
    before_knee = classifier._smoother.get("left_knee").value

    state = classifier.next_state(LandmarkFrame.empty(feeder.t + 33), previous)

    assert state.exercise_type == ExerciseType.NONE
    assert state.confidence == 0.0
    assert state.landmarks is None
    assert state.repetitions == previous.repetitions == 1
    assert state.feedback_message == previous.feedback_message
    assert [d.__dict__ for d in classifier.detectors] == before_detectors
    assert classifier.state == before_state
    assert classifier._smoother.get("left_knee").value == before_knee


def test_classify_rejects_empty_frame(classifier):
    with pytest.raises(ValueError):
        classifier.classify(LandmarkFrame.empty())


def test_next_state_passes_landmarks_through(classifier):
    frame = make_frame(timestamp_ms=5, left_knee=175, right_knee=175)
    state = classifier.next_state(frame, PoseDetectionState())
    assert state.landmarks == frame.landmarks
    assert state.exercise_type == ExerciseType.SQUATS
    assert state.feedback_message == "Up"
    assert classifier.state.last_result_timestamp_ms == 5


def test_reset_counter_keeps_exercise(feeder, classifier):
    feeder.feed(3, left_knee=175, right_knee=175, left_elbow=120, right_elbow=120)
    feeder.squat_rep()
    feeder.feed(10, left_knee=60, right_knee=60, left_elbow=120, right_elbow=120)
    classifier.reset_counter()

    squat = classifier.detector_for(ExerciseType.SQUATS)
    assert classifier.state.active_exercise == ExerciseType.SQUATS
    assert classifier.state.repetition_count == 0
    assert squat.repetitions == 0
    assert squat.phase == SquatPhase.STANDING
