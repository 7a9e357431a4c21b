import time
from dataclasses import dataclass
from typing import Callable, Optional

from .exercise_analysis.base_analyzer import ExerciseType, to_domain_type
from .exercise_analysis.classifier import PoseDetectionState


@dataclass
class RepProgressEvent:
    """New repetitions for an external goal/workout store."""
    exercise_type: str  # workout-log name, see DOMAIN_EXERCISE_TYPES
    delta: int
    repetitions: int
    duration_seconds: int


class RepProgressTracker:
    """
    Turns the status stream into repetition deltas.

    Remembers the last recognized exercise so "no detection" frames do not
    lose attribution, and only reports when the count grows. With a
    ``selected_exercise`` set, reps of other exercises are ignored.
    """

    def __init__(
        self,
        listener: Callable[[RepProgressEvent], None],
        selected_exercise: Optional[ExerciseType] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._listener = listener
        self._clock = clock
        self.selected_exercise = selected_exercise
        self._last_reps = 0
        self._last_non_none = ExerciseType.NONE
        self._session_start = clock()

    def select_exercise(self, exercise_type: Optional[ExerciseType]) -> None:
        """Restrict reporting to one exercise (None for any) and restart counting."""
        self.selected_exercise = exercise_type
        self._last_reps = 0
        self._session_start = self._clock()

    def on_status(self, state: PoseDetectionState) -> Optional[RepProgressEvent]:
        if state.exercise_type != ExerciseType.NONE:
            if state.exercise_type != self._last_non_none:
                # Classifier counts restart from zero on a switch
                self._last_reps = 0
            self._last_non_none = state.exercise_type

        if self._last_non_none == ExerciseType.NONE:
            return None
        if self.selected_exercise is not None and self._last_non_none != self.selected_exercise:
            return None

        if state.repetitions < self._last_reps:
            # Counter was reset, re-baseline
            self._last_reps = state.repetitions
            return None
        if state.repetitions == self._last_reps:
            return None

        event = RepProgressEvent(
            exercise_type=to_domain_type(self._last_non_none),
            delta=state.repetitions - self._last_reps,
            repetitions=state.repetitions,
            duration_seconds=int(self._clock() - self._session_start),
        )
        self._last_reps = state.repetitions
        self._listener(event)
        return event
