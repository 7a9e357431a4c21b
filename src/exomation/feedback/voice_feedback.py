import queue
import threading
import time
from typing import Callable, Optional

import pyttsx3

from ..exercise_analysis.base_analyzer import ExerciseType
from ..exercise_analysis.classifier import PoseDetectionState

EXERCISE_NAMES = {
    ExerciseType.SQUATS: "squats",
    ExerciseType.PUSHUPS: "push-ups",
    ExerciseType.KICKS: "kicks",
    ExerciseType.BICEP_CURLS: "bicep curls",
    ExerciseType.LUNGES: "lunges",
    ExerciseType.PLANK: "plank",
    ExerciseType.JUMPING_JACKS: "jumping jacks",
}


class FeedbackAnnouncer:
    """Decides what to say for a stream of tracking statuses."""

    def __init__(
        self,
        cooldown: float = 4.0,
        plank_announce_every: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            cooldown: Minimum seconds between two non-rep messages
            plank_announce_every: Announce plank holds every N seconds
            clock: Time source in seconds
        """
        self.cooldown = cooldown
        self.plank_announce_every = plank_announce_every
        self._clock = clock
        self._last_type = ExerciseType.NONE
        self._last_reps = 0
        self._last_message: Optional[str] = None
        self._last_message_time = float("-inf")

    def generate_feedback(self, state: PoseDetectionState) -> Optional[str]:
        """
        Generate a spoken message for the new status.

        Args:
            state: Latest tracking status

        Returns:
            Message to speak, or None
        """
        if state.exercise_type == ExerciseType.NONE:
            return None

        if state.exercise_type != self._last_type:
            self._last_type = state.exercise_type
            self._last_reps = state.repetitions
            return self._say(f"Starting {EXERCISE_NAMES[state.exercise_type]}")

        if state.repetitions == self._last_reps:
            return None
        previous, self._last_reps = self._last_reps, state.repetitions
        if state.repetitions < previous:
            return None

        if state.exercise_type == ExerciseType.PLANK:
            if state.repetitions % self.plank_announce_every != 0:
                return None
            return self._say(f"{state.repetitions} seconds")
        # Rep counts are always spoken, ignoring the cooldown
        return self._say(str(state.repetitions), force=True)

    def _say(self, message: str, force: bool = False) -> Optional[str]:
        now = self._clock()
        if not force:
            if message == self._last_message or now - self._last_message_time < self.cooldown:
                return None
        self._last_message = message
        self._last_message_time = now
        return message


class VoiceFeedback:
    """Voice feedback for exercise tracking, spoken on a background thread."""

    def __init__(self, rate: int = 150, volume: float = 1.0, announcer: Optional[FeedbackAnnouncer] = None):
        """
        Initialize the voice feedback system.

        Args:
            rate: Speech rate (words per minute)
            volume: Speech volume (0.0 to 1.0)
            announcer: Message selection policy
        """
        self.engine = pyttsx3.init()
        self.engine.setProperty('rate', rate)
        self.engine.setProperty('volume', volume)
        self.announcer = announcer or FeedbackAnnouncer()

        self._tts_queue = queue.Queue()
        self._tts_thread = threading.Thread(target=self._tts_worker, daemon=True)
        self._tts_thread.start()

    @classmethod
    def from_config(cls, config: dict) -> "VoiceFeedback":
        cfg = config.get("voice_feedback", {})
        announcer = FeedbackAnnouncer(
            cooldown=cfg.get("cooldown_seconds", 4.0),
            plank_announce_every=cfg.get("plank_announce_every", 10),
        )
        return cls(rate=cfg.get("rate", 150), volume=cfg.get("volume", 1.0), announcer=announcer)

    def on_status(self, state: PoseDetectionState) -> None:
        """Status listener: speak whatever the announcer selects."""
        message = self.announcer.generate_feedback(state)
        if message:
            self.speak_async(message)

    def speak_async(self, message: str) -> None:
        """
        Queue the given message to be spoken by the background TTS thread.

        Args:
            message: Message to speak
        """
        self._tts_queue.put(message)

    def _tts_worker(self):
        while True:
            msg = self._tts_queue.get()
            if msg is None:
                break
            self.engine.say(msg)
            self.engine.runAndWait()

    def close(self) -> None:
        self._tts_queue.put(None)
        self._tts_thread.join(timeout=2.0)
