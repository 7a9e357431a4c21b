from dataclasses import dataclass, field
from typing import Iterable, Tuple


# Landmark indices (MediaPipe Pose, 33 points)
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26
LEFT_ANKLE = 27
RIGHT_ANKLE = 28

# A frame must reach the last tracked joint to be usable.
MIN_LANDMARK_COUNT = RIGHT_ANKLE + 1


@dataclass(frozen=True)
class Landmark:
    """A single body joint in normalized image coordinates."""
    x: float
    y: float
    z: float
    visibility: float = 0.0


@dataclass(frozen=True)
class LandmarkFrame:
    """
    One pose sample as delivered by the landmark detector.

    An empty ``landmarks`` tuple means nothing was detected in the frame.
    Otherwise the tuple holds at least every joint up to the right ankle,
    addressed by the MediaPipe index constants above.
    """
    landmarks: Tuple[Landmark, ...] = field(default_factory=tuple)
    timestamp_ms: int = 0

    @classmethod
    def from_landmarks(cls, landmarks: Iterable[Landmark], timestamp_ms: int) -> "LandmarkFrame":
        """
        Build a frame, rejecting partial detections.

        Args:
            landmarks: Landmarks in MediaPipe index order (may be empty)
            timestamp_ms: Frame timestamp in milliseconds

        Returns:
            LandmarkFrame

        Raises:
            ValueError: if a non-empty landmark list is missing required joints
        """
        points = tuple(landmarks)
        if points and len(points) < MIN_LANDMARK_COUNT:
            raise ValueError(
                f"Partial landmark frame: got {len(points)} landmarks, need at least {MIN_LANDMARK_COUNT}"
            )
        return cls(landmarks=points, timestamp_ms=int(timestamp_ms))

    @classmethod
    def empty(cls, timestamp_ms: int = 0) -> "LandmarkFrame":
        return cls(landmarks=(), timestamp_ms=int(timestamp_ms))

    @property
    def is_empty(self) -> bool:
        return len(self.landmarks) == 0

    def __getitem__(self, index: int) -> Landmark:
        return self.landmarks[index]

    def __len__(self) -> int:
        return len(self.landmarks)
