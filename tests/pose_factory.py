"""Synthetic landmark frames with controllable joint angles."""
import math
from typing import Dict, Optional, Tuple

from exomation.pose_detection.landmarks import (
    LEFT_ANKLE,
    LEFT_ELBOW,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_ANKLE,
    RIGHT_ELBOW,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Landmark,
    LandmarkFrame,
)

UPPER_ARM = 0.15
FOREARM = 0.13
THIGH = 0.17
SHIN = 0.17


def point_at(vertex, from_point, angle_deg, length):
    """Point ``length`` away from ``vertex`` so that from_point-vertex-result spans ``angle_deg``."""
    base = math.atan2(from_point[1] - vertex[1], from_point[0] - vertex[0])
    heading = base + math.radians(angle_deg)
    return (vertex[0] + length * math.cos(heading), vertex[1] + length * math.sin(heading))


def make_frame(
    timestamp_ms: int = 0,
    left_knee: float = 180.0,
    right_knee: float = 180.0,
    left_elbow: float = 180.0,
    right_elbow: float = 180.0,
    arm_raise: float = 0.0,
    shoulder_y: float = 0.30,
    hip_y: float = 0.55,
    overrides: Optional[Dict[int, Tuple[float, float]]] = None,
) -> LandmarkFrame:
    """
    Upright figure facing the camera.

    Knees sit straight below the hips so the hip angle stays at 180 unless
    overridden. ``arm_raise`` opens the upper arm away from the torso, which
    is the left shoulder angle.
    """
    points = {}
    for side, x, knee, elbow, idx in (
        ("left", 0.45, left_knee, left_elbow, (LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST, LEFT_HIP, LEFT_KNEE, LEFT_ANKLE)),
        ("right", 0.55, right_knee, right_elbow, (RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST, RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE)),
    ):
        shoulder_i, elbow_i, wrist_i, hip_i, knee_i, ankle_i = idx
        shoulder = (x, shoulder_y)
        hip = (x, hip_y)
        knee_pt = (x, hip_y + THIGH)
        points[shoulder_i] = shoulder
        points[hip_i] = hip
        points[knee_i] = knee_pt
        points[ankle_i] = point_at(knee_pt, hip, knee, SHIN)
        elbow_pt = point_at(shoulder, hip, arm_raise, UPPER_ARM)
        points[elbow_i] = elbow_pt
        points[wrist_i] = point_at(elbow_pt, shoulder, elbow, FOREARM)

    if overrides:
        points.update(overrides)

    landmarks = []
    for i in range(33):
        x, y = points.get(i, (0.5, 0.1))
        landmarks.append(Landmark(x=x, y=y, z=0.0, visibility=0.9))
    return LandmarkFrame.from_landmarks(landmarks, timestamp_ms)


def repeat(count: int, start_ms: int, step_ms: int = 33, **kwargs):
    """``count`` identical poses at evenly spaced timestamps."""
    return [make_frame(timestamp_ms=start_ms + i * step_ms, **kwargs) for i in range(count)]
