"""
pose_utils.py - Joint angle geometry shared by the exercise detectors.
"""
from typing import Dict

import numpy as np

from ..pose_detection.landmarks import (
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

# Angle definitions: (point1, vertex, point3). The angle is measured at the vertex.
ANGLE_DEFINITIONS = {
    "left_knee": (LEFT_HIP, LEFT_KNEE, LEFT_ANKLE),
    "right_knee": (RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE),
    "left_elbow": (LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST),
    "right_elbow": (RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST),
    "left_shoulder": (LEFT_ELBOW, LEFT_SHOULDER, LEFT_HIP),
    "left_hip": (LEFT_SHOULDER, LEFT_HIP, LEFT_KNEE),
}

# Angles passed through the temporal smoother before detection
SMOOTHED_ANGLES = ("left_knee", "right_knee", "left_elbow", "right_elbow")


def calculate_angle(a: Landmark, b: Landmark, c: Landmark) -> float:
    """
    Planar angle at ``b`` between the rays b->a and b->c, in degrees.

    Only x/y are used. The result is the absolute difference of the two ray
    headings and is not folded into 0-180, so a reflex configuration can
    report values above 180. Coincident points are not special-cased.

    Args:
        a: First point (e.g., hip for knee angle)
        b: Vertex (e.g., knee)
        c: Last point (e.g., ankle)

    Returns:
        Angle in degrees
    """
    radians = np.arctan2(c.y - b.y, c.x - b.x) - np.arctan2(a.y - b.y, a.x - b.x)
    return float(abs(np.degrees(radians)))


def extract_joint_angles(frame: LandmarkFrame) -> Dict[str, float]:
    """Compute every named joint angle for a non-empty frame."""
    return {
        name: calculate_angle(frame[p1], frame[vertex], frame[p3])
        for name, (p1, vertex, p3) in ANGLE_DEFINITIONS.items()
    }


def average_y(frame: LandmarkFrame, left: int, right: int) -> float:
    """Mean vertical position of a bilateral joint pair."""
    return (frame[left].y + frame[right].y) / 2.0
