"""
Exercise analysis package: joint angles, smoothing, per-exercise detectors
and the classifier that arbitrates between them.
"""

from .base_analyzer import (
    DOMAIN_EXERCISE_TYPES,
    BaseExerciseDetector,
    ExerciseResult,
    ExerciseType,
    KickPhase,
    PoseSignals,
    PushupPhase,
    SquatPhase,
    to_domain_type,
)
from .classifier import ExerciseClassifier, PoseDetectionState, SessionState
from .curl_analyzer import BicepCurlDetector
from .kick_analyzer import KickDetector
from .plank_analyzer import PlankDetector
from .pushup_analyzer import PushupDetector
from .smoothing import ExponentialSmoother, SmoothedSignal
from .squat_analyzer import LungeDetector, SquatDetector

__all__ = [
    'DOMAIN_EXERCISE_TYPES',
    'BaseExerciseDetector',
    'ExerciseResult',
    'ExerciseType',
    'KickPhase',
    'PoseSignals',
    'PushupPhase',
    'SquatPhase',
    'to_domain_type',
    'ExerciseClassifier',
    'PoseDetectionState',
    'SessionState',
    'BicepCurlDetector',
    'KickDetector',
    'PlankDetector',
    'PushupDetector',
    'ExponentialSmoother',
    'SmoothedSignal',
    'LungeDetector',
    'SquatDetector',
]
