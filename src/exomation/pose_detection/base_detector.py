from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from .landmarks import LandmarkFrame

LandmarkListener = Callable[[LandmarkFrame], None]


class BasePoseDetector(ABC):
    """Base class for asynchronous pose detection implementations."""

    def __init__(self):
        self._listener: Optional[LandmarkListener] = None

    def set_listener(self, listener: Optional[LandmarkListener]) -> None:
        """
        Register the callback receiving completed detections.

        Args:
            listener: Called with a LandmarkFrame (possibly empty) per analyzed frame
        """
        self._listener = listener

    def _emit(self, frame: LandmarkFrame) -> None:
        if self._listener is not None:
            self._listener(frame)

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the detector initialized and can analyze frames."""
        pass

    @abstractmethod
    def detect_async(self, frame: np.ndarray, timestamp_ms: int) -> None:
        """
        Submit a BGR frame for analysis. Results arrive through the listener.

        Args:
            frame: Input frame as numpy array
            timestamp_ms: Strictly increasing frame timestamp in milliseconds
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release native resources held by the detector."""
        pass
