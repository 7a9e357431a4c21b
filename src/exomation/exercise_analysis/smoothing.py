from dataclasses import dataclass
from typing import Dict, Iterator

DEFAULT_SMOOTHING_ALPHA = 0.3

@dataclass
class SmoothedSignal:
    """Exponentially smoothed value of one tracked signal."""
    value: float = 0.0
    initialized: bool = False

    def update(self, raw: float, alpha: float) -> float:
        if not self.initialized:
            # First sample is taken as-is, no warm-up delay
            self.value = raw
            self.initialized = True
        else:
            self.value = self.value + alpha * (raw - self.value)
        return self.value

class ExponentialSmoother:
    """
    Single-pole low-pass filter applied independently per named signal.

    ``smoothed = smoothed + alpha * (raw - smoothed)``. Signals are created on
    their first sample and live as long as the smoother.
    """

    def __init__(self, alpha: float = DEFAULT_SMOOTHING_ALPHA):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._signals: Dict[str, SmoothedSignal] = {}

    def smooth(self, name: str, raw: float) -> float:
        signal = self._signals.get(name)
        if signal is None:
            signal = SmoothedSignal()
            self._signals[name] = signal
        return signal.update(raw, self.alpha)

    def get(self, name: str) -> SmoothedSignal:
        return self._signals.get(name, SmoothedSignal())

    def __contains__(self, name: str) -> bool:
        return name in self._signals

    def __iter__(self) -> Iterator[str]:
        return iter(self._signals)
