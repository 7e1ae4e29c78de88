"""
Streaming accumulators behind the three drill metrics.

- AngleExtremaTracker: range of motion (min/max joint angle)
- SlidingWindow: positional or angular variance for stability
- VelocityTracker: joint speed between consecutive confident observations

Each tracker is owned by exactly one analyzer. Missing or low-confidence
input is a no-op, never a reset.
"""

from collections import deque
from typing import Deque, Optional

import numpy as np

from drillscore.cv.geometry import velocity, window_variance
from drillscore.cv.keypoints import Keypoint, MIN_CONFIDENCE, is_usable


class AngleExtremaTracker:
    """Min/max of positive angle readings (0 is the no-reading sentinel)."""

    def __init__(self):
        self.minimum: Optional[float] = None
        self.maximum: Optional[float] = None
        self.readings = 0

    def update(self, angle: float) -> bool:
        """Record a reading. Returns False if the angle was a no-reading."""
        if angle <= 0:
            return False
        self.readings += 1
        self.minimum = angle if self.minimum is None else min(self.minimum, angle)
        self.maximum = angle if self.maximum is None else max(self.maximum, angle)
        return True

    def min_or(self, default: float) -> float:
        return self.minimum if self.minimum is not None else default

    def max_or(self, default: float) -> float:
        return self.maximum if self.maximum is not None else default

    @property
    def range(self) -> float:
        if self.minimum is None or self.maximum is None:
            return 0.0
        return self.maximum - self.minimum


class SlidingWindow:
    """Fixed-capacity FIFO window of a scalar signal."""

    def __init__(self, size: int):
        self.size = size
        self._values: Deque[float] = deque(maxlen=size)

    def push(self, value: float):
        self._values.append(float(value))

    def __len__(self) -> int:
        return len(self._values)

    @property
    def values(self):
        return tuple(self._values)

    @property
    def mean(self) -> float:
        if not self._values:
            return 0.0
        return float(np.mean(self._values))

    @property
    def variance(self) -> float:
        return window_variance(self._values)


class VelocityTracker:
    """
    Speed of one joint across frames.

    Holds the previous confident observation and its timestamp. The
    velocity for the first observation is undefined, so nothing is
    recorded until the second one. Elapsed time spans any skipped frames.
    """

    def __init__(
        self,
        axis: Optional[str] = None,
        history_size: int = 20,
        min_confidence: float = MIN_CONFIDENCE,
    ):
        self.axis = axis
        self.min_confidence = min_confidence
        self.history: Deque[float] = deque(maxlen=history_size)
        self.peak = 0.0
        self._last_point: Optional[Keypoint] = None
        self._last_timestamp: Optional[float] = None

    def update(self, keypoint: Optional[Keypoint], timestamp: float) -> Optional[float]:
        """
        Observe the joint at timestamp (milliseconds).

        Returns:
            The instantaneous speed in pixels/second, or None when nothing
            was measured this frame
        """
        if not is_usable(keypoint, self.min_confidence):
            return None

        measured = None
        if self._last_point is not None:
            dt = timestamp - self._last_timestamp
            if dt > 0:
                measured = velocity(
                    self._last_point, keypoint, dt,
                    axis=self.axis, min_confidence=self.min_confidence,
                )
                self.history.append(measured)
                self.peak = max(self.peak, measured)

        self._last_point = keypoint
        self._last_timestamp = timestamp
        return measured

    @property
    def mean_abs(self) -> float:
        if not self.history:
            return 0.0
        return float(np.mean(np.abs(self.history)))
