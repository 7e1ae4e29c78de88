"""
Temporal keypoint smoothing using an Exponential Moving Average.

The pose model jitters by a few pixels between frames even when the
athlete is still. Each confident keypoint is blended toward its new
observation:

    smoothed = previous + alpha * (raw - previous)

so a smoothed value always lies between the previous smoothed value and
the new raw value. Low-confidence keypoints pass through raw so noise
never becomes the anchor for later frames.
"""

from collections import deque
from typing import Deque, List, Optional
import logging

from drillscore.cv.keypoints import Frame, Keypoint, MIN_CONFIDENCE, frame_get

logger = logging.getLogger(__name__)


class KeypointSmoother:
    """
    One-step EMA smoother with bounded history.

    Only the most recent smoothed frame is read; the deque keeps the last
    history_size frames and evicts the oldest first.
    """

    def __init__(
        self,
        alpha: float = 0.3,
        history_size: int = 10,
        confidence_threshold: float = MIN_CONFIDENCE,
    ):
        """
        Initialize smoother.

        Args:
            alpha: Blend factor (0 = hold previous value, 1 = no smoothing)
            history_size: Number of smoothed frames kept
            confidence_threshold: Minimum confidence for a keypoint to be smoothed
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self.confidence_threshold = confidence_threshold
        self.history: Deque[List[Optional[Keypoint]]] = deque(maxlen=history_size)

    @property
    def last(self) -> Optional[List[Optional[Keypoint]]]:
        """Most recent smoothed frame, None before the first frame."""
        return self.history[-1] if self.history else None

    def smooth(self, frame: Frame) -> List[Optional[Keypoint]]:
        """
        Smooth a raw frame against the previous smoothed frame.

        Args:
            frame: Raw keypoints indexed by BodyKeypoint

        Returns:
            New list of keypoints; the input frame is not modified
        """
        previous = self.last
        if previous is None:
            smoothed = list(frame)
            self.history.append(smoothed)
            return smoothed

        smoothed = []
        for i, keypoint in enumerate(frame):
            last_keypoint = frame_get(previous, i)
            if (
                keypoint is None
                or last_keypoint is None
                or not keypoint.is_confident(self.confidence_threshold)
            ):
                smoothed.append(keypoint)
                continue

            smoothed.append(keypoint.moved_to(
                last_keypoint.x + self.alpha * (keypoint.x - last_keypoint.x),
                last_keypoint.y + self.alpha * (keypoint.y - last_keypoint.y),
            ))

        self.history.append(smoothed)
        return smoothed

    def reset(self):
        """Reset all smoothing history."""
        self.history.clear()
