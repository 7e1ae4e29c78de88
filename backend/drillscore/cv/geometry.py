"""Stateless geometry helpers shared by all drill analyzers."""

from typing import Iterable, Optional

import numpy as np

from drillscore.cv.keypoints import Keypoint, MIN_CONFIDENCE, is_usable


def angle_at(
    a: Optional[Keypoint],
    b: Optional[Keypoint],
    c: Optional[Keypoint],
    min_confidence: float = MIN_CONFIDENCE,
) -> float:
    """
    Angle ABC in degrees, measured at vertex b.

    Returns 0 when any point is missing, scored below min_confidence, or
    when either ray has zero length. 0 means "no reading".
    """
    if not (is_usable(a, min_confidence) and is_usable(b, min_confidence)
            and is_usable(c, min_confidence)):
        return 0.0

    ba = np.array([a.x - b.x, a.y - b.y], dtype=float)
    bc = np.array([c.x - b.x, c.y - b.y], dtype=float)

    norm_ba = np.linalg.norm(ba)
    norm_bc = np.linalg.norm(bc)
    if norm_ba == 0 or norm_bc == 0:
        return 0.0

    cos_angle = np.dot(ba, bc) / (norm_ba * norm_bc)
    return float(np.degrees(np.arccos(np.clip(cos_angle, -1.0, 1.0))))


def velocity(
    prev: Optional[Keypoint],
    curr: Optional[Keypoint],
    dt_ms: float,
    axis: Optional[str] = None,
    min_confidence: float = MIN_CONFIDENCE,
) -> float:
    """
    Speed of a joint between two observations, in pixels per second.

    Args:
        prev: Earlier observation
        curr: Later observation
        dt_ms: Elapsed time in milliseconds
        axis: None for Euclidean distance, "x" or "y" for the absolute
              horizontal or vertical component only
        min_confidence: Points scored below this count as missing

    Returns:
        Non-negative speed, 0 if a point is missing or unconfident, or dt_ms <= 0
    """
    if not (is_usable(prev, min_confidence) and is_usable(curr, min_confidence)) or dt_ms <= 0:
        return 0.0

    dx = curr.x - prev.x
    dy = curr.y - prev.y
    if axis == "x":
        distance = abs(dx)
    elif axis == "y":
        distance = abs(dy)
    else:
        distance = float(np.hypot(dx, dy))

    return distance / dt_ms * 1000.0


def midpoint(a: Optional[Keypoint], b: Optional[Keypoint]) -> Optional[Keypoint]:
    """Midpoint of two keypoints, carrying the weaker confidence."""
    if a is None or b is None:
        return None
    return Keypoint(
        x=(a.x + b.x) / 2,
        y=(a.y + b.y) / 2,
        score=min(a.score, b.score),
    )


def window_variance(values: Iterable[float]) -> float:
    """Population variance of a window; 0 for fewer than two values."""
    data = np.fromiter(values, dtype=float)
    if data.size < 2:
        return 0.0
    return float(np.var(data))


def clamp_score(value: float) -> int:
    """Round and clamp to an integer score in [0, 100]."""
    if not np.isfinite(value):
        return 0 if value != np.inf else 100
    return int(max(0, min(100, round(value))))
