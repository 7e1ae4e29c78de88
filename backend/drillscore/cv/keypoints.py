"""
Body keypoint layout consumed by the drill analyzers.

The browser pose model (MoveNet) emits 17 keypoints per frame in pixel
coordinates, each with a confidence score:

0: nose, 1: left_eye, 2: right_eye, 3: left_ear, 4: right_ear,
5: left_shoulder, 6: right_shoulder, 7: left_elbow, 8: right_elbow,
9: left_wrist, 10: right_wrist, 11: left_hip, 12: right_hip,
13: left_knee, 14: right_knee, 15: left_ankle, 16: right_ankle

Every analyzer indexes frames through BodyKeypoint so the layout stays
consistent across drills.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Sequence
from enum import IntEnum
import logging

logger = logging.getLogger(__name__)

# Keypoints scored below this are treated as absent for geometry
MIN_CONFIDENCE = 0.3


class BodyKeypoint(IntEnum):
    """MoveNet keypoint indices."""
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16


NUM_KEYPOINTS = len(BodyKeypoint)


@dataclass(frozen=True)
class Keypoint:
    """Single keypoint with pixel position and confidence."""
    x: float
    y: float
    score: float = 0.0
    name: Optional[str] = None

    def is_confident(self, threshold: float = MIN_CONFIDENCE) -> bool:
        return self.score >= threshold

    def moved_to(self, x: float, y: float) -> "Keypoint":
        return replace(self, x=x, y=y)


# One frame: keypoints indexed by BodyKeypoint, None where the model gave nothing
Frame = Sequence[Optional[Keypoint]]


def is_usable(keypoint: Optional[Keypoint], threshold: float = MIN_CONFIDENCE) -> bool:
    """True if the keypoint exists and is confident enough for geometry."""
    return keypoint is not None and keypoint.is_confident(threshold)


def frame_get(frame: Optional[Frame], index: int) -> Optional[Keypoint]:
    """Keypoint at index, or None for short or missing frames."""
    if not frame or index < 0 or index >= len(frame):
        return None
    return frame[index]


def _to_keypoint(row: Any, index: int) -> Optional[Keypoint]:
    if row is None:
        return None
    if isinstance(row, Keypoint):
        return row

    default_name = BodyKeypoint(index).name.lower() if index < NUM_KEYPOINTS else None
    try:
        if isinstance(row, dict):
            if "x" not in row or "y" not in row:
                return None
            return Keypoint(
                x=float(row["x"]),
                y=float(row["y"]),
                score=float(row.get("score") or 0.0),
                name=row.get("name") or default_name,
            )
        if len(row) < 2:
            return None
        x, y, *rest = row
        score = float(rest[0]) if rest else 0.0
        return Keypoint(x=float(x), y=float(y), score=score, name=default_name)
    except (TypeError, ValueError):
        logger.debug(f"Unreadable keypoint at index {index}: {row!r}")
        return None


def keypoints_from_sequence(rows: Iterable[Any]) -> List[Optional[Keypoint]]:
    """
    Build a frame from pose model output.

    Accepts Keypoint objects, (x, y, score) tuples, or dicts with
    x/y/score keys (the shape the browser model returns). Entries that
    cannot be read become None.
    """
    return [_to_keypoint(row, i) for i, row in enumerate(rows)]
