"""
Per-drill pose analyzers.

An analyzer is created when a drill is selected, fed one keypoint frame at
a time while the drill runs, and read once with get_results() when the
athlete stops. Every drill reports the same three bounded metrics:

- Flexibility: range of motion of a tracked joint angle
- Power: speed of a tracked joint (pixels/second used as a 0-100 proxy)
- Stability: variance of a tracked signal over a sliding window

FRAME PIPELINE:
    raw keypoints -> KeypointSmoother -> angles / sway signals
    raw keypoints -> VelocityTracker (smoothing would flatten the peak)

Missing or low-confidence keypoints simply leave that frame's metric
untouched. Accumulated extrema are never reset by a bad frame.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from drillscore.config import Settings, get_settings
from drillscore.cv.drill_types import DrillType
from drillscore.cv.feedback import metric_feedback
from drillscore.cv.geometry import angle_at, clamp_score, midpoint
from drillscore.cv.keypoint_smoother import KeypointSmoother
from drillscore.cv.keypoints import BodyKeypoint as KP, Frame, Keypoint, frame_get, is_usable
from drillscore.cv.trackers import AngleExtremaTracker, SlidingWindow, VelocityTracker

logger = logging.getLogger(__name__)

# Neutral (straight) joint angle
STRAIGHT_ANGLE = 180.0


# =============================================================================
# SECTION 1: Result
# =============================================================================

@dataclass(frozen=True)
class DrillResult:
    """Immutable snapshot of a finished drill session."""
    drill_type: str
    total_frames: int
    flexibility: int
    power: int
    stability: int
    score: int
    feedback: Tuple[str, ...] = ()
    metrics: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "feedback", tuple(self.feedback))
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable record in the shape the dashboard stores."""
        return {
            "drillType": self.drill_type,
            "totalFrames": self.total_frames,
            "flexibility": self.flexibility,
            "power": self.power,
            "stability": self.stability,
            "score": self.score,
            "feedback": list(self.feedback),
            "metrics": dict(self.metrics),
        }


def _bounded(value: float) -> float:
    return max(0.0, min(100.0, value))


# =============================================================================
# SECTION 2: Base Analyzer
# =============================================================================

class DrillAnalyzer(ABC):
    """
    Common contract for all drills.

    Subclasses implement _update() for per-frame accumulation and
    _scores() / _metrics() for read-only finalization.
    """

    drill_type: DrillType

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.min_confidence = self.settings.keypoint_confidence_threshold
        self.smoother = KeypointSmoother(
            alpha=self.settings.smoothing_alpha,
            history_size=self.settings.smoothing_history_size,
            confidence_threshold=self.min_confidence,
        )
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def process_frame(self, keypoints: Optional[Frame], timestamp: float) -> None:
        """
        Ingest one frame.

        Args:
            keypoints: Keypoints indexed by BodyKeypoint; may be empty or
                       partially missing
            timestamp: Capture time in monotonic milliseconds
        """
        self._frame_count += 1

        raw = list(keypoints) if keypoints else []
        if not raw:
            logger.debug(f"{self.drill_type.value}: empty frame {self._frame_count}")
            return

        smoothed = self.smoother.smooth(raw)
        self._update(raw, smoothed, timestamp)

    def get_results(self) -> DrillResult:
        """Read accumulated state into a DrillResult without mutating it."""
        flexibility, power, stability = (clamp_score(v) for v in self._scores())
        score = clamp_score((flexibility + power + stability) / 3)

        feedback = self._drill_notes() + metric_feedback(flexibility, power, stability)
        metrics = {name: round(float(value), 2) for name, value in self._metrics().items()}

        return DrillResult(
            drill_type=self.drill_type.value,
            total_frames=self._frame_count,
            flexibility=flexibility,
            power=power,
            stability=stability,
            score=score,
            feedback=tuple(feedback),
            metrics=metrics,
        )

    # -------------------------------------------------------------------------
    # Helpers for subclasses
    # -------------------------------------------------------------------------

    def _angle(self, frame: Frame, a: int, b: int, c: int) -> float:
        return angle_at(
            frame_get(frame, a), frame_get(frame, b), frame_get(frame, c),
            min_confidence=self.min_confidence,
        )

    def _point(self, frame: Frame, index: int) -> Optional[Keypoint]:
        keypoint = frame_get(frame, index)
        return keypoint if is_usable(keypoint, self.min_confidence) else None

    def _velocity_tracker(self, axis: Optional[str] = None, history_size: int = 20) -> VelocityTracker:
        return VelocityTracker(axis=axis, history_size=history_size, min_confidence=self.min_confidence)

    def _speed_score(self, speed: float) -> float:
        return speed * self.settings.velocity_score_scale

    @abstractmethod
    def _update(self, raw: Frame, smoothed: Frame, timestamp: float) -> None:
        """Update accumulators from one frame."""

    @abstractmethod
    def _scores(self) -> Tuple[float, float, float]:
        """(flexibility, power, stability) before clamping."""

    @abstractmethod
    def _metrics(self) -> Dict[str, float]:
        """Raw measurements behind the scores."""

    def _drill_notes(self) -> List[str]:
        """Measurement-specific feedback placed before the banded lines."""
        return []


# =============================================================================
# SECTION 3: Strength Drills
# =============================================================================

class SquatAnalyzer(DrillAnalyzer):
    """
    Squat: left side, viewed from the side.

    - Flexibility: minimum knee angle (hip-knee-ankle); smaller is deeper
    - Stability: variance of the hip angle (knee-hip-shoulder), last 10 frames
    - Power: see _scores()
    """

    drill_type = DrillType.SQUAT

    HIP_WINDOW_SIZE = 10
    MIN_VARIANCE_SAMPLES = 5  # Variance refreshed once the window holds more than this
    FLEXIBILITY_PER_DEGREE = 2.0
    STABILITY_VARIANCE_SCALE = 2.0

    EXCELLENT_DEPTH_ANGLE = 90.0
    GOOD_DEPTH_ANGLE = 110.0

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)
        self.knee = AngleExtremaTracker()
        self.hip_angles = SlidingWindow(self.HIP_WINDOW_SIZE)
        self.hip_variance = 0.0
        self.hip_velocity = self._velocity_tracker(axis="y")

    def _update(self, raw: Frame, smoothed: Frame, timestamp: float) -> None:
        self.knee.update(self._angle(smoothed, KP.LEFT_HIP, KP.LEFT_KNEE, KP.LEFT_ANKLE))

        hip_angle = self._angle(smoothed, KP.LEFT_KNEE, KP.LEFT_HIP, KP.LEFT_SHOULDER)
        if hip_angle > 0:
            self.hip_angles.push(hip_angle)
            if len(self.hip_angles) > self.MIN_VARIANCE_SAMPLES:
                self.hip_variance = self.hip_angles.variance

        self.hip_velocity.update(frame_get(raw, KP.LEFT_HIP), timestamp)

    @property
    def min_knee_angle(self) -> float:
        return self.knee.min_or(STRAIGHT_ANGLE)

    def _scores(self) -> Tuple[float, float, float]:
        flexibility = _bounded((STRAIGHT_ANGLE - self.min_knee_angle) * self.FLEXIBILITY_PER_DEGREE)
        stability = _bounded(100 - self.hip_variance * self.STABILITY_VARIANCE_SCALE)

        if self.settings.squat_power_mode == "velocity":
            power = _bounded(self._speed_score(self.hip_velocity.peak))
        else:
            # Not an independent measurement: the mean of depth and stability.
            # squat_power_mode="velocity" scores peak vertical hip speed instead.
            power = _bounded((flexibility + stability) / 2)

        return flexibility, power, stability

    def _metrics(self) -> Dict[str, float]:
        return {
            "min_knee_angle": self.min_knee_angle,
            "hip_angle_variance": self.hip_variance,
            "peak_hip_velocity": self.hip_velocity.peak,
        }

    def _drill_notes(self) -> List[str]:
        if self.min_knee_angle < self.EXCELLENT_DEPTH_ANGLE:
            return ["Excellent squat depth! Your flexibility is outstanding."]
        if self.min_knee_angle < self.GOOD_DEPTH_ANGLE:
            return ["Good squat depth. Try to go a bit deeper for better results."]
        return ["Focus on achieving deeper squats to improve flexibility."]


class PushupAnalyzer(DrillAnalyzer):
    """
    Push-up: left side, viewed from the side.

    - Flexibility: elbow travel (max - min elbow angle) over 90 degrees
    - Power: maximum elbow angle; larger means a fuller press
    - Stability: variance of the elbow angle, last 20 frames
    - Explosive power: mean absolute vertical hip speed, last 20 readings
    """

    drill_type = DrillType.PUSHUP

    WINDOW_SIZE = 20
    FULL_TRAVEL_DEGREES = 90.0
    POWER_PER_DEGREE = 0.8
    EXPLOSIVE_SPEED_SCALE = 10.0
    STABILITY_VARIANCE_SCALE = 5.0

    EXCELLENT_EXTENSION_ANGLE = 120.0
    GOOD_EXTENSION_ANGLE = 100.0
    EXPLOSIVE_THRESHOLD = 70.0

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)
        self.elbow = AngleExtremaTracker()
        self.elbow_angles = SlidingWindow(self.WINDOW_SIZE)
        self.hip_velocity = self._velocity_tracker(axis="y", history_size=self.WINDOW_SIZE)

    def _update(self, raw: Frame, smoothed: Frame, timestamp: float) -> None:
        elbow_angle = self._angle(smoothed, KP.LEFT_SHOULDER, KP.LEFT_ELBOW, KP.LEFT_WRIST)
        if self.elbow.update(elbow_angle):
            self.elbow_angles.push(elbow_angle)

        self.hip_velocity.update(frame_get(raw, KP.LEFT_HIP), timestamp)

    @property
    def explosive_power(self) -> float:
        return _bounded(self._speed_score(self.hip_velocity.mean_abs) * self.EXPLOSIVE_SPEED_SCALE)

    def _scores(self) -> Tuple[float, float, float]:
        flexibility = _bounded(self.elbow.range / self.FULL_TRAVEL_DEGREES * 100)
        power = _bounded(self.elbow.max_or(0.0) * self.POWER_PER_DEGREE)
        stability = _bounded(100 - self.elbow_angles.variance * self.STABILITY_VARIANCE_SCALE)
        return flexibility, power, stability

    def _metrics(self) -> Dict[str, float]:
        return {
            "max_elbow_angle": self.elbow.max_or(0.0),
            "min_elbow_angle": self.elbow.min_or(0.0),
            "elbow_angle_variance": self.elbow_angles.variance,
            "mean_hip_velocity": self.hip_velocity.mean_abs,
            "explosive_power": self.explosive_power,
        }

    def _drill_notes(self) -> List[str]:
        notes = []
        max_elbow = self.elbow.max_or(0.0)
        if max_elbow > self.EXCELLENT_EXTENSION_ANGLE:
            notes.append("Excellent push-up extension! Your pressing power is outstanding.")
        elif max_elbow > self.GOOD_EXTENSION_ANGLE:
            notes.append("Good push-up extension. Press all the way up for better results.")
        else:
            notes.append("Focus on pressing to full extension to improve power.")

        if self.explosive_power > self.EXPLOSIVE_THRESHOLD:
            notes.append("Great explosive power in your push-ups!")
        else:
            notes.append("Work on generating more explosive power during the upward phase.")
        return notes


# =============================================================================
# SECTION 4: Sport Drills
# =============================================================================

class SportDrillAnalyzer(DrillAnalyzer):
    """
    Range / speed / sway analyzer shared by the sport drills.

    Subclasses choose the joints:
    - _flex_angle(): joint angle tracked for flexibility
    - _speed_point(): joint whose speed is power
    - _sway_value(): scalar whose variance is (in)stability

    FLEX_MODE "range" scores (max - min) angle, "min" scores how far the
    minimum bends from straight. Both reach 100 at FULL_RANGE_DEGREES.
    """

    FLEX_MODE = "range"
    FULL_RANGE_DEGREES = 90.0
    SPEED_AXIS: Optional[str] = None
    SWAY_VARIANCE_SCALE = 0.1

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)
        self.flex_angles = AngleExtremaTracker()
        self.speed = self._velocity_tracker(axis=self.SPEED_AXIS)
        self.sway = SlidingWindow(self.settings.sway_window_size)

    def _update(self, raw: Frame, smoothed: Frame, timestamp: float) -> None:
        self.flex_angles.update(self._flex_angle(smoothed))
        self.speed.update(self._speed_point(raw), timestamp)

        sway = self._sway_value(smoothed)
        if sway is not None:
            self.sway.push(sway)

    @abstractmethod
    def _flex_angle(self, frame: Frame) -> float:
        ...

    @abstractmethod
    def _speed_point(self, frame: Frame) -> Optional[Keypoint]:
        ...

    @abstractmethod
    def _sway_value(self, frame: Frame) -> Optional[float]:
        ...

    @property
    def flex_measure(self) -> float:
        if self.FLEX_MODE == "min":
            return STRAIGHT_ANGLE - self.flex_angles.min_or(STRAIGHT_ANGLE)
        return self.flex_angles.range

    def _scores(self) -> Tuple[float, float, float]:
        flexibility = _bounded(self.flex_measure / self.FULL_RANGE_DEGREES * 100)
        power = _bounded(self._speed_score(self.speed.peak))
        stability = _bounded(100 - self.sway.variance * self.SWAY_VARIANCE_SCALE)
        return flexibility, power, stability

    def _metrics(self) -> Dict[str, float]:
        return {
            "angle_min": self.flex_angles.min_or(0.0),
            "angle_max": self.flex_angles.max_or(0.0),
            "peak_velocity": self.speed.peak,
            "sway_variance": self.sway.variance,
        }


def _side_joints(side: str) -> Dict[str, KP]:
    if side not in ("left", "right"):
        raise ValueError(f"dominant_side must be 'left' or 'right', got {side!r}")
    if side == "left":
        return {
            "shoulder": KP.LEFT_SHOULDER, "elbow": KP.LEFT_ELBOW,
            "wrist": KP.LEFT_WRIST, "hip": KP.LEFT_HIP,
        }
    return {
        "shoulder": KP.RIGHT_SHOULDER, "elbow": KP.RIGHT_ELBOW,
        "wrist": KP.RIGHT_WRIST, "hip": KP.RIGHT_HIP,
    }


class BasketballFreeThrowAnalyzer(SportDrillAnalyzer):
    """
    Free throw: elbow travel (shooting form), wrist speed (release),
    horizontal hip sway (stance).
    """

    drill_type = DrillType.BASKETBALL_FREE_THROW

    def __init__(self, settings: Optional[Settings] = None, dominant_side: str = "left"):
        self.dominant_side = dominant_side
        self.joints = _side_joints(dominant_side)
        super().__init__(settings)

    def _flex_angle(self, frame: Frame) -> float:
        return self._angle(frame, self.joints["shoulder"], self.joints["elbow"], self.joints["wrist"])

    def _speed_point(self, frame: Frame) -> Optional[Keypoint]:
        return self._point(frame, self.joints["wrist"])

    def _sway_value(self, frame: Frame) -> Optional[float]:
        hip = self._point(frame, self.joints["hip"])
        return hip.x if hip else None


class CricketBowlingAnalyzer(SportDrillAnalyzer):
    """
    Bowling: shoulder line rotation against the hip (left shoulder - right
    shoulder - right hip), bowling wrist speed, vertical head sway.
    """

    drill_type = DrillType.CRICKET_BOWLING

    def _flex_angle(self, frame: Frame) -> float:
        return self._angle(frame, KP.LEFT_SHOULDER, KP.RIGHT_SHOULDER, KP.RIGHT_HIP)

    def _speed_point(self, frame: Frame) -> Optional[Keypoint]:
        return self._point(frame, KP.RIGHT_WRIST)

    def _sway_value(self, frame: Frame) -> Optional[float]:
        nose = self._point(frame, KP.NOSE)
        return nose.y if nose else None


class SoccerPenaltyAnalyzer(SportDrillAnalyzer):
    """
    Penalty kick: kicking knee bend (right hip-knee-ankle, deeper is
    better), horizontal hip drive, horizontal torso sway.
    """

    drill_type = DrillType.SOCCER_PENALTY

    FLEX_MODE = "min"
    SPEED_AXIS = "x"

    def _flex_angle(self, frame: Frame) -> float:
        return self._angle(frame, KP.RIGHT_HIP, KP.RIGHT_KNEE, KP.RIGHT_ANKLE)

    def _speed_point(self, frame: Frame) -> Optional[Keypoint]:
        return self._point(frame, KP.LEFT_HIP)

    def _sway_value(self, frame: Frame) -> Optional[float]:
        torso = midpoint(self._point(frame, KP.LEFT_SHOULDER), self._point(frame, KP.RIGHT_SHOULDER))
        return torso.x if torso else None

    def _metrics(self) -> Dict[str, float]:
        metrics = super()._metrics()
        metrics["min_knee_angle"] = self.flex_angles.min_or(STRAIGHT_ANGLE)
        return metrics


class TennisServeAnalyzer(SportDrillAnalyzer):
    """
    Serve: shoulder angle range (elbow-shoulder-hip on the racket side),
    racket wrist speed, horizontal head sway.
    """

    drill_type = DrillType.TENNIS_SERVE

    def __init__(self, settings: Optional[Settings] = None, dominant_side: str = "right"):
        self.dominant_side = dominant_side
        self.joints = _side_joints(dominant_side)
        super().__init__(settings)

    def _flex_angle(self, frame: Frame) -> float:
        return self._angle(frame, self.joints["elbow"], self.joints["shoulder"], self.joints["hip"])

    def _speed_point(self, frame: Frame) -> Optional[Keypoint]:
        return self._point(frame, self.joints["wrist"])

    def _sway_value(self, frame: Frame) -> Optional[float]:
        nose = self._point(frame, KP.NOSE)
        return nose.x if nose else None
