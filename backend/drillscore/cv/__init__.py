"""
Pose-metric analysis core.

PIPELINE COMPONENTS:
1. Keypoints: 17-point MoveNet layout (BodyKeypoint)
2. Geometry: joint angles, joint velocity, window variance
3. KeypointSmoother: EMA jitter damping
4. Trackers: angle extrema, sliding variance windows, joint speed
5. Drill analyzers: per-drill flexibility / power / stability scoring
6. Feedback: banded coaching text from scores

Usage:
    from drillscore.cv import create_analyzer

    analyzer = create_analyzer("squat")
    for keypoints, timestamp_ms in frames:
        analyzer.process_frame(keypoints, timestamp_ms)
    result = analyzer.get_results()
    print(result.score, result.feedback)
"""

from drillscore.cv.keypoints import (
    BodyKeypoint, Keypoint, Frame, MIN_CONFIDENCE, keypoints_from_sequence,
)
from drillscore.cv.geometry import angle_at, velocity, midpoint, window_variance, clamp_score
from drillscore.cv.keypoint_smoother import KeypointSmoother
from drillscore.cv.trackers import AngleExtremaTracker, SlidingWindow, VelocityTracker
from drillscore.cv.drill_types import DrillType
from drillscore.cv.drill_analyzers import (
    DrillResult,
    DrillAnalyzer,
    SquatAnalyzer,
    PushupAnalyzer,
    SportDrillAnalyzer,
    BasketballFreeThrowAnalyzer,
    CricketBowlingAnalyzer,
    SoccerPenaltyAnalyzer,
    TennisServeAnalyzer,
)
from drillscore.cv.factory import create_analyzer, available_drills
from drillscore.cv.feedback import metric_feedback, coaching_tips

__all__ = [
    # Keypoints
    "BodyKeypoint",
    "Keypoint",
    "Frame",
    "MIN_CONFIDENCE",
    "keypoints_from_sequence",

    # Geometry
    "angle_at",
    "velocity",
    "midpoint",
    "window_variance",
    "clamp_score",

    # Smoothing and accumulators
    "KeypointSmoother",
    "AngleExtremaTracker",
    "SlidingWindow",
    "VelocityTracker",

    # Analyzers
    "DrillType",
    "DrillResult",
    "DrillAnalyzer",
    "SquatAnalyzer",
    "PushupAnalyzer",
    "SportDrillAnalyzer",
    "BasketballFreeThrowAnalyzer",
    "CricketBowlingAnalyzer",
    "SoccerPenaltyAnalyzer",
    "TennisServeAnalyzer",
    "create_analyzer",
    "available_drills",

    # Feedback
    "metric_feedback",
    "coaching_tips",
]
