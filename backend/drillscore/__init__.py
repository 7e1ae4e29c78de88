"""
Drill Score
-----------
Pose-based drill scoring: flexibility, power and stability from a stream
of 2-D body keypoints, with coaching feedback and saved session history.
"""

__version__ = "1.0.0"
