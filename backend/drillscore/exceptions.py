"""
Custom exceptions for Drill Score.

Per-frame measurement gaps are never raised; these cover configuration
and persistence misuse only.
"""


class DrillScoreError(Exception):
    """Base exception for all Drill Score errors."""
    pass


class UnknownDrillError(DrillScoreError, ValueError):
    """Drill identifier is not one of the supported drills."""

    def __init__(self, drill_id):
        self.drill_id = drill_id
        super().__init__(f"Unknown drill type: {drill_id}")


class SessionStateError(DrillScoreError):
    """Live drill session operation not allowed in its current status."""
    pass


class NotAuthenticatedError(DrillScoreError):
    """Results can only be saved while a user session is active."""
    pass


class DuplicateResultError(DrillScoreError):
    """A result record with this id already exists (records are write-once)."""
    pass


class SessionNotFoundError(DrillScoreError):
    """Requested analysis session does not exist."""
    pass
