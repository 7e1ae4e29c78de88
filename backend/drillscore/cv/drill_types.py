"""Supported drill identifiers."""

from enum import Enum
from typing import List


class DrillType(str, Enum):
    """Drills the analyzers can score."""
    SQUAT = "squat"
    PUSHUP = "pushup"
    BASKETBALL_FREE_THROW = "basketball_free_throw"
    CRICKET_BOWLING = "cricket_bowling"
    SOCCER_PENALTY = "soccer_penalty"
    TENNIS_SERVE = "tennis_serve"

    @classmethod
    def all(cls) -> List[str]:
        return [drill.value for drill in cls]
