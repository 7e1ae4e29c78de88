"""Analyzer factory."""

from typing import Dict, List, Optional, Type, Union
import logging

from drillscore.config import Settings
from drillscore.cv.drill_analyzers import (
    BasketballFreeThrowAnalyzer,
    CricketBowlingAnalyzer,
    DrillAnalyzer,
    PushupAnalyzer,
    SoccerPenaltyAnalyzer,
    SquatAnalyzer,
    TennisServeAnalyzer,
)
from drillscore.cv.drill_types import DrillType
from drillscore.exceptions import UnknownDrillError

logger = logging.getLogger(__name__)

ANALYZERS: Dict[DrillType, Type[DrillAnalyzer]] = {
    DrillType.SQUAT: SquatAnalyzer,
    DrillType.PUSHUP: PushupAnalyzer,
    DrillType.BASKETBALL_FREE_THROW: BasketballFreeThrowAnalyzer,
    DrillType.CRICKET_BOWLING: CricketBowlingAnalyzer,
    DrillType.SOCCER_PENALTY: SoccerPenaltyAnalyzer,
    DrillType.TENNIS_SERVE: TennisServeAnalyzer,
}

# Drills whose tracked arm follows the athlete's dominant side
DOMINANT_SIDE_DRILLS = (DrillType.BASKETBALL_FREE_THROW, DrillType.TENNIS_SERVE)


def available_drills() -> List[str]:
    return DrillType.all()


def create_analyzer(
    drill_id: Union[DrillType, str],
    dominant_side: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> DrillAnalyzer:
    """
    Factory function to create a fresh analyzer for one session.

    Args:
        drill_id: One of DrillType's values
        dominant_side: "left" or "right"; only for free throw and serve
        settings: Settings override (defaults to get_settings())

    Returns:
        New DrillAnalyzer instance

    Raises:
        UnknownDrillError: drill_id is not a supported drill
        ValueError: dominant_side given for a drill that does not use it
    """
    try:
        drill = DrillType(drill_id)
    except ValueError:
        raise UnknownDrillError(drill_id) from None

    analyzer_cls = ANALYZERS[drill]
    if dominant_side is None:
        analyzer = analyzer_cls(settings)
    elif drill in DOMINANT_SIDE_DRILLS:
        analyzer = analyzer_cls(settings, dominant_side=dominant_side)
    else:
        raise ValueError(f"{drill.value} does not take a dominant side")

    logger.info(f"Created {analyzer_cls.__name__} for drill {drill.value}")
    return analyzer
