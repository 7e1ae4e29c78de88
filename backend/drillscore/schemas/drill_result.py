"""Drill result schemas."""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DrillResultSchema(BaseModel):
    """
    JSON shape of a finished drill:
    {drillType, totalFrames, flexibility, power, stability, score, feedback, metrics}
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    drill_type: str
    total_frames: int = Field(ge=0)
    flexibility: int = Field(ge=0, le=100)
    power: int = Field(ge=0, le=100)
    stability: int = Field(ge=0, le=100)
    score: int = Field(ge=0, le=100)
    feedback: List[str] = Field(default_factory=list)
    metrics: Dict[str, float] = Field(default_factory=dict)


class AnalysisSessionResponse(BaseModel):
    """Saved session as listed on the history page."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    drill_type: str
    total_frames: int
    score: int
    flexibility: int
    power: int
    stability: int
    feedback: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class HistorySummary(BaseModel):
    """Header statistics for a user's history."""
    total_sessions: int
    average_score: float
    best_score: int
    drills_practiced: int
