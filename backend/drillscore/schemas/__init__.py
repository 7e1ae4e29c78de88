"""Pydantic schemas for serialized results."""

from drillscore.schemas.drill_result import (
    DrillResultSchema,
    AnalysisSessionResponse,
    HistorySummary,
)

__all__ = [
    "DrillResultSchema",
    "AnalysisSessionResponse",
    "HistorySummary",
]
