"""Database models."""

from drillscore.models.base import Base
from drillscore.models.analysis_session import AnalysisSession

__all__ = [
    "Base",
    "AnalysisSession",
]
