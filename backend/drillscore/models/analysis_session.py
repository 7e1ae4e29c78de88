"""Analysis session model."""

import uuid
import json
from typing import Any, Dict, List
from sqlalchemy import String, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from drillscore.models.base import Base, TimestampMixin


class AnalysisSession(Base, TimestampMixin):
    """
    One finished drill session.

    Write-once: rows are inserted when the athlete saves a result and are
    never updated afterwards. Per-metric scores, feedback and raw metrics
    live in the JSON `scores` column.
    """

    __tablename__ = "analysis_sessions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    drill_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    total_frames: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    _scores: Mapped[str] = mapped_column("scores", Text, nullable=False, default="{}")

    @property
    def scores(self) -> Dict[str, Any]:
        return json.loads(self._scores) if self._scores else {}

    @scores.setter
    def scores(self, value: Dict[str, Any]):
        self._scores = json.dumps(value or {})

    @property
    def flexibility(self) -> int:
        return self.scores.get("flexibility", 0)

    @property
    def power(self) -> int:
        return self.scores.get("power", 0)

    @property
    def stability(self) -> int:
        return self.scores.get("stability", 0)

    @property
    def feedback(self) -> List[str]:
        return self.scores.get("feedback", [])

    def __repr__(self) -> str:
        return (
            f"<AnalysisSession(id={self.id}, drill={self.drill_type}, "
            f"score={self.score}, frames={self.total_frames})>"
        )
