"""Write-once storage and history queries for finished drill sessions."""

from typing import List, Optional
import logging
import uuid

from sqlalchemy import select, func, desc
from sqlalchemy.orm import Session

from drillscore.cv.drill_analyzers import DrillResult
from drillscore.exceptions import DuplicateResultError, SessionNotFoundError
from drillscore.models.analysis_session import AnalysisSession
from drillscore.schemas.drill_result import DrillResultSchema, HistorySummary

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("date", "score", "drill")


class ResultRepository:
    """
    Persists DrillResults as AnalysisSession rows.

    No update or delete: a saved session is final.
    """

    def __init__(self, db: Session):
        self.db = db

    def save(
        self,
        result: DrillResult,
        user_id: str,
        session_id: Optional[str] = None
    ) -> AnalysisSession:
        """
        Insert a result for user_id.

        Raises:
            DuplicateResultError: session_id already exists
        """
        record = DrillResultSchema.model_validate(result.to_dict())
        session_id = session_id or str(uuid.uuid4())

        if self.db.get(AnalysisSession, session_id) is not None:
            raise DuplicateResultError(f"Analysis session {session_id} already saved")

        row = AnalysisSession(
            id=session_id,
            user_id=user_id,
            drill_type=record.drill_type,
            total_frames=record.total_frames,
            score=record.score,
        )
        row.scores = {
            "flexibility": record.flexibility,
            "power": record.power,
            "stability": record.stability,
            "feedback": record.feedback,
            "metrics": record.metrics,
        }
        self.db.add(row)
        self.db.flush()

        logger.info(f"Saved {record.drill_type} session {session_id} for user {user_id} (score {record.score})")
        return row

    def get(self, session_id: str) -> AnalysisSession:
        row = self.db.get(AnalysisSession, session_id)
        if row is None:
            raise SessionNotFoundError(f"Analysis session {session_id} not found")
        return row

    def history(
        self,
        user_id: str,
        sort_by: str = "date",
        drill_filter: Optional[str] = None
    ) -> List[AnalysisSession]:
        """
        List a user's sessions.

        Args:
            sort_by: "date" (newest first), "score" (highest first) or
                     "drill" (alphabetical)
            drill_filter: Case-insensitive substring of the drill type;
                          None or "all" for every drill
        """
        if sort_by not in SORT_OPTIONS:
            raise ValueError(f"sort_by must be one of {SORT_OPTIONS}, got {sort_by!r}")

        query = select(AnalysisSession).where(AnalysisSession.user_id == user_id)

        if drill_filter and drill_filter.lower() != "all":
            pattern = f"%{drill_filter.lower()}%"
            query = query.where(func.lower(AnalysisSession.drill_type).like(pattern))

        if sort_by == "score":
            query = query.order_by(desc(AnalysisSession.score), desc(AnalysisSession.created_at))
        elif sort_by == "drill":
            query = query.order_by(AnalysisSession.drill_type, desc(AnalysisSession.created_at))
        else:
            query = query.order_by(desc(AnalysisSession.created_at))

        return list(self.db.scalars(query))

    def summary(self, user_id: str) -> HistorySummary:
        """Totals shown above the history table."""
        row = self.db.execute(
            select(
                func.count(AnalysisSession.id),
                func.avg(AnalysisSession.score),
                func.max(AnalysisSession.score),
                func.count(func.distinct(AnalysisSession.drill_type)),
            ).where(AnalysisSession.user_id == user_id)
        ).one()

        total, average, best, drills = row
        return HistorySummary(
            total_sessions=total or 0,
            average_score=round(float(average or 0.0), 1),
            best_score=best or 0,
            drills_practiced=drills or 0,
        )
