"""
Live drill session orchestration.

Drives one analyzer through a drill the way the live analysis screen does:

    SELECTING --select()--> SELECTING (drill chosen)
              --start()---> RUNNING --submit()*--> RUNNING
              --finish()--> RESULTS
    RUNNING   --record_detection_error() x max_detection_errors--> SELECTING
    any status --reset()--> SELECTING

The frame loop (camera + pose model) lives outside. It calls submit() with
each pose it gets, or with None when no pose was found, and
record_detection_error() when the pose model itself fails. Too many
failures abandon the run and send the session back to SELECTING. Each
session gets a fresh analyzer; reset() discards it.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence
import logging
import uuid

from drillscore.config import Settings, get_settings
from drillscore.cv.drill_analyzers import DrillAnalyzer, DrillResult
from drillscore.cv.drill_types import DrillType
from drillscore.cv.factory import create_analyzer
from drillscore.cv.feedback import coaching_tips
from drillscore.cv.keypoints import keypoints_from_sequence
from drillscore.exceptions import NotAuthenticatedError, SessionStateError
from drillscore.models.analysis_session import AnalysisSession
from drillscore.repository import ResultRepository

logger = logging.getLogger(__name__)

TOO_MANY_DETECTION_ERRORS = "Too many detection errors. Please refresh and try again."


class SessionStatus(str, Enum):
    """Live session status."""
    SELECTING = "selecting"
    RUNNING = "running"
    RESULTS = "results"


class DrillSession:
    """
    One athlete's live drill session.

    Args:
        is_authenticated: Whether a user sign-in is active; only needed to save
        settings: Settings override
    """

    def __init__(self, is_authenticated: bool = False, settings: Optional[Settings] = None):
        self.is_authenticated = is_authenticated
        self.settings = settings or get_settings()

        self.status = SessionStatus.SELECTING
        self.drill: Optional[DrillType] = None
        self.analyzer: Optional[DrillAnalyzer] = None
        self.result: Optional[DrillResult] = None
        self.session_id: Optional[str] = None
        self.error: Optional[str] = None

        self.frames_processed = 0
        self.detection_errors = 0

    def select(self, drill_id: str, dominant_side: Optional[str] = None) -> DrillAnalyzer:
        """Choose a drill and create its analyzer."""
        self._require(SessionStatus.SELECTING, "select a drill")
        self.analyzer = create_analyzer(drill_id, dominant_side=dominant_side, settings=self.settings)
        self.drill = self.analyzer.drill_type
        return self.analyzer

    def start(self) -> None:
        self._require(SessionStatus.SELECTING, "start")
        if self.analyzer is None:
            raise SessionStateError("Select a drill before starting")
        self.error = None
        self.frames_processed = 0
        self.detection_errors = 0
        self.status = SessionStatus.RUNNING
        logger.info(f"Started {self.drill.value} session")

    def submit(self, keypoints: Optional[Sequence[Any]], timestamp: float) -> bool:
        """
        Forward one detected pose to the analyzer.

        Args:
            keypoints: Pose model output for the frame (Keypoints, tuples or dicts)
            timestamp: Capture time in monotonic milliseconds

        Returns:
            True if the frame reached the analyzer, False if no pose was detected
        """
        self._require(SessionStatus.RUNNING, "submit frames")

        if not keypoints:
            logger.debug(f"No pose detected at {timestamp:.0f}ms, skipping frame")
            return False

        self.analyzer.process_frame(keypoints_from_sequence(keypoints), timestamp)
        self.frames_processed += 1
        return True

    def record_detection_error(self, reason: Optional[str] = None) -> bool:
        """
        Count a failed pose detection.

        Once max_detection_errors is reached the run is abandoned: the
        analyzer is discarded, error is set and the session goes back to
        SELECTING.

        Returns:
            True if the session is still running
        """
        self._require(SessionStatus.RUNNING, "record a detection error")
        self.detection_errors += 1
        logger.warning(
            f"Pose detection failed ({self.detection_errors}/"
            f"{self.settings.max_detection_errors}): {reason or 'unknown error'}"
        )

        if self.detection_errors < self.settings.max_detection_errors:
            return True

        logger.error(f"Abandoning {self.drill.value} session after {self.detection_errors} detection errors")
        self.error = TOO_MANY_DETECTION_ERRORS
        self.status = SessionStatus.SELECTING
        self.drill = None
        self.analyzer = None
        return False

    def finish(self) -> DrillResult:
        """Stop the drill and read the analyzer's results once."""
        self._require(SessionStatus.RUNNING, "finish")
        self.result = self.analyzer.get_results()
        self.session_id = str(uuid.uuid4())
        self.status = SessionStatus.RESULTS
        logger.info(
            f"Finished {self.drill.value} session: {self.result.total_frames} frames, "
            f"score {self.result.score}, {self.detection_errors} detection errors"
        )
        return self.result

    def tips(self) -> List[str]:
        """Coaching tips for the finished drill."""
        self._require(SessionStatus.RESULTS, "get tips")
        return coaching_tips(
            self.drill,
            self.result.flexibility,
            self.result.power,
            self.result.stability,
            limit=self.settings.coaching_tip_limit,
        )

    def save(self, repository: ResultRepository, user_id: str) -> AnalysisSession:
        """
        Persist the finished result for the signed-in user.

        A finished session is stored at most once; saving it again raises
        DuplicateResultError.
        """
        self._require(SessionStatus.RESULTS, "save")
        if not self.is_authenticated:
            raise NotAuthenticatedError("Sign in to save your results")
        return repository.save(self.result, user_id, session_id=self.session_id)

    def reset(self) -> None:
        """Discard the analyzer and go back to drill selection."""
        self.status = SessionStatus.SELECTING
        self.drill = None
        self.analyzer = None
        self.result = None
        self.session_id = None
        self.error = None
        self.frames_processed = 0
        self.detection_errors = 0

    def _require(self, status: SessionStatus, action: str) -> None:
        if self.status != status:
            raise SessionStateError(
                f"Cannot {action} while session is {self.status.value}"
            )
