"""Tests for live drill session orchestration."""

import pytest

from drillscore.config import Settings
from drillscore.cv.drill_types import DrillType
from drillscore.exceptions import (
    DuplicateResultError,
    NotAuthenticatedError,
    SessionStateError,
    UnknownDrillError,
)
from drillscore.live_session import TOO_MANY_DETECTION_ERRORS, DrillSession, SessionStatus
from drillscore.repository import ResultRepository

from pose_builders import squat_frame


def model_output(frame):
    """Keypoints as dicts, the way the browser pose model reports them."""
    return [
        None if kp is None else {"x": kp.x, "y": kp.y, "score": kp.score}
        for kp in frame
    ]


def run_squats(session, frames=12):
    session.select("squat")
    session.start()
    for i in range(frames):
        session.submit(model_output(squat_frame(180 - i * 8)), i * 33.0)
    return session.finish()


def test_full_flow():
    session = DrillSession()
    assert session.status == SessionStatus.SELECTING

    result = run_squats(session)

    assert session.status == SessionStatus.RESULTS
    assert session.drill == DrillType.SQUAT
    assert result.total_frames == 12
    assert session.frames_processed == 12
    assert session.result is result


def test_frames_without_a_pose_are_skipped():
    session = DrillSession()
    session.select("cricket_bowling")
    session.start()
    assert session.submit([], 0) is False
    assert session.submit(None, 33) is False
    assert session.submit(model_output(squat_frame(120)), 66) is True

    result = session.finish()
    assert session.detection_errors == 0
    assert session.frames_processed == 1
    assert result.total_frames == 1


def test_unreadable_keypoints_do_not_abort_the_run():
    session = DrillSession()
    session.select("squat")
    session.start()
    assert session.submit([(1, 2, 0.9)] * 16 + [(5.0,)], 0) is True
    assert session.submit([{"x": None, "y": 1, "score": 0.9}] * 17, 33) is True
    assert session.finish().total_frames == 2


def test_detection_errors_below_limit_keep_running():
    session = DrillSession(settings=Settings(max_detection_errors=3))
    session.select("pushup")
    session.start()
    assert session.record_detection_error("model timeout") is True
    assert session.record_detection_error() is True
    assert session.status == SessionStatus.RUNNING
    assert session.detection_errors == 2
    assert session.error is None


def test_too_many_detection_errors_abandon_the_run():
    session = DrillSession(settings=Settings(max_detection_errors=3))
    session.select("pushup")
    session.start()
    session.submit(model_output(squat_frame(120)), 0)
    for _ in range(2):
        session.record_detection_error("model timeout")

    assert session.record_detection_error("model timeout") is False
    assert session.status == SessionStatus.SELECTING
    assert session.error == TOO_MANY_DETECTION_ERRORS
    assert session.analyzer is None
    assert session.drill is None
    with pytest.raises(SessionStateError):
        session.finish()


def test_default_detection_error_limit_is_ten():
    session = DrillSession(settings=Settings())
    session.select("squat")
    session.start()
    for _ in range(9):
        assert session.record_detection_error() is True
    assert session.record_detection_error() is False


def test_restart_after_abandoned_run_clears_error():
    session = DrillSession(settings=Settings(max_detection_errors=1))
    session.select("squat")
    session.start()
    session.record_detection_error()

    session.select("squat")
    session.start()
    assert session.error is None
    assert session.detection_errors == 0
    assert session.status == SessionStatus.RUNNING


def test_detection_errors_only_while_running():
    session = DrillSession()
    with pytest.raises(SessionStateError):
        session.record_detection_error()


def test_cannot_start_without_drill():
    with pytest.raises(SessionStateError):
        DrillSession().start()


def test_cannot_submit_before_start():
    session = DrillSession()
    session.select("pushup")
    with pytest.raises(SessionStateError):
        session.submit(model_output(squat_frame(120)), 0)


def test_cannot_finish_twice():
    session = DrillSession()
    run_squats(session)
    with pytest.raises(SessionStateError):
        session.finish()


def test_unknown_drill_propagates():
    with pytest.raises(UnknownDrillError):
        DrillSession().select("hopscotch")


def test_tips_respect_limit():
    session = DrillSession(settings=Settings(coaching_tip_limit=2))
    run_squats(session)
    assert len(session.tips()) == 2


def test_tips_require_results():
    session = DrillSession()
    session.select("squat")
    with pytest.raises(SessionStateError):
        session.tips()


def test_save_requires_sign_in(db_session):
    session = DrillSession(is_authenticated=False)
    run_squats(session)
    with pytest.raises(NotAuthenticatedError):
        session.save(ResultRepository(db_session), "user-1")


def test_save_when_signed_in(db_session):
    repository = ResultRepository(db_session)
    session = DrillSession(is_authenticated=True)
    result = run_squats(session)

    row = session.save(repository, "user-1")
    assert row.drill_type == "squat"
    assert row.score == result.score
    assert [r.id for r in repository.history("user-1")] == [row.id]


def test_reset_starts_a_fresh_analyzer():
    session = DrillSession()
    run_squats(session)
    first = session.analyzer
    session.reset()

    assert session.status == SessionStatus.SELECTING
    assert session.result is None
    assert session.frames_processed == 0

    session.select("squat")
    assert session.analyzer is not first
    assert session.analyzer.frame_count == 0


def test_finished_session_is_saved_once(db_session):
    repository = ResultRepository(db_session)
    session = DrillSession(is_authenticated=True)
    run_squats(session)

    row = session.save(repository, "user-1")
    assert row.id == session.session_id
    with pytest.raises(DuplicateResultError):
        session.save(repository, "user-1")
    assert len(repository.history("user-1")) == 1


def test_each_finished_run_gets_its_own_record(db_session):
    repository = ResultRepository(db_session)
    session = DrillSession(is_authenticated=True)
    run_squats(session)
    first = session.save(repository, "user-1")

    session.reset()
    run_squats(session)
    second = session.save(repository, "user-1")

    assert first.id != second.id
    assert len(repository.history("user-1")) == 2
