"""Shared fixtures: keypoint frame builders and an in-memory results database."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from drillscore.config import Settings
from drillscore.database import init_db

from pose_builders import build_frame


@pytest.fixture
def make_frame():
    return build_frame


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def db_session():
    engine = create_engine("sqlite://")
    init_db(bind=engine)
    Session = sessionmaker(engine, autoflush=False, expire_on_commit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
