"""
Shared fixtures: an in-memory SQLite database per test and an API client.
"""
import os
import tempfile

# Must be set before habitarcade modules read their configuration
os.environ.setdefault("HABITARCADE_DATABASE_URL", "sqlite://")
os.environ.setdefault("HABITARCADE_SCHEDULER_ENABLED", "false")
os.environ.setdefault("HABITARCADE_LOG_DIR", os.path.join(tempfile.gettempdir(), "habitarcade-tests"))
os.environ.setdefault("HABITARCADE_TIMEZONE", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from habitarcade.database import Base, get_db
from habitarcade import models  # noqa: F401 (registers tables)
from habitarcade.repositories.settings_repository import SettingsRepository


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def default_settings(db_session):
    """Settings row with defaults (day boundary at 06:00)"""
    return SettingsRepository.get(db_session)


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient
    from habitarcade.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
