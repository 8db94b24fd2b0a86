import os
from datetime import datetime, timedelta

import pytest

# Set test environment variables before the application is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "redis://localhost:1/0"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["RATE_LIMIT_PER_HOUR"] = "100000"
os.environ["SEED_SAMPLE_DATA"] = "false"



@pytest.fixture
def make_entry():
    """Factory for ReadingEntry snapshots with increasing ids and creation times"""
    from app.services.storage import ReadingEntry

    counter = {"id": 0}

    def _make(day, juz_number=1, pages_read=1, start_page=None, end_page=None, user_id=1):
        counter["id"] += 1
        return ReadingEntry(
            id=counter["id"],
            user_id=user_id,
            date=day,
            juz_number=juz_number,
            pages_read=pages_read,
            start_page=start_page,
            end_page=end_page,
            created_at=datetime(2026, 1, 1) + timedelta(seconds=counter["id"]),
        )

    return _make


@pytest.fixture
def db_session():
    """Session on a private in-memory SQLite database"""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from app.database import Base
    from app.models import ReadingLog, ReadingGoal  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client():
    """Test client over a fresh application database"""
    from fastapi.testclient import TestClient

    from app.database import Base, engine
    from app.main import app
    from app.utils.rate_limiter import rate_limiter

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
