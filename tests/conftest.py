import os
import tempfile
from pathlib import Path

# Must be set before anything imports app.core.config
_DB_DIR = Path(tempfile.mkdtemp(prefix="hr-records-tests-"))
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", f"sqlite:///{_DB_DIR / 'test.db'}")
os.environ["APP_ENV"] = "test"
os.environ.setdefault("LOG_FORMAT", "colored")

import pytest

from app.db.base import Base
from app.db.session import SessionLocal, engine


@pytest.fixture(autouse=True)
def reset_schema():
    """
    Fresh schema for every test.

    The employee detail read opens one session per child loader on worker
    threads, so tests cannot share a single rolled-back connection with the
    app. Recreating the tables keeps tests isolated instead.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
