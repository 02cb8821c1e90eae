import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from leaderboard.core.metrics import metrics_registry
from leaderboard.db.database import Base, SessionLocal, engine
from leaderboard.main import app


@pytest.fixture()
def db_setup():
    # Fresh schema per test so generated ids start at 1
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_setup):
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def session(db_setup):
    with SessionLocal() as db:
        yield db


@pytest.fixture()
def clean_metrics():
    metrics_registry.reset()
    yield
    metrics_registry.reset()
