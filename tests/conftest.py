import os

# Keep the default engine off disk; tests use their own in-memory engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from dependencies import get_engine
from core.round_engine import RoundEngine, EngineConfig
from main import app


class FixedRandom:
    """randint returns the queued values in order (last one repeats)"""

    def __init__(self, *values):
        self.values = list(values)

    def randint(self, a, b):
        value = self.values.pop(0) if len(self.values) > 1 else self.values[0]
        assert a <= value <= b
        return value


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_engine():
    def _make(*secrets, **config):
        rng = FixedRandom(*secrets) if secrets else random.Random(1234)
        return RoundEngine(EngineConfig(**config), rng=rng)
    return _make


@pytest.fixture
def client(db, make_engine):
    engine = make_engine(42)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
