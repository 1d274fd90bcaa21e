"""
Shared fixtures: in-memory database, seeded question bank, controllable clock.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from certprep.core.engine import (
    ProgressAggregator,
    QuestionBankAccessor,
    SessionBuilder,
    SessionStateMachine,
)
from certprep.models import Base, Category, User
from certprep.repositories import SqlProgressStore, SqlSessionRepository
from tests.factories import FakeClock, make_question


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
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def learner(db):
    user = User(email="learner@example.com", full_name="Test Learner", role="student", is_active=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin(db):
    user = User(email="admin@example.com", full_name="Admin", role="admin", is_active=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def categories(db):
    networking = Category(name="Networking", color="#3B82F6", description="Routing and switching")
    security = Category(name="Security", color="#EF4444")
    hardware = Category(name="Hardware", color="#10B981")
    db.add_all([networking, security, hardware])
    db.commit()
    return {"networking": networking, "security": security, "hardware": hardware}


@pytest.fixture
def questions(db, categories):
    """Four networking and three security questions; hardware stays empty."""
    networking = [
        make_question(db, categories["networking"], points=1.0, difficulty="easy", text="N1"),
        make_question(db, categories["networking"], points=2.0, difficulty="medium", text="N2"),
        make_question(db, categories["networking"], points=2.0, difficulty="medium", text="N3"),
        make_question(db, categories["networking"], points=3.0, difficulty="hard", text="N4"),
    ]
    security = [
        make_question(db, categories["security"], points=1.0, difficulty="easy", text="S1"),
        make_question(db, categories["security"], points=1.0, difficulty="medium", text="S2"),
        make_question(db, categories["security"], points=2.0, difficulty="hard", text="S3"),
    ]
    make_question(db, categories["security"], is_active=False, text="retired")
    return {"networking": networking, "security": security}


@pytest.fixture
def question_bank(db):
    return QuestionBankAccessor(db)


@pytest.fixture
def repository(db):
    return SqlSessionRepository(db)


@pytest.fixture
def store(db):
    return SqlProgressStore(db)


@pytest.fixture
def aggregator(store, repository, question_bank, clock):
    return ProgressAggregator(store, repository, question_bank, clock)


@pytest.fixture
def builder(question_bank, repository, clock):
    return SessionBuilder(question_bank, repository, clock)


@pytest.fixture
def machine(repository, question_bank, aggregator, clock):
    return SessionStateMachine(repository, question_bank, aggregator, clock)
