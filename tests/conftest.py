from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.cache import MemoryCache, get_cache
from app.core.database import Base, get_db
from app.main import app
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.survey import SurveyCreate
from app.services.survey_service import SurveyService


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


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
def db_session(engine) -> Generator[Session, None, None]:
    session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def uow(db_session) -> UnitOfWork:
    return UnitOfWork(db_session)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> MemoryCache:
    return MemoryCache(maxsize=100, timer=clock)


@pytest.fixture
def client(engine, cache) -> Generator[TestClient, None, None]:
    session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def survey_payload(title="Q1", questions=None, description=None) -> dict:
    if questions is None:
        questions = [("Favourite colour?", True, ["Red", "Blue"])]
    return {
        "title": title,
        "description": description,
        "questions": [
            {
                "text": text,
                "order": order,
                "is_required": required,
                "options": [
                    {"text": option, "order": opt_order}
                    for opt_order, option in enumerate(options)
                ],
            }
            for order, (text, required, options) in enumerate(questions)
        ],
    }


@pytest.fixture
def make_survey(uow):
    """Create (and optionally activate) a survey through the service layer."""

    def _make(title="Q1", questions=None, activate=True, end_date=None):
        service = SurveyService(uow)
        survey = service.create_survey(SurveyCreate(**survey_payload(title, questions)))
        if activate:
            service.activate_survey(survey.id, end_date=end_date)
        return survey

    return _make
