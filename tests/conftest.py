from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel
from sqlmodel.pool import StaticPool

from goaltrack.database import build_engine, create_db_and_tables, get_session
from goaltrack.main import app
from goaltrack.models.challenge import Challenge, ChallengeParticipation
from goaltrack.schemas.goal import GoalCreate
from goaltrack.services.aggregation import goal_view_cache, notification_service
from goaltrack.services.goals import GoalService

USER_ID = 1


def days_ago(days: int) -> date:
    return date.today() - timedelta(days=days)


@pytest.fixture(name="engine")
def engine_fixture():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def reset_shared_state():
    goal_view_cache.clear()
    notification_service.clear()
    yield
    goal_view_cache.clear()
    notification_service.clear()


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def goal_service(session):
    return GoalService(session)


@pytest.fixture
def make_goal(goal_service):
    def _make_goal(name: str, user_id: int = USER_ID, **kwargs):
        return goal_service.create_goal(GoalCreate(name=name, user_id=user_id, **kwargs))
    return _make_goal


@pytest.fixture
def challenge(session):
    challenge = Challenge(title="Spring Cut", start_date=days_ago(20), end_date=days_ago(-40))
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    return challenge


@pytest.fixture
def participation(session, challenge):
    participation = ChallengeParticipation(
        challenge_id=challenge.id,
        user_id=USER_ID,
        baseline_weight=82.0,
        baseline_body_fat=18.0,
        baseline_muscle_mass=36.0,
    )
    session.add(participation)
    session.commit()
    session.refresh(participation)
    return participation
