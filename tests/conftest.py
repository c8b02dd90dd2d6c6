import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from main import app
from app.config import SESSION_COOKIE_NAME
from app.database import get_session
from app.dependencies import get_now
from app.models import Match, Round, Team, User
from app.services.auth import hash_password, open_session

# Create in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Before every configured deadline, and before the first kickoff
BEFORE_KICKOFF = datetime(2026, 6, 1, 12, 0)
FIRST_KICKOFF = datetime(2026, 6, 11, 12, 0)


@pytest.fixture(name="session")
def session_fixture():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_now] = lambda: BEFORE_KICKOFF
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    def _make_user(username: str = "testuser", is_admin: bool = False) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password("password123"),
            is_admin=is_admin
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture(name="user")
def user_fixture(make_user):
    return make_user("testuser")


@pytest.fixture(name="user_client")
def user_client_fixture(client: TestClient, session: Session, user: User):
    """Client logged in as the regular test user."""
    client.cookies.set(SESSION_COOKIE_NAME, open_session(session, user))
    return client


@pytest.fixture(name="admin_client")
def admin_client_fixture(client: TestClient, session: Session, make_user):
    """Separate client logged in as an admin, sharing the same overrides."""
    admin = make_user("admin", is_admin=True)
    admin_client = TestClient(app)
    admin_client.cookies.set(SESSION_COOKIE_NAME, open_session(session, admin))
    return admin_client


@pytest.fixture(name="make_team")
def make_team_fixture(session: Session):
    def _make_team(name: str, group_letter: str = "A") -> Team:
        team = Team(name=name, country_code=name[:3].upper(), group_letter=group_letter)
        session.add(team)
        session.commit()
        session.refresh(team)
        return team

    return _make_team


@pytest.fixture(name="make_match")
def make_match_fixture(session: Session):
    def _make_match(
        team1: Team,
        team2: Team,
        round: Round = Round.QUALIFYING,
        kickoff: datetime = FIRST_KICKOFF,
        score: tuple = None,
        penalty_winner: Team = None
    ) -> Match:
        match = Match(
            round=round,
            team1_id=team1.id,
            team2_id=team2.id,
            scheduled_datetime=kickoff
        )
        if score is not None:
            match.team1_score, match.team2_score = score
            match.is_completed = True
            match.penalty_winner_id = penalty_winner.id if penalty_winner else None
        session.add(match)
        session.commit()
        session.refresh(match)
        return match

    return _make_match
