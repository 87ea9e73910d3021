import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import basic dependencies
from poll_app.db.database import Base, create_db_engine, get_db
from poll_app.core.config import Settings, get_settings
from poll_app.core.security import hash_password, create_access_token
from poll_app.models.user import User
from poll_app.models.polls import Poll, PollOption, Vote
from poll_app.models.notification import Notification  # noqa: F401

# Test database - in-memory SQLite shared by every session of a test
TEST_DB_URL = "sqlite:///:memory:"
TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "testpass123"

# bcrypt is slow on purpose, hash once for all fixtures
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def test_engine():
    engine = create_db_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a test database session for direct database tests"""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_settings():
    return Settings(jwt_secret=TEST_SECRET, database_url=TEST_DB_URL)


@pytest.fixture(scope="function")
def client(session_factory, test_settings):
    """Test client over a fresh app wired to the test database"""
    from main import create_app

    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db_session, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=TEST_PASSWORD_HASH
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_poll(db_session, creator: User, title: str = "Lunch", options=("Pizza", "Sushi")) -> Poll:
    poll = Poll(title=title, description="Friday team lunch", creator_id=creator.id)
    db_session.add(poll)
    db_session.flush()
    for text in options:
        db_session.add(PollOption(poll_id=poll.id, text=text))
    db_session.commit()
    db_session.refresh(poll)
    return poll


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, TEST_SECRET)}"}


# Database fixtures
@pytest.fixture
def creator(db_session):
    """Owns the polls in most tests"""
    return make_user(db_session, "alice")


@pytest.fixture
def voter(db_session):
    """Votes on the creator's polls"""
    return make_user(db_session, "bob")


@pytest.fixture
def test_poll(db_session, creator):
    """Poll owned by ``creator`` with options Pizza and Sushi"""
    return make_poll(db_session, creator)


@pytest.fixture
def creator_headers(creator):
    return auth_headers_for(creator)


@pytest.fixture
def voter_headers(voter):
    return auth_headers_for(voter)


def option_ids(poll: Poll) -> dict:
    """Map option text to id"""
    return {option.text: option.id for option in poll.options}


def count_votes(db_session, user_id: int, poll_id: int) -> int:
    db_session.expire_all()
    return (
        db_session.query(Vote)
        .join(PollOption, Vote.option_id == PollOption.id)
        .filter(Vote.user_id == user_id, PollOption.poll_id == poll_id)
        .count()
    )
