"""
Model-level tests: constraints and cascades the services rely on.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from poll_app.models.user import User
from poll_app.models.polls import Poll, PollOption, Vote
from poll_app.models.notification import Notification

from conftest import make_poll, TEST_PASSWORD_HASH


def test_database_fixture(db_session):
    """Foreign keys are enforced on the test connection"""
    result = db_session.execute(text("PRAGMA foreign_keys")).fetchone()
    assert result[0] == 1


def test_poll_model_creation(db_session, creator):
    # Act
    poll = make_poll(db_session, creator, title="What's your favorite color?", options=("Red", "Blue"))

    # Assert
    assert poll.id is not None
    assert poll.creator.username == "alice"
    assert [o.text for o in poll.options] == ["Red", "Blue"]
    assert poll.created_at is not None
    assert poll.updated_at >= poll.created_at


def test_username_must_be_unique(db_session, creator):
    db_session.add(User(username="alice", email="other@example.com", hashed_password=TEST_PASSWORD_HASH))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_email_must_be_unique(db_session, creator):
    db_session.add(User(username="alice2", email="alice@example.com", hashed_password=TEST_PASSWORD_HASH))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_vote_unique_per_user_and_option(db_session, test_poll, voter):
    """The unique index on (user, option) rejects a second identical vote"""
    option = test_poll.options[0]
    db_session.add(Vote(user_id=voter.id, option_id=option.id))
    db_session.commit()

    db_session.add(Vote(user_id=voter.id, option_id=option.id))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_deleting_option_cascades_votes_in_database(db_session, test_poll, voter):
    option_id = test_poll.options[0].id
    db_session.add(Vote(user_id=voter.id, option_id=option_id))
    db_session.commit()

    db_session.execute(text("DELETE FROM poll_options WHERE id = :id"), {"id": option_id})
    db_session.commit()

    assert db_session.query(Vote).filter(Vote.option_id == option_id).count() == 0


def test_deleting_poll_cascades_options_in_database(db_session, test_poll):
    poll_id = test_poll.id
    db_session.execute(text("DELETE FROM polls WHERE id = :id"), {"id": poll_id})
    db_session.commit()

    assert db_session.query(PollOption).filter(PollOption.poll_id == poll_id).count() == 0


def test_notification_defaults(db_session, creator):
    notification = Notification(user_id=creator.id, message="hello")
    db_session.add(notification)
    db_session.commit()
    db_session.refresh(notification)

    assert notification.type == "vote_changed"
    assert notification.read is False
    assert notification.poll_id is None
    assert notification.created_at is not None


def test_notification_poll_id_is_not_a_foreign_key(db_session, creator):
    """Notifications can point at polls that no longer exist"""
    notification = Notification(user_id=creator.id, message="hello", poll_id=9999)
    db_session.add(notification)
    db_session.commit()

    assert db_session.query(Poll).filter(Poll.id == 9999).first() is None
    assert notification.id is not None
