"""
Finders used by the services.

A poll graph (poll, creator, options, votes) is always loaded with a fixed
number of queries: the creator is joined in, options and their votes come
from one ``selectin`` batch each, however many options or polls there are.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, contains_eager, joinedload, selectinload

from poll_app.models.polls import Poll, PollOption, Vote
from poll_app.models.user import User


def _poll_graph():
    return select(Poll).options(
        joinedload(Poll.creator),
        selectinload(Poll.options).selectinload(PollOption.votes),
    )


def load_poll_graph(db: Session, poll_id: int) -> Optional[Poll]:
    return db.execute(_poll_graph().where(Poll.id == poll_id)).unique().scalar_one_or_none()


def load_all_poll_graphs(db: Session) -> List[Poll]:
    """Every poll, newest first."""
    statement = _poll_graph().order_by(Poll.created_at.desc(), Poll.id.desc())
    return list(db.execute(statement).unique().scalars().all())


def load_poll_with_options(db: Session, poll_id: int) -> Optional[Poll]:
    statement = (
        select(Poll)
        .options(joinedload(Poll.creator), selectinload(Poll.options))
        .where(Poll.id == poll_id)
    )
    return db.execute(statement).unique().scalar_one_or_none()


def lock_voter(db: Session, user_id: int) -> None:
    """
    Hold the user's row until the current transaction ends.

    Every vote write of one user takes this lock first, so two of their
    votes on a poll never both see "no prior vote". SQLite has no row locks:
    there a no-op write takes the database write lock instead, and a
    competing writer waits in the busy timeout.
    """
    if db.get_bind().dialect.name == "sqlite":
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(id=User.id)
            .execution_options(synchronize_session=False)
        )
    else:
        db.execute(select(User.id).where(User.id == user_id).with_for_update())


def find_user_votes_on_poll(db: Session, user_id: int, poll_id: int, for_update: bool = False) -> List[Vote]:
    """The user's votes on any option of the poll; at most one when the data is consistent."""
    statement = (
        select(Vote)
        .join(Vote.option)
        .options(contains_eager(Vote.option))
        .where(Vote.user_id == user_id, PollOption.poll_id == poll_id)
    )
    if for_update:
        statement = statement.with_for_update(of=Vote)
    return list(db.execute(statement).scalars().all())


def find_voters(db: Session, option_id: int) -> List[User]:
    """Users who voted for the option, in voting order."""
    statement = (
        select(User)
        .join(Vote, Vote.user_id == User.id)
        .where(Vote.option_id == option_id)
        .order_by(Vote.created_at, Vote.id)
    )
    return list(db.execute(statement).scalars().all())


def find_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()
