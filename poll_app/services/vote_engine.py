"""
Casting, changing and clearing votes.

A user holds at most one vote per poll. Casting a vote replaces any earlier
vote on the same poll inside one transaction, and a genuine change of mind
on someone else's poll leaves a notification for the poll's creator.

Both writes start by locking the actor's user row, so concurrent votes of
one user on a poll run one after the other.

Re-casting the option already chosen still replaces the vote row (with a
new timestamp) but sends no notification, since the selection did not
change. Creators hear about actual changes of option only.
"""

import logging

from sqlalchemy.orm import Session

from poll_app.core.exception import InvalidOptionError, InvalidPollError
from poll_app.core.timeutils import utc_now
from poll_app.db import queries
from poll_app.db.database import transaction
from poll_app.models.polls import Vote
from poll_app.models.user import User
from poll_app.schemas.poll import PollRead
from poll_app.services.notifications import notify_vote_changed
from poll_app.services.projector import project_poll

logger = logging.getLogger(__name__)


def cast_vote(db: Session, actor: User, poll_id: int, option_id: int) -> PollRead:
    with transaction(db):
        queries.lock_voter(db, actor.id)
        poll = queries.load_poll_with_options(db, poll_id)
        if poll is None:
            logger.warning(f"Vote attempt on missing poll {poll_id} by user {actor.id}")
            raise InvalidPollError()

        option = next((o for o in poll.options if o.id == option_id), None)
        if option is None:
            logger.warning(f"User {actor.id} voted for option {option_id}, which is not part of poll {poll_id}")
            raise InvalidOptionError()

        prior_votes = queries.find_user_votes_on_poll(db, actor.id, poll_id, for_update=True)
        previous_option = prior_votes[0].option if prior_votes else None
        previous_option_id = previous_option.id if previous_option is not None else None

        for prior in prior_votes:
            db.delete(prior)
        # The old row has to be gone before the insert, re-voting the same option would hit the unique index
        db.flush()

        db.add(Vote(user_id=actor.id, option_id=option.id, created_at=utc_now()))
        db.flush()

        changed = previous_option_id is not None and previous_option_id != option.id
        if changed and poll.creator_id != actor.id:
            notify_vote_changed(db, poll, actor, previous_option.text, option.text)

    if previous_option_id is None:
        logger.info(f"User {actor.id} voted for option {option_id} on poll {poll_id}")
    else:
        logger.info(f"User {actor.id} changed vote on poll {poll_id} from option {previous_option_id} to {option_id}")

    return _project(db, poll_id, actor)


def clear_vote(db: Session, actor: User, poll_id: int) -> PollRead:
    with transaction(db):
        queries.lock_voter(db, actor.id)
        poll = queries.load_poll_with_options(db, poll_id)
        if poll is None:
            raise InvalidPollError()

        prior_votes = queries.find_user_votes_on_poll(db, actor.id, poll_id, for_update=True)
        for prior in prior_votes:
            db.delete(prior)

    if prior_votes:
        logger.info(f"User {actor.id} cleared their vote on poll {poll_id}")

    return _project(db, poll_id, actor)


def _project(db: Session, poll_id: int, viewer: User) -> PollRead:
    poll = queries.load_poll_graph(db, poll_id)
    if poll is None:
        # Deleted between our commit and the reload
        raise InvalidPollError()
    return project_poll(poll, viewer.id)
