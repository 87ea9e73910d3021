"""
Creating, editing and deleting polls.

Only a poll's creator may edit or delete it. Removing an option removes the
votes cast for it first, and every edit moves ``updated_at`` strictly
forward so voters can see the poll changed after they voted.
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from poll_app.core.constants import ErrorMessages
from poll_app.core.exception import ForbiddenError, InvalidOptionError, InvalidPollError
from poll_app.core.timeutils import next_edit_timestamp, utc_now
from poll_app.db import queries
from poll_app.db.database import transaction
from poll_app.models.polls import Poll, PollOption, Vote
from poll_app.models.user import User
from poll_app.schemas.poll import PollCreate, PollRead, PollUpdate
from poll_app.services.projector import project_poll, project_polls

logger = logging.getLogger(__name__)


def create_poll(db: Session, actor: User, poll_in: PollCreate) -> PollRead:
    with transaction(db):
        now = utc_now()
        poll = Poll(
            title=poll_in.title,
            description=poll_in.description,
            creator_id=actor.id,
            created_at=now,
            updated_at=now,
        )
        db.add(poll)
        db.flush()

        for text in poll_in.options:
            db.add(PollOption(poll_id=poll.id, text=text))
        poll_id = poll.id

    logger.info(f"Poll created successfully: ID {poll_id}, Title: '{poll_in.title}', Options: {len(poll_in.options)}")
    return get_poll(db, actor, poll_id)


def list_polls(db: Session, viewer: User) -> List[PollRead]:
    return project_polls(queries.load_all_poll_graphs(db), viewer.id)


def get_poll(db: Session, viewer: User, poll_id: int) -> PollRead:
    poll = queries.load_poll_graph(db, poll_id)
    if poll is None:
        logger.warning(f"Poll not found: ID {poll_id}")
        raise InvalidPollError()
    return project_poll(poll, viewer.id)


def _get_owned_poll(db: Session, actor: User, poll_id: int, forbidden_message: str) -> Poll:
    poll = queries.load_poll_with_options(db, poll_id)
    if poll is None:
        logger.warning(f"Poll not found: ID {poll_id}")
        raise InvalidPollError()
    if poll.creator_id != actor.id:
        logger.warning(f"User {actor.id} attempted to modify poll {poll_id} owned by user {poll.creator_id}")
        raise ForbiddenError(forbidden_message)
    return poll


def update_poll(db: Session, actor: User, poll_id: int, poll_in: PollUpdate) -> PollRead:
    with transaction(db):
        poll = _get_owned_poll(db, actor, poll_id, ErrorMessages.NOT_AUTHORIZED_UPDATE)

        existing = {option.id: option for option in poll.options}
        unknown = [o.id for o in poll_in.options if o.id is not None and o.id not in existing]
        if unknown:
            logger.warning(f"Poll {poll_id} edit referenced options {unknown} that belong elsewhere")
            raise InvalidOptionError()

        poll.title = poll_in.title
        poll.description = poll_in.description
        poll.updated_at = next_edit_timestamp(poll.updated_at)

        kept_ids = set()
        for option_in in poll_in.options:
            if option_in.id is not None:
                existing[option_in.id].text = option_in.text
                kept_ids.add(option_in.id)
            else:
                db.add(PollOption(poll_id=poll.id, text=option_in.text))

        removed_ids = [option_id for option_id in existing if option_id not in kept_ids]
        if removed_ids:
            # Votes go first so none is left pointing at a deleted option
            db.execute(delete(Vote).where(Vote.option_id.in_(removed_ids)))
            for option_id in removed_ids:
                poll.options.remove(existing[option_id])

    logger.info(f"Poll updated successfully: ID {poll_id}, removed options: {removed_ids}")
    return get_poll(db, actor, poll_id)


def delete_poll(db: Session, actor: User, poll_id: int) -> None:
    with transaction(db):
        _get_owned_poll(db, actor, poll_id, ErrorMessages.NOT_AUTHORIZED_DELETE)

        option_ids = select(PollOption.id).where(PollOption.poll_id == poll_id)
        db.execute(delete(Vote).where(Vote.option_id.in_(option_ids)))
        db.execute(delete(PollOption).where(PollOption.poll_id == poll_id))
        db.execute(delete(Poll).where(Poll.id == poll_id))

    logger.info(f"Poll deleted successfully: ID {poll_id}, Owner: {actor.id}")
