"""
Read projection of a poll for one viewer.

Works purely on an already loaded poll graph (creator, options, votes) and
never touches the database.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from poll_app.models.polls import Poll
from poll_app.schemas.poll import OptionRead, PollRead
from poll_app.schemas.user import UserRead


def find_viewer_vote(poll: Poll, viewer_id: Optional[int]) -> Tuple[Optional[int], Optional[datetime]]:
    """Return ``(option_id, voted_at)`` of the viewer's vote on the poll, or ``(None, None)``."""
    if viewer_id is None:
        return None, None
    for option in poll.options:
        for vote in option.votes:
            if vote.user_id == viewer_id:
                return option.id, vote.created_at
    return None, None


def edited_after_vote(updated_at: datetime, voted_at: Optional[datetime]) -> bool:
    return voted_at is not None and updated_at > voted_at


def project_poll(poll: Poll, viewer_id: Optional[int]) -> PollRead:
    voted_option_id, voted_at = find_viewer_vote(poll, viewer_id)

    return PollRead(
        id=poll.id,
        title=poll.title,
        description=poll.description,
        creator=UserRead.model_validate(poll.creator),
        options=[
            OptionRead(id=option.id, text=option.text, vote_count=len(option.votes))
            for option in poll.options
        ],
        created_at=poll.created_at,
        updated_at=poll.updated_at,
        user_voted_option_id=voted_option_id,
        poll_edited_after_vote=edited_after_vote(poll.updated_at, voted_at),
    )


def project_polls(polls: Iterable[Poll], viewer_id: Optional[int]) -> List[PollRead]:
    return [project_poll(poll, viewer_id) for poll in polls]
