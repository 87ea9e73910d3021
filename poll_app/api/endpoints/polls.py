from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from poll_app.db.database import get_db
from poll_app.models.user import User
from poll_app.schemas.poll import PollCreate, PollRead, PollUpdate, VoteRequest
from poll_app.api.endpoints.dependencies import get_current_user
from poll_app.api.responses import (
    AUTH_ERROR_RESPONSE,
    get_poll_create_responses,
    get_poll_read_responses,
    get_poll_update_responses,
    get_poll_delete_responses,
    get_poll_vote_responses,
)
from poll_app.services import poll_mutator, vote_engine

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/polls", tags=["polls"])


@router.post(
    "",
    response_model=PollRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new poll",
    description="Create a poll with at least two options. The authenticated user becomes its creator.",
    responses=get_poll_create_responses()
)
def create_poll(
    poll: PollCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to create poll: '{poll.title}'")
    return poll_mutator.create_poll(db, current_user, poll)


@router.get(
    "",
    response_model=List[PollRead],
    summary="List all polls",
    description="Every poll, newest first, with tallies and the caller's own vote.",
    responses={401: AUTH_ERROR_RESPONSE}
)
def list_polls(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return poll_mutator.list_polls(db, current_user)


@router.get(
    "/{poll_id}",
    response_model=PollRead,
    summary="Get a specific poll by ID",
    responses=get_poll_read_responses()
)
def get_poll(
    poll_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get a poll as seen by the caller.

    - **user_voted_option_id**: the option the caller voted for, if any
    - **poll_edited_after_vote**: the poll was edited after the caller voted,
      so the vote may have been cast against different wording
    """
    return poll_mutator.get_poll(db, current_user, poll_id)


@router.put(
    "/{poll_id}",
    response_model=PollRead,
    summary="Edit a poll",
    description="Replace title, description and option set. Options without an id are added, options left out are deleted together with their votes. Only the creator may edit.",
    responses=get_poll_update_responses()
)
def update_poll(
    poll_id: int,
    poll_update: PollUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to update poll ID: {poll_id}")
    return poll_mutator.update_poll(db, current_user, poll_id, poll_update)


@router.delete(
    "/{poll_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a poll",
    description="Delete a poll with its options and votes. Only the creator may delete. This action cannot be undone.",
    responses=get_poll_delete_responses()
)
def delete_poll(
    poll_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    logger.info(f"User {current_user.id} attempting to delete poll ID: {poll_id}")
    poll_mutator.delete_poll(db, current_user, poll_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{poll_id}/vote",
    response_model=PollRead,
    summary="Vote on a poll",
    description="Cast a vote, or move an earlier vote on this poll to another option.",
    responses=get_poll_vote_responses()
)
def vote_poll(
    poll_id: int,
    vote: VoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return vote_engine.cast_vote(db, current_user, poll_id, vote.option_id)


@router.delete(
    "/{poll_id}/vote",
    response_model=PollRead,
    summary="Withdraw a vote",
    responses=get_poll_read_responses()
)
def clear_vote(
    poll_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return vote_engine.clear_vote(db, current_user, poll_id)
