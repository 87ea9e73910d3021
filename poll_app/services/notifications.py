"""
Notifications for poll creators, plus their read-state surface.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poll_app.core.constants import ErrorMessages, NotificationConfig
from poll_app.core.exception import NotFoundError
from poll_app.db.database import transaction
from poll_app.models.notification import Notification
from poll_app.models.polls import Poll
from poll_app.models.user import User

logger = logging.getLogger(__name__)


def vote_changed_message(username: str, poll_title: str, previous_text: str, current_text: str) -> str:
    return NotificationConfig.VOTE_CHANGED_TEMPLATE.format(
        username=username,
        title=poll_title,
        previous=previous_text,
        current=current_text,
    )


def notify_vote_changed(
    db: Session,
    poll: Poll,
    voter: User,
    previous_text: str,
    current_text: str,
) -> Optional[Notification]:
    """
    Tell the poll creator that ``voter`` switched options.

    Runs inside the caller's transaction but in its own savepoint: if the
    insert fails it is logged and dropped, and the caller's vote still
    commits. Returns the notification, or None when it could not be stored.
    """
    notification = Notification(
        user_id=poll.creator_id,
        message=vote_changed_message(voter.username, poll.title, previous_text, current_text),
        type=NotificationConfig.TYPE_VOTE_CHANGED,
        poll_id=poll.id,
        read=False,
    )
    try:
        with db.begin_nested():
            db.add(notification)
    except SQLAlchemyError as e:
        logger.error(f"Failed to store vote change notification for poll {poll.id}, voter {voter.id}: {e}")
        return None

    logger.info(f"Notified user {poll.creator_id} about vote change by user {voter.id} on poll {poll.id}")
    return notification


def list_notifications(db: Session, user: User, limit: int = NotificationConfig.LIST_LIMIT) -> List[Notification]:
    statement = (
        select(Notification)
        .where(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
    )
    return list(db.execute(statement).scalars().all())


def count_unread(db: Session, user: User) -> int:
    statement = select(func.count(Notification.id)).where(
        Notification.user_id == user.id,
        Notification.read.is_(False),
    )
    return db.execute(statement).scalar_one()


def mark_read(db: Session, user: User, notification_id: int) -> Notification:
    with transaction(db):
        notification = db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user.id,
            )
        ).scalar_one_or_none()
        # Someone else's notification looks exactly like a missing one
        if notification is None:
            raise NotFoundError(ErrorMessages.NOTIFICATION_NOT_FOUND)
        notification.read = True
    return notification


def mark_all_read(db: Session, user: User) -> int:
    with transaction(db):
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == user.id, Notification.read.is_(False))
            .values(read=True)
        )
    logger.info(f"Marked {result.rowcount} notifications as read for user {user.id}")
    return result.rowcount
