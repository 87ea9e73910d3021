from poll_app.db.database import Base
from poll_app.core.timeutils import utc_now
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

# Define Poll model
class Poll(Base):
    __tablename__ = "polls"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)

    # Foreign key to user table
    creator_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
    # Advanced explicitly by every edit, see poll_mutator.update_poll
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    creator = relationship("User")
    # A poll owns its options
    options = relationship(
        "PollOption",
        back_populates="poll",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PollOption.id"
    )


class PollOption(Base):
    __tablename__ = "poll_options"

    id = Column(Integer, primary_key=True, index=True)
    poll_id = Column(Integer, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String, nullable=False)

    poll = relationship("Poll", back_populates="options")
    # An option owns the votes cast for it
    votes = relationship(
        "Vote",
        back_populates="option",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Vote.id"
    )


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    option_id = Column(Integer, ForeignKey("poll_options.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    option = relationship("PollOption", back_populates="votes")
    user = relationship("User")

    # One vote per user per option; one vote per user per poll is enforced by vote_engine
    __table_args__ = (
        UniqueConstraint('user_id', 'option_id', name='unique_user_vote_per_option'),
    )
