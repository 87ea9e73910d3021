from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean
from poll_app.db.database import Base
from poll_app.core.constants import NotificationConfig
from poll_app.core.timeutils import utc_now


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    # Recipient
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(String, nullable=False)
    type = Column(String, default=NotificationConfig.TYPE_VOTE_CHANGED, nullable=False)
    # Plain reference, the poll may be gone by the time this is read
    poll_id = Column(Integer, nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
