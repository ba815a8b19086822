import datetime as dt

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from chatflow.core.config import settings
from chatflow.core.database import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(255), nullable=False, default=lambda: settings.DEFAULT_CONVERSATION_TITLE)

    # Set in Python so ordering by recency has sub-second resolution on SQLite.
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
