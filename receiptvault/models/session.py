"""
Server-side session storage.

Lifecycle:
1. Created at sign-in with a random ``sid`` and ``expires_at = now + TTL``
2. Every successful lookup slides ``expires_at`` forward and stamps ``last_seen``
3. Deleted on logout, or by the first lookup that finds it expired
"""
from sqlalchemy import Column, ForeignKey, Index, Integer, String

from receiptvault.database import Base


class SessionModel(Base):
    __tablename__ = "sessions"

    sid = Column(String(64), primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Epoch seconds
    expires_at = Column(Integer, nullable=False)
    last_seen = Column(Integer, nullable=False)
    created_at = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_sessions_user_id", "user_id"),
        Index("ix_sessions_expires_at", "expires_at"),
    )

    def __repr__(self):
        return f"<Session(user_id={self.user_id}, expires_at={self.expires_at})>"
