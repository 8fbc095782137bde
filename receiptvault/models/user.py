"""
Users, keyed by the identity provider's subject.
"""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from receiptvault.database import Base


class UserModel(Base):
    __tablename__ = "users"

    # Google "sub" claim, stable across logins
    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
