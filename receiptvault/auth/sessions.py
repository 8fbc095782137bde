"""
Server-side sessions with sliding expiry.
"""
from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from receiptvault.config import settings
from receiptvault.errors import PersistenceError
from receiptvault.models import SessionModel, UserModel

logger = logging.getLogger(__name__)

DAY_S = 24 * 60 * 60


@dataclass(frozen=True)
class NewSession:
    sid: str
    expires_at: int


@dataclass(frozen=True)
class ActiveSession:
    sid: str
    user_id: str
    name: Optional[str]
    email: Optional[str]
    expires_at: int


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else int(now)


def _ttl_s(ttl_days: Optional[int]) -> int:
    return (settings.SESSION_TTL_DAYS if ttl_days is None else ttl_days) * DAY_S


def generate_session_id() -> str:
    """32 random bytes, hex encoded (256 bits)."""
    return secrets.token_hex(32)


def create_session(
    db: Session, user_id: str, ttl_days: Optional[int] = None, now: Optional[int] = None
) -> NewSession:
    now = _now(now)
    sid = generate_session_id()
    expires_at = now + _ttl_s(ttl_days)

    db.add(SessionModel(sid=sid, user_id=user_id, expires_at=expires_at, last_seen=now, created_at=now))
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Session insert failed for user %s: %s", user_id, e)
        raise PersistenceError("Failed to create session", detail=str(e)) from e

    logger.info("Session created for user %s", user_id)
    return NewSession(sid=sid, expires_at=expires_at)


def _prune(db: Session, sid: str) -> None:
    # Best-effort: the caller already treats the session as absent
    try:
        db.query(SessionModel).filter(SessionModel.sid == sid).delete()
        db.commit()
        logger.info("Pruned expired session")
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to prune expired session: %s", e)


def lookup_session(
    db: Session, sid: Optional[str], ttl_days: Optional[int] = None, now: Optional[int] = None
) -> Optional[ActiveSession]:
    """Return the live session for *sid*, sliding its expiry forward.

    Returns None if the sid is unknown or expired; an expired row is deleted
    on the way out so it can never be revived.
    """
    if not sid:
        return None
    now = _now(now)

    row = (
        db.query(SessionModel, UserModel)
        .join(UserModel, UserModel.id == SessionModel.user_id)
        .filter(SessionModel.sid == sid)
        .first()
    )
    if row is None:
        return None
    session, user = row

    if session.expires_at <= now:
        _prune(db, sid)
        return None

    # Never move the deadline backwards, even if a racing request wrote a later one
    session.expires_at = max(session.expires_at, now + _ttl_s(ttl_days))
    session.last_seen = now
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Failed to refresh session", detail=str(e)) from e

    return ActiveSession(
        sid=session.sid,
        user_id=user.id,
        name=user.name,
        email=user.email,
        expires_at=session.expires_at,
    )


def delete_session(db: Session, sid: Optional[str]) -> bool:
    """Delete a session (logout). Unknown sids are a no-op.

    Returns True if a row was deleted.
    """
    if not sid:
        return False
    try:
        result = db.query(SessionModel).filter(SessionModel.sid == sid).delete()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Failed to delete session", detail=str(e)) from e
    if result:
        logger.info("Session deleted")
    return result > 0


def delete_user_sessions(db: Session, user_id: str) -> int:
    """Log a user out everywhere. Returns the number of sessions removed."""
    try:
        result = db.query(SessionModel).filter(SessionModel.user_id == user_id).delete()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Failed to delete sessions", detail=str(e)) from e
    logger.info("Deleted %d sessions for user %s", result, user_id)
    return result


def purge_expired_sessions(db: Session, now: Optional[int] = None) -> int:
    """Remove every expired session. Maintenance hook, nothing schedules it."""
    now = _now(now)
    try:
        result = db.query(SessionModel).filter(SessionModel.expires_at <= now).delete()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Failed to purge sessions", detail=str(e)) from e
    logger.info("Purged %d expired sessions", result)
    return result
