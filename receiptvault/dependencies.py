"""
FastAPI dependencies resolving the caller's session.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from receiptvault.auth import ActiveSession, decode_cookie_header, lookup_session
from receiptvault.config import settings
from receiptvault.database import get_db
from receiptvault.errors import Unauthenticated


def get_session_id(request: Request) -> Optional[str]:
    cookies = decode_cookie_header(request.headers.get("cookie"))
    return cookies.get(settings.SESSION_COOKIE_NAME) or None


def get_optional_session(
    sid: Optional[str] = Depends(get_session_id),
    db: Session = Depends(get_db),
) -> Optional[ActiveSession]:
    """The caller's live session, or None. Slides the session's expiry."""
    return lookup_session(db, sid)


def get_current_session(
    session: Optional[ActiveSession] = Depends(get_optional_session),
) -> ActiveSession:
    """Like get_optional_session but rejects anonymous callers with 401."""
    if session is None:
        raise Unauthenticated()
    return session
