"""
Sign-in endpoints.

GET  /auth/config   — public Google client id for the sign-in button
POST /auth/google   — exchange a Google ID token for a session cookie
GET  /me            — who am I
POST /logout        — end the session, clear the cookie
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from receiptvault.auth import (
    ActiveSession,
    GoogleTokenVerifier,
    clear_session_cookie,
    create_session,
    delete_session,
    get_token_verifier,
    set_session_cookie,
    upsert_user,
)
from receiptvault.config import settings
from receiptvault.database import get_db
from receiptvault.dependencies import get_optional_session, get_session_id
from receiptvault.schemas import (
    AuthConfigResponse,
    GoogleSignInRequest,
    SuccessResponse,
    UserOut,
    UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /auth/config ─────────────────────────────────────────────────────
@router.get("/auth/config", response_model=AuthConfigResponse)
def auth_config():
    return AuthConfigResponse(googleClientId=settings.GOOGLE_CLIENT_ID or None)


# ── POST /auth/google ────────────────────────────────────────────────────
@router.post("/auth/google", response_model=UserResponse)
def google_sign_in(
    req: GoogleSignInRequest,
    response: Response,
    db: Session = Depends(get_db),
    verifier: GoogleTokenVerifier = Depends(get_token_verifier),
):
    """Verify token → upsert user → create session → set cookie.

    Any verification failure is a 401 (TokenInvalid, mapped in main).
    """
    identity = verifier.verify(req.id_token)
    upsert_user(db, identity.subject, name=identity.name, email=identity.email)
    session = create_session(db, identity.subject)

    set_session_cookie(response, session.sid, session.expires_at)
    logger.info("Signed in user %s", identity.subject)
    return UserResponse(user=UserOut(id=identity.subject, name=identity.name, email=identity.email))


# ── GET /me ──────────────────────────────────────────────────────────────
@router.get("/me", response_model=UserResponse)
def me(session: Optional[ActiveSession] = Depends(get_optional_session)):
    if session is None:
        return JSONResponse(status_code=401, content={"user": None})
    return UserResponse(user=UserOut(id=session.user_id, name=session.name, email=session.email))


# ── POST /logout ─────────────────────────────────────────────────────────
@router.post("/logout", response_model=SuccessResponse)
def logout(
    response: Response,
    sid: Optional[str] = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    """Idempotent: always succeeds and always clears the cookie."""
    if sid:
        delete_session(db, sid)
    clear_session_cookie(response)
    return SuccessResponse()
