"""
Sign-in and sessions.

Sign-in runs: verify Google ID token → upsert user → create session →
Set-Cookie. Protected routes run: Cookie header → session lookup.
"""
from receiptvault.auth.cookies import (
    clear_session_cookie,
    decode_cookie_header,
    encode_cleared_cookie,
    encode_session_cookie,
    set_session_cookie,
)
from receiptvault.auth.sessions import (
    ActiveSession,
    NewSession,
    create_session,
    delete_session,
    delete_user_sessions,
    lookup_session,
    purge_expired_sessions,
)
from receiptvault.auth.tokens import (
    CertificateCache,
    GoogleTokenVerifier,
    VerifiedIdentity,
    get_token_verifier,
)
from receiptvault.auth.users import get_user, upsert_user

__all__ = [
    "ActiveSession",
    "CertificateCache",
    "GoogleTokenVerifier",
    "NewSession",
    "VerifiedIdentity",
    "clear_session_cookie",
    "create_session",
    "decode_cookie_header",
    "delete_session",
    "delete_user_sessions",
    "encode_cleared_cookie",
    "encode_session_cookie",
    "get_token_verifier",
    "get_user",
    "lookup_session",
    "purge_expired_sessions",
    "set_session_cookie",
    "upsert_user",
]
