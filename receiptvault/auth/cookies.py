"""
Session cookie codec.

The cookie only carries the opaque session id; everything else stays
server-side. Attributes:
- Path=/          sent on every route
- HttpOnly        not readable from scripts
- Secure          HTTPS only (COOKIE_SECURE, on by default)
- SameSite=Lax    sent on top-level navigation, withheld on cross-site subrequests
- Max-Age         seconds until the session's server-side expiry
"""
from __future__ import annotations

import time
from typing import Optional
from urllib.parse import unquote

from starlette.requests import cookie_parser
from starlette.responses import Response

from receiptvault.config import settings


def set_session_cookie(
    response: Response,
    sid: str,
    expires_at: int,
    now: Optional[int] = None,
    *,
    name: Optional[str] = None,
    secure: Optional[bool] = None,
) -> None:
    """Attach the session cookie for *sid* to *response*."""
    now = int(time.time()) if now is None else now
    response.set_cookie(
        key=name or settings.SESSION_COOKIE_NAME,
        value=sid,
        max_age=max(0, int(expires_at) - now),
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE if secure is None else secure,
        samesite="Lax",
    )


def clear_session_cookie(
    response: Response, *, name: Optional[str] = None, secure: Optional[bool] = None
) -> None:
    """Same cookie, empty and with max_age=0, so the browser drops it now."""
    response.set_cookie(
        key=name or settings.SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE if secure is None else secure,
        samesite="Lax",
    )


def encode_session_cookie(sid: str, expires_at: int, now: Optional[int] = None, **kwargs) -> str:
    """``Set-Cookie`` header value for *sid*."""
    response = Response()
    set_session_cookie(response, sid, expires_at, now, **kwargs)
    return response.headers["set-cookie"]


def encode_cleared_cookie(**kwargs) -> str:
    response = Response()
    clear_session_cookie(response, **kwargs)
    return response.headers["set-cookie"]


def decode_cookie_header(header: Optional[str]) -> dict[str, str]:
    """Parse a ``Cookie`` request header into ``{name: value}``.

    Segments without a name are skipped. Values are percent-decoded. When a
    name repeats, the first occurrence wins.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for segment in header.split(";"):
        for name, value in cookie_parser(segment).items():
            if name and name not in cookies:
                cookies[name] = unquote(value)
    return cookies
