"""
Google ID token verification.

The token's signature is checked against Google's published signing
certificates, which are fetched over HTTP and cached process-wide for as
long as the endpoint's ``Cache-Control: max-age`` allows. A token naming a
key id we have not seen forces one refresh (Google rotates keys daily).

Any failure (unreachable certs endpoint, bad signature, expired token,
wrong audience, unknown issuer, empty subject) is ``TokenInvalid``.
"""
from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Iterable, Optional

import httpx
from google.auth import exceptions as google_exceptions
from google.auth import jwt

from receiptvault.config import settings
from receiptvault.errors import TokenInvalid

logger = logging.getLogger(__name__)

# Only a standalone max-age directive, not s-maxage or a suffix of another token
_MAX_AGE_RE = re.compile(r"(?:^|,)\s*max-age\s*=\s*\"?(\d+)\"?\s*(?:,|$)", re.IGNORECASE)


@dataclass(frozen=True)
class VerifiedIdentity:
    subject: str
    email: Optional[str] = None
    name: Optional[str] = None


class CertificateCache:
    """Time-bounded, read-mostly cache of ``{key_id: PEM certificate}``."""

    def __init__(
        self,
        url: str,
        default_max_age_s: int = 3600,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout_s: float = 10.0,
        min_refresh_interval_s: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.default_max_age_s = default_max_age_s
        self._transport = transport
        self._timeout_s = timeout_s
        self._clock = clock
        self._certs: Dict[str, str] = {}
        self._expires_at = 0.0
        self.min_refresh_interval_s = min_refresh_interval_s
        self._fetched_at: Optional[float] = None
        self._lock = threading.Lock()

    def _max_age(self, response: httpx.Response) -> int:
        m = _MAX_AGE_RE.search(response.headers.get("cache-control", ""))
        return int(m.group(1)) if m else self.default_max_age_s

    def _fetch(self) -> None:
        with httpx.Client(transport=self._transport, timeout=self._timeout_s) as client:
            r = client.get(self.url)
            r.raise_for_status()
            certs = r.json()
        if not isinstance(certs, dict) or not certs:
            raise ValueError("certs endpoint returned no keys")
        max_age = self._max_age(r)
        self._certs = {str(k): str(v) for k, v in certs.items()}
        self._fetched_at = self._clock()
        self._expires_at = self._fetched_at + max_age
        logger.info("Fetched %d signing certificates (cached %ds)", len(self._certs), max_age)

    def _refresh_allowed(self) -> bool:
        return self._fetched_at is None or self._clock() - self._fetched_at >= self.min_refresh_interval_s

    def get(self, force_refresh: bool = False) -> Dict[str, str]:
        """Cached certificates, refetched once stale.

        *force_refresh* refetches early (unknown key id), but at most once per
        ``min_refresh_interval_s``; inside that window the cached set is returned.
        """
        if not force_refresh and self._certs and self._clock() < self._expires_at:
            return self._certs
        with self._lock:
            # Another thread may have refreshed while we waited
            stale = not self._certs or self._clock() >= self._expires_at
            if stale or (force_refresh and self._refresh_allowed()):
                self._fetch()
            elif force_refresh:
                logger.info("Certificate refresh throttled")
            return self._certs


class GoogleTokenVerifier:
    def __init__(
        self,
        client_id: Optional[str],
        certs: CertificateCache,
        issuers: Iterable[str] = ("accounts.google.com", "https://accounts.google.com"),
    ) -> None:
        self.client_id = client_id
        self.certs = certs
        self.issuers = frozenset(issuers)

    def _decode(self, id_token: str) -> dict:
        header = jwt.decode_header(id_token)
        certs = self.certs.get()
        kid = header.get("kid")
        if kid and kid not in certs:
            logger.info("Unknown signing key %s, refreshing certificates", kid)
            certs = self.certs.get(force_refresh=True)
        return jwt.decode(id_token, certs=certs, audience=self.client_id)

    def verify(self, id_token: str) -> VerifiedIdentity:
        if not self.client_id:
            raise TokenInvalid(detail="GOOGLE_CLIENT_ID is not configured")
        if not id_token:
            raise TokenInvalid(detail="empty token")

        try:
            claims = self._decode(id_token)
        except httpx.HTTPError as e:
            raise TokenInvalid(detail=f"certs fetch failed: {e}") from e
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            raise TokenInvalid(detail=str(e)) from e

        if claims.get("iss") not in self.issuers:
            raise TokenInvalid(detail=f"unexpected issuer {claims.get('iss')!r}")
        subject = str(claims.get("sub") or "").strip()
        if not subject:
            raise TokenInvalid(detail="token has no subject")

        return VerifiedIdentity(
            subject=subject,
            email=claims.get("email"),
            name=claims.get("name"),
        )


@lru_cache
def get_token_verifier() -> GoogleTokenVerifier:
    """Process-wide verifier; the certificate cache is shared by all requests."""
    return GoogleTokenVerifier(
        client_id=settings.GOOGLE_CLIENT_ID,
        certs=CertificateCache(settings.GOOGLE_CERTS_URL, settings.GOOGLE_CERTS_MAX_AGE_S),
        issuers=settings.GOOGLE_ISSUERS,
    )
