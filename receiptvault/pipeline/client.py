"""
Async client for the document extraction service (parse + extract).
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx

from receiptvault.config import settings
from receiptvault.errors import ExtractFailed, ParseFailed

logger = logging.getLogger(__name__)


def _trim(s: str, n: int = 2000) -> str:
    s = s or ""
    return s if len(s) <= n else (s[:n] + "…<trimmed>")


class ExtractionClient:
    """Two-endpoint HTTP client. Neither call is retried."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout_s: float = 120.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Basic {self.api_key}"}

    async def _post(self, path: str, *, files: Dict[str, Any], data: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
            return await client.post(
                f"{self.base_url}{path}", headers=self._headers(), files=files, data=data
            )

    async def parse(self, file_bytes: bytes, filename: str, content_type: Optional[str] = None) -> str:
        """Document → markdown."""
        try:
            r = await self._post(
                "/v1/ade/parse",
                files={"document": (filename, file_bytes, content_type or "application/octet-stream")},
                data={"model": self.model},
            )
        except httpx.HTTPError as e:
            raise ParseFailed(detail=f"transport error: {e!r}") from e

        if r.status_code >= 400:
            raise ParseFailed(detail=f"HTTP {r.status_code}: {_trim(r.text)}")

        try:
            markdown = r.json().get("markdown")
        except (ValueError, AttributeError) as e:
            raise ParseFailed(detail=f"unreadable parse response: {_trim(r.text)}") from e
        if not isinstance(markdown, str):
            raise ParseFailed(detail="parse response has no markdown")
        return markdown

    async def extract(self, markdown: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        """Markdown + schema → structured fields (raw JSON body)."""
        try:
            r = await self._post(
                "/v1/ade/extract",
                files={"markdown": ("document.md", markdown.encode("utf-8"), "text/plain")},
                data={"schema": json.dumps(schema)},
            )
        except httpx.HTTPError as e:
            raise ExtractFailed(detail=f"transport error: {e!r}") from e

        if r.status_code >= 400:
            raise ExtractFailed(detail=f"HTTP {r.status_code}: {_trim(r.text)}")

        try:
            body = r.json()
        except ValueError as e:
            raise ExtractFailed(detail=f"unreadable extract response: {_trim(r.text)}") from e
        if not isinstance(body, dict):
            raise ExtractFailed(detail="extract response is not an object")
        return body


@lru_cache
def get_extraction_client() -> ExtractionClient:
    return ExtractionClient(
        base_url=settings.EXTRACT_BASE_URL,
        api_key=settings.EXTRACT_API_KEY,
        model=settings.PARSE_MODEL,
        timeout_s=settings.EXTRACT_TIMEOUT_S,
    )
