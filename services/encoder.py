"""Convert collection records into base64 payloads for the captioning API."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Tuple

import httpx

from models.image_record import ImageRecord
from services.errors import FetchFailed
from utils.settings import DEFAULT_MIME_TYPE

LOGGER = logging.getLogger(__name__)


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("utf-8")


class ImageEncoder:
    """Read a record's image bytes and return `(base64_payload, mime_type)`.

    The record itself is never mutated; callers decide what to store.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        default_mime_type: str = DEFAULT_MIME_TYPE,
        fetch_timeout: float = 30.0,
    ) -> None:
        if http_client is None:
            raise ValueError("An httpx.AsyncClient must be provided.")
        self.http_client = http_client
        self.default_mime_type = default_mime_type
        self.fetch_timeout = fetch_timeout

    async def encode(self, record: ImageRecord) -> Tuple[str, str]:
        if record.is_local:
            mime_type = record.mime_type or self.default_mime_type
            # base64 of a large upload is CPU bound -> run in thread
            payload = await asyncio.to_thread(_b64, record.payload)
            return payload, mime_type
        return await self._fetch_remote(str(record.payload))

    async def _fetch_remote(self, url: str) -> Tuple[str, str]:
        try:
            response = await self.http_client.get(url, timeout=self.fetch_timeout, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise FetchFailed(f"Could not fetch {url}: {exc}") from exc

        if not response.is_success:
            raise FetchFailed(f"HTTP {response.status_code} fetching {url}")

        content_type = response.headers.get("content-type", "")
        mime_type = content_type.split(";", 1)[0].strip() or self.default_mime_type
        body = response.content
        LOGGER.debug("Fetched %s (%d bytes, %s)", url, len(body), mime_type)
        payload = await asyncio.to_thread(_b64, body)
        return payload, mime_type
