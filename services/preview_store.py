"""In-memory owner of preview resources for uploaded images."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from uuid import uuid4

from services.thumbnail_generator import ThumbnailGenerator

LOGGER = logging.getLogger(__name__)


@dataclass
class Preview:
    """Displayable bytes held for one uploaded image."""

    content: bytes
    media_type: str


class PreviewStore:
    """Mint, serve and release preview handles.

    Every handle returned by `create` stays alive until `release` is called
    for it; the collection releases a handle when its record is removed or
    the collection is cleared.
    """

    def __init__(self, thumbnails: Optional[ThumbnailGenerator] = None) -> None:
        self.thumbnails = thumbnails or ThumbnailGenerator()
        self._previews: Dict[str, Preview] = {}
        self.released_count = 0

    def create(self, raw: bytes, mime_type: str) -> str:
        """Store a preview for `raw` and return its handle.

        Falls back to the original bytes when Pillow cannot decode them.
        """
        try:
            preview = Preview(content=self.thumbnails.create_thumbnail(raw), media_type="image/png")
        except ValueError:
            LOGGER.debug("Preview thumbnail failed for %s upload; keeping original bytes", mime_type)
            preview = Preview(content=raw, media_type=mime_type)
        handle = f"preview:{uuid4().hex}"
        self._previews[handle] = preview
        return handle

    def get(self, handle: str) -> Preview:
        """Return a live preview or raise KeyError."""
        preview = self._previews.get(handle)
        if preview is None:
            raise KeyError(f"Preview {handle} not found")
        return preview

    def release(self, handle: str) -> None:
        """Drop a preview. Raises KeyError if it was never minted or is already released."""
        if handle not in self._previews:
            raise KeyError(f"Preview {handle} not found")
        del self._previews[handle]
        self.released_count += 1

    @property
    def live_count(self) -> int:
        return len(self._previews)
