"""Per-image processing: encode the record, then caption it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from models.image_record import ImageRecord
from services.encoder import ImageEncoder
from services.errors import AltTextError
from services.openai.captioner import AltTextCaptioner

LOGGER = logging.getLogger(__name__)


@dataclass
class ProcessOutcome:
    """Result of one attempt; exactly one of `alt_text` / `error` is set."""

    alt_text: str = ""
    error: str = ""
    mime_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.error


class AltTextPipeline:
    """Compose the encoder and the captioner for a single record.

    `process` never raises for per-image failures; the error text is
    returned in the outcome so the caller can attach it to the record.
    """

    def __init__(self, encoder: ImageEncoder, captioner: AltTextCaptioner) -> None:
        self.encoder = encoder
        self.captioner = captioner

    async def process(self, record: ImageRecord) -> ProcessOutcome:
        mime_type: Optional[str] = None
        try:
            image_b64, mime_type = await self.encoder.encode(record)
            alt_text = await self.captioner.caption(image_b64, mime_type)
        except AltTextError as exc:
            LOGGER.warning("Alt text failed for %s (%s): %s", record.id, record.label, exc.describe())
            return ProcessOutcome(error=exc.describe(), mime_type=mime_type)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Unexpected error processing %s (%s)", record.id, record.label)
            return ProcessOutcome(error=f"{type(exc).__name__}: {exc}", mime_type=mime_type)
        return ProcessOutcome(alt_text=alt_text, mime_type=mime_type)
