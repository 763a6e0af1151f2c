from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SourceKind(str, Enum):
    """Where an image came from."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass
class UploadedImage:
    """A file handed over by the client, already read into memory.

    Attributes:
        filename: Original filename supplied by the client.
        content_type: Declared MIME type (may be empty when the client sent none).
        data: Raw file bytes.
    """

    filename: str
    content_type: Optional[str]
    data: bytes


@dataclass
class ImageRecord:
    """In-memory state for one image in the collection.

    Attributes:
        id: Opaque identifier assigned at intake.
        source_kind: LOCAL for uploaded files, REMOTE for URLs.
        label: Original filename (LOCAL) or the URL (REMOTE); used as the CSV first column.
        payload: Raw bytes for LOCAL records, the URL string for REMOTE records.
        preview_reference: Preview store handle (LOCAL) or the URL itself (REMOTE).
        mime_type: Known at intake for LOCAL; resolved after a successful fetch for REMOTE.
        alt_text: Empty until a captioning call succeeds.
        status_error: Empty unless the most recent attempt failed.
        is_processing: True only while a captioning attempt is in flight.
    """

    id: str
    source_kind: SourceKind
    label: str
    payload: bytes | str
    preview_reference: str
    mime_type: Optional[str] = None
    alt_text: str = ""
    status_error: str = ""
    is_processing: bool = False

    @property
    def is_local(self) -> bool:
        return self.source_kind is SourceKind.LOCAL

    @property
    def is_resolved(self) -> bool:
        """True once the record has either alt text or an error recorded."""
        return bool(self.alt_text or self.status_error)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view for API responses (payload bytes are omitted)."""
        return {
            "id": self.id,
            "source_kind": self.source_kind.value,
            "label": self.label,
            "preview_reference": self.preview_reference,
            "mime_type": self.mime_type,
            "alt_text": self.alt_text,
            "status_error": self.status_error,
            "is_processing": self.is_processing,
        }
