"""Turn uploaded files and submitted URLs into collection records."""

from __future__ import annotations

from typing import List, Sequence
from urllib.parse import urlparse
from uuid import uuid4

from models.image_record import ImageRecord, SourceKind, UploadedImage
from services.errors import NoValidImages
from services.preview_store import PreviewStore


def is_image_type(content_type: str | None) -> bool:
    """Return True when the declared content type is an image type."""
    if not content_type:
        return False
    return content_type.lower().split(";", 1)[0].strip().startswith("image/")


def _new_id() -> str:
    return uuid4().hex


def ingest_files(files: Sequence[UploadedImage], previews: PreviewStore) -> List[ImageRecord]:
    """Build one LOCAL record per image-typed file, in input order.

    Non-image files are skipped.

    Raises:
        NoValidImages: If files were given but none of them is an image.
    """
    accepted = [upload for upload in files if is_image_type(upload.content_type)]
    if files and not accepted:
        raise NoValidImages("Please select valid image files.")

    records: List[ImageRecord] = []
    for upload in accepted:
        mime_type = upload.content_type.split(";", 1)[0].strip()
        records.append(
            ImageRecord(
                id=_new_id(),
                source_kind=SourceKind.LOCAL,
                label=upload.filename or "uploaded_image",
                payload=upload.data,
                preview_reference=previews.create(upload.data, mime_type),
                mime_type=mime_type,
            )
        )
    return records


def ingest_url(url: str) -> ImageRecord:
    """Build a REMOTE record that previews straight from the URL.

    Raises:
        ValueError: If the text is not an http(s) URL.
    """
    cleaned = (url or "").strip()
    parsed = urlparse(cleaned)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Please enter a valid http(s) image URL.")
    return ImageRecord(
        id=_new_id(),
        source_kind=SourceKind.REMOTE,
        label=cleaned,
        payload=cleaned,
        preview_reference=cleaned,
    )
