"""In-memory image collection and the captioning orchestration around it."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from models.image_record import ImageRecord, UploadedImage
from services.csv_export import export_csv
from services.errors import NoValidImages, NothingToExport, RecordNotFound
from services.intake import ingest_files, ingest_url
from services.pipeline import AltTextPipeline, ProcessOutcome
from services.preview_store import PreviewStore

LOGGER = logging.getLogger(__name__)

EMPTY_COLLECTION_MESSAGE = "Please add some images first."
BATCH_RUNNING_MESSAGE = "Alt text generation is already running."


class ImageCollection:
    """Own the ordered list of records and apply every user intent to it.

    Attributes:
        message: Transient collection-level message; cleared by the next intent.
        is_batch_processing: True while `process_batch` is looping.
    """

    def __init__(self, pipeline: AltTextPipeline, previews: PreviewStore) -> None:
        self.pipeline = pipeline
        self.previews = previews
        self._records: List[ImageRecord] = []
        self.message: Optional[str] = None
        self.is_batch_processing = False

    @property
    def records(self) -> List[ImageRecord]:
        """A copy of the records in collection order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the whole collection for the presentation layer."""
        return {
            "images": [record.to_dict() for record in self._records],
            "message": self.message,
            "is_batch_processing": self.is_batch_processing,
        }

    def _find(self, record_id: str) -> Optional[ImageRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def get(self, record_id: str) -> ImageRecord:
        """Return a record or raise RecordNotFound."""
        record = self._find(record_id)
        if record is None:
            raise RecordNotFound(f"Image {record_id} not found")
        return record

    def add_files(self, files: Sequence[UploadedImage]) -> List[ImageRecord]:
        """Append one record per image file. Sets `message` if none was an image."""
        self.message = None
        try:
            records = ingest_files(files, self.previews)
        except NoValidImages as exc:
            self.message = str(exc)
            return []
        self._records.extend(records)
        return records

    def add_url(self, url: str) -> ImageRecord:
        """Append a remote record. Raises ValueError for non-http(s) text."""
        self.message = None
        record = ingest_url(url)
        self._records.append(record)
        return record

    def _release(self, record: ImageRecord) -> None:
        if record.is_local:
            self.previews.release(record.preview_reference)

    def remove(self, record_id: str) -> ImageRecord:
        """Drop a record and release its preview.

        An in-flight captioning call for it keeps running; its result is discarded.
        """
        self.message = None
        record = self.get(record_id)
        self._records.remove(record)
        self._release(record)
        return record

    def clear(self) -> int:
        """Remove every record, releasing each local preview once. Returns the count removed."""
        self.message = None
        removed = self._records
        self._records = []
        for record in removed:
            self._release(record)
        return len(removed)

    def _begin(self, record: ImageRecord) -> None:
        record.alt_text = ""
        record.status_error = ""
        record.is_processing = True

    def _commit(self, record_id: str, outcome: ProcessOutcome) -> Optional[ImageRecord]:
        record = self._find(record_id)
        if record is None:
            LOGGER.debug("Discarding result for removed image %s", record_id)
            return None
        if outcome.mime_type and not record.is_local:
            record.mime_type = outcome.mime_type
        if outcome.ok:
            record.alt_text = outcome.alt_text
        else:
            record.status_error = outcome.error
        record.is_processing = False
        return record

    async def process_one(self, record_id: str) -> ImageRecord:
        """Clear a record's previous result and caption it again.

        Raises:
            RecordNotFound: If the id is unknown when the call starts.
        """
        self.message = None
        record = self.get(record_id)
        if record.is_processing:
            LOGGER.info("Image %s is already being processed", record_id)
            return record
        self._begin(record)
        outcome = await self.pipeline.process(record)
        self._commit(record_id, outcome)
        return record

    async def process_batch(self) -> int:
        """Caption every unresolved record, one at a time, in collection order.

        Records that already have alt text or an error are skipped. A failure
        on one record is stored on it and the loop moves on.

        Returns:
            The number of records attempted.
        """
        self.message = None
        if self.is_batch_processing:
            self.message = BATCH_RUNNING_MESSAGE
            return 0
        if not self._records:
            self.message = EMPTY_COLLECTION_MESSAGE
            return 0

        attempted = 0
        self.is_batch_processing = True
        LOGGER.info("Batch started for %d images", len(self._records))
        try:
            for record in list(self._records):
                if record.is_resolved or record.is_processing:
                    continue
                if self._find(record.id) is None:
                    # removed while an earlier record was in flight
                    continue
                self._begin(record)
                outcome = await self.pipeline.process(record)
                self._commit(record.id, outcome)
                attempted += 1
        finally:
            self.is_batch_processing = False
        LOGGER.info("Batch finished: %d images attempted", attempted)
        return attempted

    def export_csv(self) -> str:
        """Return the CSV document. Raises NothingToExport and sets `message`."""
        self.message = None
        try:
            return export_csv(self._records)
        except NothingToExport as exc:
            self.message = str(exc)
            raise
