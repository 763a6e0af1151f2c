"""CSV serialization of generated alt text."""

from __future__ import annotations

import csv
import io
from typing import Iterable

from models.image_record import ImageRecord
from services.errors import NothingToExport

CSV_HEADER = ("Filename/URL", "Generated Alt Text")


def export_csv(records: Iterable[ImageRecord]) -> str:
    """Return a CSV document with one quoted row per captioned record.

    Rows follow collection order; records without alt text are skipped.
    Embedded double quotes are doubled by the csv writer.

    Raises:
        NothingToExport: If there are no records, or none has alt text yet.
    """
    records = list(records)
    if not records:
        raise NothingToExport("No images to export.")
    captioned = [record for record in records if record.alt_text]
    if not captioned:
        raise NothingToExport("No alt text has been generated yet.")

    out_io = io.StringIO()
    out_io.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(out_io, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in captioned:
        writer.writerow((record.label, record.alt_text))
    return out_io.getvalue()
