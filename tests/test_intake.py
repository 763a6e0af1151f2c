import pytest

from models.image_record import SourceKind, UploadedImage
from services.errors import NoValidImages
from services.intake import ingest_files, ingest_url, is_image_type
from services.preview_store import PreviewStore


def test_is_image_type():
    assert is_image_type("image/png")
    assert is_image_type("IMAGE/JPEG; charset=binary")
    assert not is_image_type("text/plain")
    assert not is_image_type("")
    assert not is_image_type(None)


def test_ingest_files_keeps_only_images_in_order(png_bytes):
    previews = PreviewStore()
    files = [
        UploadedImage("a.png", "image/png", png_bytes),
        UploadedImage("notes.txt", "text/plain", b"hello"),
        UploadedImage("b.gif", "image/gif", b"not-really-a-gif"),
    ]
    records = ingest_files(files, previews)

    assert [r.label for r in records] == ["a.png", "b.gif"]
    assert len({r.id for r in records}) == 2
    assert all(r.source_kind is SourceKind.LOCAL for r in records)
    assert records[0].mime_type == "image/png"
    assert records[0].payload == png_bytes
    assert previews.live_count == 2
    # decodable images get a PNG thumbnail, undecodable ones keep their bytes
    assert previews.get(records[0].preview_reference).media_type == "image/png"
    assert previews.get(records[1].preview_reference).content == b"not-really-a-gif"


def test_ingest_files_all_non_images_signals_no_valid_images():
    previews = PreviewStore()
    with pytest.raises(NoValidImages):
        ingest_files([UploadedImage("a.pdf", "application/pdf", b"%PDF")], previews)
    assert previews.live_count == 0


def test_ingest_files_empty_input_is_not_an_error():
    assert ingest_files([], PreviewStore()) == []


def test_ingest_url_defers_mime_and_previews_from_url():
    record = ingest_url("  https://x.test/img.jpg ")
    assert record.source_kind is SourceKind.REMOTE
    assert record.payload == "https://x.test/img.jpg"
    assert record.preview_reference == "https://x.test/img.jpg"
    assert record.label == "https://x.test/img.jpg"
    assert record.mime_type is None
    assert record.alt_text == "" and record.status_error == ""


@pytest.mark.parametrize("text", ["", "not a url", "ftp://x.test/a.png", "https://"])
def test_ingest_url_rejects_non_http_urls(text):
    with pytest.raises(ValueError):
        ingest_url(text)
