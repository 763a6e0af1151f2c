import base64
import io
from pathlib import Path
import sys

import httpx
import pytest
from PIL import Image

# Add repository root to path for module imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from models.image_record import UploadedImage
from services.collection import ImageCollection
from services.encoder import ImageEncoder
from services.errors import ApiError
from services.pipeline import AltTextPipeline
from services.preview_store import PreviewStore


class FakeCaptioner:
    """Stand-in for AltTextCaptioner keyed by the decoded image bytes."""

    def __init__(self, results=None, default="A generic picture."):
        self.results = results or {}
        self.default = default
        self.calls = []
        self.collection = None
        self.max_in_flight = 0

    async def caption(self, image_b64, mime_type):
        raw = base64.b64decode(image_b64)
        self.calls.append((raw, mime_type))
        if self.collection is not None:
            in_flight = sum(1 for record in self.collection.records if record.is_processing)
            self.max_in_flight = max(self.max_in_flight, in_flight)
        result = self.results.get(raw, self.default)
        if isinstance(result, Exception):
            raise result
        return result


def make_collection(captioner, handler=None):
    """Build a collection with a real encoder over a mocked HTTP transport."""
    if handler is None:
        handler = lambda request: httpx.Response(404)  # noqa: E731
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    pipeline = AltTextPipeline(ImageEncoder(http_client), captioner)
    collection = ImageCollection(pipeline, PreviewStore())
    captioner.collection = collection
    return collection


@pytest.fixture
def png_bytes():
    image = Image.new("RGB", (320, 200), (200, 30, 30))
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def pet_uploads():
    return [
        UploadedImage(filename="cat.jpg", content_type="image/jpeg", data=b"cat-bytes"),
        UploadedImage(filename="dog.png", content_type="image/png", data=b"dog-bytes"),
    ]


@pytest.fixture
def pet_captioner():
    return FakeCaptioner(
        {
            b"cat-bytes": "A cat sitting on a red sofa.",
            b"dog-bytes": ApiError("model overloaded"),
        }
    )
