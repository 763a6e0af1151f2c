"""Controllers translating HTTP requests into image collection intents."""

from typing import Any, Dict, List

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import RedirectResponse, Response

from services.collection import ImageCollection
from services.errors import NothingToExport, RecordNotFound
from utils.media_validation import read_uploads

CSV_FILENAME = "alt-text.csv"


def _collection(request: Request) -> ImageCollection:
    collection = getattr(request.app.state, "collection", None)
    if collection is None:
        raise HTTPException(status_code=500, detail="Image collection not initialized.")
    return collection


def list_images(request: Request) -> Dict[str, Any]:
    """Return the current collection state."""
    return _collection(request).snapshot()


async def add_files(request: Request, files: List[UploadFile]) -> Dict[str, Any]:
    """Add uploaded files to the collection.

    Non-image files are ignored; if nothing was an image the state carries
    an overall message instead of an error status.
    """
    collection = _collection(request)
    uploads = await read_uploads(files)
    added = collection.add_files(uploads)
    return {"added": [record.id for record in added], **collection.snapshot()}


async def add_url(request: Request, url: str) -> Dict[str, Any]:
    """Add a remote image and caption it straight away.

    Raises:
        HTTPException(400) if the text is not an http(s) URL.
    """
    collection = _collection(request)
    try:
        record = collection.add_url(url)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    await collection.process_one(record.id)
    return {"image": record.to_dict(), **collection.snapshot()}


def remove_image(request: Request, image_id: str) -> Dict[str, Any]:
    collection = _collection(request)
    try:
        collection.remove(image_id)
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return collection.snapshot()


def clear_images(request: Request) -> Dict[str, Any]:
    collection = _collection(request)
    removed = collection.clear()
    return {"removed": removed, **collection.snapshot()}


async def generate_batch(request: Request) -> Dict[str, Any]:
    """Caption every unresolved image in order and return the final state."""
    collection = _collection(request)
    attempted = await collection.process_batch()
    return {"attempted": attempted, **collection.snapshot()}


async def regenerate(request: Request, image_id: str) -> Dict[str, Any]:
    """Re-run captioning for one image, discarding its previous result.

    Raises:
        HTTPException(404) if the image id is unknown.
    """
    collection = _collection(request)
    try:
        record = await collection.process_one(image_id)
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"image": record.to_dict(), **collection.snapshot()}


def export_csv(request: Request) -> Response:
    """Return the CSV export as a downloadable attachment.

    Raises:
        HTTPException(400) if there is nothing to export.
    """
    collection = _collection(request)
    try:
        document = collection.export_csv()
    except NothingToExport as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(
        content=document,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


def get_preview(request: Request, image_id: str) -> Response:
    """Serve a local image's preview bytes, or redirect to a remote image's URL.

    Raises:
        HTTPException(404) if the image or its preview is not found.
    """
    collection = _collection(request)
    try:
        record = collection.get(image_id)
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    if not record.is_local:
        return RedirectResponse(url=record.preview_reference, status_code=307)

    try:
        preview = collection.previews.get(record.preview_reference)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Preview not available for this image") from exc
    return Response(content=preview.content, media_type=preview.media_type)
