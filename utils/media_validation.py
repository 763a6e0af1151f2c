"""Helpers for reading uploaded image files."""

from typing import List, Sequence

from fastapi import HTTPException, UploadFile

from models.image_record import UploadedImage


async def read_upload(upload: UploadFile) -> UploadedImage:
    """Read an uploaded file into memory along with its declared type."""
    if not upload.filename:
        raise HTTPException(status_code=400, detail="Uploaded file must have a filename.")
    try:
        data = await upload.read()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=400, detail=f"Unable to read uploaded file {upload.filename}.") from exc
    finally:
        await upload.close()
    return UploadedImage(filename=upload.filename, content_type=upload.content_type, data=data)


async def read_uploads(uploads: Sequence[UploadFile]) -> List[UploadedImage]:
    """Read every upload, preserving the order the client sent them in."""
    return [await read_upload(upload) for upload in uploads]
