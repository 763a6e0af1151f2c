"""FastAPI routes for the image collection."""

from typing import List

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers import collection_controller

router = APIRouter(prefix="/api/images", tags=["images"])


class UrlPayload(BaseModel):
    url: str


@router.get("")
async def list_images_route(request: Request):
    return collection_controller.list_images(request)


@router.post("", summary="Add uploaded image files")
async def add_files_route(request: Request, files: List[UploadFile] = File(...)):
    try:
        return await collection_controller.add_files(request, files)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/url", summary="Add an image by URL and caption it")
async def add_url_route(request: Request, payload: UrlPayload):
    try:
        return await collection_controller.add_url(request, payload.url)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/generate", summary="Caption every image without a result")
async def generate_route(request: Request):
    try:
        return await collection_controller.generate_batch(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/export.csv", summary="Download generated alt text as CSV")
async def export_route(request: Request):
    return collection_controller.export_csv(request)


@router.delete("")
async def clear_route(request: Request):
    return collection_controller.clear_images(request)


@router.delete("/{image_id}")
async def remove_route(request: Request, image_id: str):
    return collection_controller.remove_image(request, image_id)


@router.post("/{image_id}/regenerate", summary="Caption one image again")
async def regenerate_route(request: Request, image_id: str):
    try:
        return await collection_controller.regenerate(request, image_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{image_id}/preview")
async def preview_route(request: Request, image_id: str):
    """Return the preview for the specified image id."""
    return collection_controller.get_preview(request, image_id)
