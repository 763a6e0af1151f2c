import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.collection_route import router as collection_router
from services.collection import ImageCollection
from services.encoder import ImageEncoder
from services.openai.captioner import AltTextCaptioner
from services.pipeline import AltTextPipeline
from services.preview_store import PreviewStore
from services.thumbnail_generator import ThumbnailGenerator
from utils.settings import AppSettings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


def build_collection(settings: AppSettings, openai_client: AsyncOpenAI, http_client: httpx.AsyncClient) -> ImageCollection:
    """Wire the encoder, captioner and preview store into a fresh collection."""
    size = (settings.preview_size, settings.preview_size)
    previews = PreviewStore(ThumbnailGenerator(max_size=size))
    encoder = ImageEncoder(
        http_client,
        default_mime_type=settings.default_mime_type,
        fetch_timeout=settings.fetch_timeout,
    )
    captioner = AltTextCaptioner(openai_client, model=settings.openai_model)
    return ImageCollection(AltTextPipeline(encoder, captioner), previews)


def create_app(settings: Optional[AppSettings] = None, collection: Optional[ImageCollection] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        settings: Configuration; read from the environment at startup when omitted.
        collection: Prebuilt collection; when given, no clients are created.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Initialize the OpenAI async client, the shared HTTP client for remote
        image downloads and the image collection, and attach them to `app.state`.
        """
        if collection is not None:
            app.state.openai_client = None
            app.state.collection = collection
            yield
            return

        resolved = settings or AppSettings.from_env()
        try:
            openai_client = AsyncOpenAI(api_key=resolved.openai_api_key, base_url=resolved.openai_base_url)
        except Exception as exc:
            raise RuntimeError("Failed to initialize OpenAI Async client") from exc

        http_client = httpx.AsyncClient()
        app.state.openai_client = openai_client
        app.state.collection = build_collection(resolved, openai_client, http_client)
        LOGGER.info("Alt text service ready (model %s)", resolved.openai_model)

        try:
            yield
        finally:
            cleared = app.state.collection.clear()
            LOGGER.info("Released %d images on shutdown", cleared)
            await http_client.aclose()
            await openai_client.close()

    app = FastAPI(lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports OpenAI client presence and collection size.
        """
        state_collection = getattr(request.app.state, "collection", None)
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {
            "ok": state_collection is not None,
            "openai_available": has_openai,
            "images": len(state_collection) if state_collection is not None else 0,
        }

    app.include_router(collection_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
