"""Application configuration read once from the environment at startup."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MIME_TYPE = "image/jpeg"


class AppSettings(BaseSettings):
    """Configuration injected into the captioner, encoder and collection.

    Attributes:
        openai_api_key: API key for the captioning endpoint (OPENAI_API_KEY).
        openai_model: Model name sent with each captioning request (OPENAI_MODEL).
        openai_base_url: Optional override for the OpenAI-compatible endpoint (OPENAI_BASE_URL).
        fetch_timeout: Timeout in seconds for remote image downloads (ALT_TEXT_FETCH_TIMEOUT).
        default_mime_type: MIME type assumed when a remote server declares none (ALT_TEXT_DEFAULT_MIME).
        preview_size: Max width/height in pixels of local preview thumbnails (ALT_TEXT_PREVIEW_SIZE).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    openai_api_key: str = Field(min_length=1, validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default=DEFAULT_MODEL, validation_alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(default=None, validation_alias="OPENAI_BASE_URL")
    fetch_timeout: float = Field(default=30.0, gt=0, validation_alias="ALT_TEXT_FETCH_TIMEOUT")
    default_mime_type: str = Field(default=DEFAULT_MIME_TYPE, validation_alias="ALT_TEXT_DEFAULT_MIME")
    preview_size: int = Field(default=160, gt=0, validation_alias="ALT_TEXT_PREVIEW_SIZE")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from environment variables and an optional .env file.

        Raises:
            RuntimeError: If a variable is missing or fails validation.
        """
        try:
            return cls()
        except ValidationError as exc:
            raise RuntimeError(f"Invalid alt text service configuration:\n{exc}") from exc
