"""Alt text generation via OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from services.errors import ApiError, EmptyCompletion
from services.openai.alt_text_prompts import build_alt_text_prompt
from services.openai.response_utils import (
    extract_error_message,
    extract_first_text,
    extract_response_error,
    extract_usage,
)
from utils.settings import DEFAULT_MODEL

LOGGER = logging.getLogger(__name__)


class AltTextCaptioner:
    """Send one image plus the alt text instruction and return the generated text."""

    def __init__(self, client: AsyncOpenAI, model: str = DEFAULT_MODEL, prompt: Optional[str] = None) -> None:
        """Initialize the captioner.

        Args:
            client: Async OpenAI client used for every request.
            model: Model name to request.
            prompt: Optional instruction override; defaults to the accessibility prompt.
        """
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model
        self.prompt = prompt or build_alt_text_prompt()

    def _build_input(self, image_b64: str, mime_type: str) -> List[Dict[str, Any]]:
        """Build a single user message with the instruction and inline image."""
        return [
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": self.prompt},
                    {"type": "input_image", "image_url": f"data:{mime_type};base64,{image_b64}"},
                ],
            }
        ]

    async def caption(self, image_b64: str, mime_type: str) -> str:
        """Return the first generated text segment verbatim.

        Raises:
            ApiError: If the endpoint rejects the request, cannot be reached, or
                returns a failed response with an error payload.
            EmptyCompletion: If the response carries no generated text.
        """
        start_time = time.time()
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=self._build_input(image_b64, mime_type),
            )
        except openai.APIError as exc:
            message = extract_error_message(exc)
            LOGGER.error("Error during OpenAI Responses API call: %s", message)
            raise ApiError(message) from exc

        failure = extract_response_error(response)
        if failure:
            LOGGER.error("OpenAI response reported an error: %s", failure)
            raise ApiError(failure)

        text = extract_first_text(response)
        if not text:
            LOGGER.error("No output text in OpenAI response: %r", response)
            raise EmptyCompletion("The model returned no alt text.")

        usage = extract_usage(response)
        LOGGER.info(
            "Alt text generated in %.2fs (%s input / %s output tokens)",
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return text
