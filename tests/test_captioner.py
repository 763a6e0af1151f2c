import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from services.errors import ApiError, EmptyCompletion
from services.openai.captioner import AltTextCaptioner
from services.openai.response_utils import extract_error_message, extract_first_text, extract_response_error


def _text_response(*texts):
    content = [SimpleNamespace(type="output_text", text=text) for text in texts]
    return SimpleNamespace(
        output=[
            SimpleNamespace(type="reasoning", content=None),
            SimpleNamespace(type="message", content=content),
        ],
        usage=SimpleNamespace(input_tokens=812, output_tokens=14),
    )


class FakeResponses:
    def __init__(self, result):
        self.result = result
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _captioner(result):
    responses = FakeResponses(result)
    return AltTextCaptioner(SimpleNamespace(responses=responses), model="test-model"), responses


def test_caption_sends_prompt_and_inline_image_in_one_user_message():
    captioner, responses = _captioner(_text_response("A dog catching a frisbee."))

    text = asyncio.run(captioner.caption("aGVsbG8=", "image/png"))

    assert text == "A dog catching a frisbee."
    (request,) = responses.requests
    assert request["model"] == "test-model"
    (message,) = request["input"]
    assert message["role"] == "user"
    prompt_part, image_part = message["content"]
    assert prompt_part["type"] == "input_text"
    assert "125 characters" in prompt_part["text"]
    assert image_part == {"type": "input_image", "image_url": "data:image/png;base64,aGVsbG8="}


def test_caption_returns_first_segment_verbatim():
    captioner, _ = _captioner(_text_response("  Two people hiking.  ", "ignored"))
    assert asyncio.run(captioner.caption("eA==", "image/jpeg")) == "  Two people hiking.  "


def test_caption_without_output_is_empty_completion():
    captioner, _ = _captioner(SimpleNamespace(output=[], usage=None))
    with pytest.raises(EmptyCompletion):
        asyncio.run(captioner.caption("eA==", "image/jpeg"))


def test_caption_api_status_error_carries_server_message():
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    response = httpx.Response(400, request=request)
    error = openai.BadRequestError(
        "Error code: 400",
        response=response,
        body={"error": {"message": "Invalid image data", "type": "invalid_request_error"}},
    )
    captioner, _ = _captioner(error)

    with pytest.raises(ApiError, match="Invalid image data") as excinfo:
        asyncio.run(captioner.caption("eA==", "image/jpeg"))
    assert excinfo.value.describe().startswith("ApiError: ")


def test_caption_connection_error_is_api_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    captioner, _ = _captioner(openai.APIConnectionError(request=request))
    with pytest.raises(ApiError):
        asyncio.run(captioner.caption("eA==", "image/jpeg"))


def test_extract_first_text_skips_non_message_items():
    assert extract_first_text(SimpleNamespace(output=None)) is None
    assert extract_first_text(_text_response("first", "second")) == "first"


def test_extract_error_message_falls_back_to_exception_text():
    assert extract_error_message(RuntimeError("boom")) == "boom"


def test_caption_failed_response_is_api_error_with_server_message():
    failed = SimpleNamespace(
        output=[],
        status="failed",
        error=SimpleNamespace(code="server_error", message="The model crashed"),
        usage=None,
    )
    captioner, _ = _captioner(failed)

    with pytest.raises(ApiError, match="The model crashed") as excinfo:
        asyncio.run(captioner.caption("eA==", "image/jpeg"))
    assert not isinstance(excinfo.value, EmptyCompletion)


def test_caption_failed_status_without_error_details_is_api_error():
    captioner, _ = _captioner(SimpleNamespace(output=[], status="failed", error=None, usage=None))
    with pytest.raises(ApiError):
        asyncio.run(captioner.caption("eA==", "image/jpeg"))


def test_extract_response_error_ignores_completed_responses():
    assert extract_response_error(_text_response("ok")) is None
    assert extract_response_error(SimpleNamespace(status="completed", error=None)) is None
