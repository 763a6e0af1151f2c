"""Utilities for reading Responses API payloads and errors."""

from typing import Any, Dict, Optional


def extract_first_text(response: Any) -> Optional[str]:
    """Return the first output text segment of a responses API payload.

    Args:
        response: Response object returned by `AsyncOpenAI.responses.create`.

    Returns:
        The text of the first `output_text` content part, or None when the
        model produced no message output.
    """
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text":
                return getattr(content, "text", None)
    return None


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "input_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "output_tokens", None) if usage else None,
    }


def extract_error_message(exc: Exception) -> str:
    """Return the server-provided error message for an OpenAI SDK exception."""
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    message = getattr(exc, "message", None) or str(exc)
    status = getattr(exc, "status_code", None)
    return f"{message} (HTTP {status})" if status else message


def extract_response_error(response: Any) -> Optional[str]:
    """Return the error message of a failed response, or None when it succeeded."""
    error = getattr(response, "error", None)
    if error:
        message = getattr(error, "message", None) or str(error)
        code = getattr(error, "code", None)
        return f"{message} ({code})" if code else message
    if getattr(response, "status", None) == "failed":
        return "The response failed without an error message."
    return None
