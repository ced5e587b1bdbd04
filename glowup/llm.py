"""Anthropic Messages API client used by the generation pipeline."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import anthropic
import httpx
import structlog

from .config import Settings, get_settings, is_usable_credential
from .errors import GenerationError, MissingCredential, Unauthorized, UnparsableResponse, Unreachable

logger = structlog.get_logger(__name__)

AUTH_ERROR_MARKER = "authentication_error"

Invoker = Callable[[str, str, Optional[str], int], Awaitable[str]]


def _build_client(
    credential: str,
    settings: Settings,
    http_client: httpx.AsyncClient | None,
) -> anthropic.AsyncAnthropic:
    """Create an SDK client bound to *credential*; retries stay with the caller."""

    return anthropic.AsyncAnthropic(
        api_key=credential,
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        max_retries=0,
        default_headers={"anthropic-version": settings.anthropic_version},
        http_client=http_client,
    )


def _first_block_text(message: Any) -> str:
    """Return ``content[0].text`` of a messages response."""

    content = getattr(message, "content", None)
    if not isinstance(content, list) or not content:
        raise UnparsableResponse("Model response has no content blocks")
    text = getattr(content[0], "text", None)
    if not isinstance(text, str):
        raise UnparsableResponse("Model response does not start with a text block")
    return text


def _classify_status_error(exc: anthropic.APIStatusError) -> GenerationError:
    body = exc.response.text
    if isinstance(exc, anthropic.AuthenticationError) or AUTH_ERROR_MARKER in body:
        return Unauthorized()
    return Unreachable(exc.status_code, body)


async def invoke(
    system_prompt: str,
    user_prompt: str,
    credential: str | None,
    max_tokens: int,
    *,
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    """Send one messages request and return the first content block verbatim.

    There is no retry here; the caller decides what to do with a failure.
    An injected *http_client* is left open for its owner.
    """

    if not is_usable_credential(credential):
        raise MissingCredential()

    settings = settings or get_settings()
    client = _build_client(credential.strip(), settings, http_client)
    try:
        message = await client.messages.create(
            model=settings.model,
            max_tokens=max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
    except anthropic.APIConnectionError as exc:
        logger.warning("model_request_failed", error=str(exc), error_type=type(exc).__name__)
        raise Unreachable(None, str(exc)) from exc
    except anthropic.APIStatusError as exc:
        error = _classify_status_error(exc)
        logger.warning("model_request_rejected", status_code=exc.status_code, error_code=error.code.value)
        raise error from exc
    except anthropic.APIResponseValidationError as exc:
        raise UnparsableResponse("Model response body does not match the messages schema") from exc
    finally:
        if http_client is None:
            await client.close()

    return _first_block_text(message)
