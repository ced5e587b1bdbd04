"""Exceptions raised by the generation pipeline."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Serializable identifier for each generation failure."""

    MISSING_CREDENTIAL = "missing_credential"
    UNAUTHORIZED = "unauthorized"
    UNREACHABLE = "unreachable"
    UNPARSABLE_RESPONSE = "unparsable_response"
    OTHER = "other"


class GlowUpError(Exception):
    """Base exception for the GlowUp backend."""


class GenerationError(GlowUpError):
    """Base class for every classified generation failure."""

    code: ErrorCode = ErrorCode.OTHER
    default_message = "Failed to generate"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredential(GenerationError):
    """No usable API key was supplied; no request was sent."""

    code = ErrorCode.MISSING_CREDENTIAL
    default_message = "Please enter a valid Anthropic API key in the Profile section above"


class Unauthorized(GenerationError):
    """The model endpoint rejected the API key."""

    code = ErrorCode.UNAUTHORIZED
    default_message = "Invalid API key. Please check your Anthropic API key in the Profile section above."


class Unreachable(GenerationError):
    """The endpoint answered with a non-success status or never answered."""

    code = ErrorCode.UNREACHABLE

    def __init__(self, status_code: int | None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Anthropic request failed: {body}" if body else "Anthropic request failed"
        else:
            message = f"Anthropic error {status_code}: {body}"
        super().__init__(message)


class UnparsableResponse(GenerationError):
    """The model output did not match the requested shape."""

    code = ErrorCode.UNPARSABLE_RESPONSE
    default_message = "Model did not return JSON"


class GenerationFailed(GenerationError):
    """Any other failure while producing an artifact."""

    code = ErrorCode.OTHER


class GenerationInFlight(GlowUpError):
    """A generation for the same artifact kind is already pending."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"A {kind} generation is already in progress")


class ExportError(GlowUpError):
    """The rasterized report could not be turned into a document."""


class IncompleteProfile(GlowUpError):
    """The profile lacks a field the requested operation needs."""
