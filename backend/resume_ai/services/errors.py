"""
Error taxonomy for resume generation and revision.

Every failure a caller can observe is one of these classes. Each carries the
HTTP status the API answers with and a user-facing message; the FastAPI
handlers in ``main.py`` turn them into ``{"error": message}`` bodies and the
HTTP client turns those bodies back into the same classes.
"""
from typing import Optional


class ResumeAIError(Exception):
    """Base class for failures surfaced to API callers."""
    status_code: int = 500
    kind: str = "UnknownError"
    default_message: str = "An unexpected error occurred. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(ResumeAIError):
    """Credentials or settings missing. No model call was attempted."""
    status_code = 500
    kind = "ConfigurationError"
    default_message = "Gemini API key not configured. Please set GEMINI_API_KEY in your .env file."


class ValidationError(ResumeAIError):
    """Caller input rejected before any model call."""
    status_code = 400
    kind = "ValidationError"
    default_message = "Invalid request."


class UpstreamFormatError(ResumeAIError):
    """Model reply could not be parsed or does not match the stage contract."""
    status_code = 500
    kind = "UnexpectedFormat"
    default_message = "AI returned an unexpected format. Please try again."


class EmptyResponseError(UpstreamFormatError):
    kind = "EmptyResponse"
    default_message = "No response received from AI. Please try again."


class IncompleteDocumentError(UpstreamFormatError):
    kind = "IncompleteDocument"
    default_message = "AI generated an incomplete resume. Please try again."


class AuthFailureError(ResumeAIError):
    status_code = 401
    kind = "AuthFailure"
    default_message = "Invalid API key. Please check your GEMINI_API_KEY in .env."


class RateLimitedError(ResumeAIError):
    status_code = 429
    kind = "RateLimited"
    default_message = "Rate limit exceeded. Please wait a moment and try again."


class TransportFailureError(ResumeAIError):
    status_code = 502
    kind = "TransportFailure"
    default_message = "Could not reach the AI service. Please try again."


class UnknownError(ResumeAIError):
    pass


# Orchestrator gating errors. These signal a caller bug, not a failed stage,
# and are never stored as the session error.

class StageOrderError(RuntimeError):
    """A stage was requested before its prerequisite stage completed."""


class StageInProgressError(RuntimeError):
    """An action was requested while another one is still in flight."""


def describe_validation_errors(errors: list) -> str:
    """Turn pydantic error dicts into one readable sentence for the caller."""
    if not errors:
        return ValidationError.default_message
    if any(err.get("type", "").startswith("union_tag") for err in errors):
        return "Invalid stage. Must be 1, 2, or 3."

    err = errors[0]
    ctx_error = (err.get("ctx") or {}).get("error")
    if err.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)

    # Drop the "body" prefix FastAPI adds and the union tag that may follow it
    loc = [str(part) for part in err.get("loc", ())]
    if loc[:1] == ["body"]:
        loc = loc[1:]
    if loc[:1] in (["1"], ["2"], ["3"]):
        loc = loc[1:]
    field = ".".join(loc)
    if err.get("type") == "missing" and field:
        return f"{field} is required."
    return f"{field}: {err.get('msg')}" if field else str(err.get("msg"))


_RESPONSE_ERRORS = {
    cls.kind: cls
    for cls in (
        ConfigurationError, ValidationError, UpstreamFormatError, EmptyResponseError,
        IncompleteDocumentError, AuthFailureError, RateLimitedError,
        TransportFailureError, UnknownError,
    )
}


def error_from_response(status_code: int, body: dict) -> ResumeAIError:
    """Rebuild the error an API error body describes.

    Bodies carry ``error`` (the message) and ``kind``. Bodies from other
    servers may lack ``kind``; the status code picks the class then.
    """
    message = body.get("error") if isinstance(body, dict) else None
    kind = body.get("kind") if isinstance(body, dict) else None
    error_class = _RESPONSE_ERRORS.get(kind)
    if error_class is None:
        error_class = {
            400: ValidationError,
            401: AuthFailureError,
            422: ValidationError,
            429: RateLimitedError,
            502: TransportFailureError,
        }.get(status_code, UnknownError)
    return error_class(message)
