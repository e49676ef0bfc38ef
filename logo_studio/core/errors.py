"""Failure taxonomy shared by the relay service and the studio client.

Architectural role:
    Every failure a generation attempt can end in is one `StudioError`
    subclass. The relay renders them as HTTP error bodies, the relay client
    rebuilds them from those bodies, and the studio controller turns them into
    the message shown for the active mode.

Error categories:
    - `InputValidationError`: missing prompt/image, detected before any network call.
    - `TransientUpstreamError`: provider unreachable after the bounded retry.
    - `RateLimitError`: provider quota hit (HTTP 429). Never retried.
    - `ExtractionFailedError`: provider answered without a usable image.
    - `ContentBlockedError`: provider safety filters refused the request.
    - `UpstreamRequestError`: provider rejected the request (non-429 4xx).
    - `ConfigurationError`: missing/invalid settings, fatal at startup.
"""


class StudioError(Exception):
    """Base error carrying a user-facing message and an HTTP mapping."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "The creative engine hit an unexpected obstacle."

    def __init__(self, message: str | None = None, details: str | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict:
        """Return the JSON error body sent by the relay."""
        payload = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class InputValidationError(StudioError):
    code = "INVALID_INPUT"
    status_code = 400
    default_message = "The generation request is incomplete."


class PayloadTooLargeError(StudioError):
    code = "PAYLOAD_TOO_LARGE"
    status_code = 413
    default_message = "The uploaded images are too large. Please use smaller files."


class ConfigurationError(StudioError):
    code = "CONFIGURATION_ERROR"
    status_code = 500
    default_message = "Server API key not configured."


class TransientUpstreamError(StudioError):
    code = "UPSTREAM_UNAVAILABLE"
    status_code = 502
    default_message = "The design engine is temporarily unreachable. Please try again."


class RateLimitError(StudioError):
    code = "RATE_LIMITED"
    status_code = 429
    default_message = "Traffic limit reached. Please wait 60 seconds and try again."


class ExtractionFailedError(StudioError):
    code = "EXTRACTION_FAILED"
    status_code = 502
    default_message = (
        "The design engine responded without a usable image. Please refine your request."
    )


class ContentBlockedError(StudioError):
    code = "CONTENT_BLOCKED"
    status_code = 422
    default_message = "The request was blocked by the model's safety filters."


class UpstreamRequestError(StudioError):
    code = "UPSTREAM_REJECTED"
    status_code = 502
    default_message = "Error generating logo."


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        StudioError,
        InputValidationError,
        PayloadTooLargeError,
        ConfigurationError,
        TransientUpstreamError,
        RateLimitError,
        ExtractionFailedError,
        ContentBlockedError,
        UpstreamRequestError,
    )
}
