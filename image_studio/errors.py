"""Error types raised by intake, the orchestrator and the Gemini gateway."""

GENERIC_UPSTREAM_MESSAGE = "Failed to generate image due to an API error. Please try again later."


class StudioError(Exception):
    """Base error carrying a message that is safe to show to the user."""

    default_message = "An unknown error occurred."

    def __init__(self, message: str | None = None, *, detail: str | None = None):
        self.user_message = message or self.default_message
        self.detail = detail
        super().__init__(self.user_message)


class DecodeError(StudioError):
    """Uploaded file could not be read or encoded."""

    default_message = "Failed to read the image file."


class ValidationError(StudioError):
    """Missing or unacceptable user input."""

    default_message = "Invalid input."


class ConfigurationError(StudioError):
    """Gemini credential is not configured."""

    default_message = "Gemini API Key is not configured. Cannot make API requests."


class GatewayError(StudioError):
    """Remote generation failed. Users only see the generic message."""

    default_message = GENERIC_UPSTREAM_MESSAGE

    def __init__(self, detail: str | None = None):
        super().__init__(GENERIC_UPSTREAM_MESSAGE, detail=detail)


class NoImageInResponse(GatewayError):
    """The call succeeded but the response carried no inline image."""


class UpstreamError(GatewayError):
    """Network or service-level failure from the Gemini SDK."""
