"""Records shared by intake, the orchestrator and the bot."""

from dataclasses import dataclass
from enum import Enum

# The service output is always labelled as PNG when rendered.
RESULT_MEDIA_TYPE = "image/png"


def to_data_url(payload: str, media_type: str = RESULT_MEDIA_TYPE) -> str:
    """Build a displayable data URL from a base64 payload."""
    return f"data:{media_type};base64,{payload}"


class Mode(str, Enum):
    """Transformation mode selected by the user."""

    EDIT = "edit"  # Freeform edit via text prompt
    PRODUCT_SHOT = "product"  # Clothing photo -> e-commerce product shot


@dataclass(frozen=True)
class EncodedImage:
    """Image as base64 text plus its media type and original file name."""

    data: str
    media_type: str
    name: str


@dataclass(frozen=True)
class RequestState:
    """State of one studio session.

    result_image holds the raw base64 payload returned by the gateway.
    result_image and error_message are never both set.
    """

    mode: Mode = Mode.EDIT
    instruction: str = ""
    source_image: EncodedImage | None = None
    result_image: str | None = None
    busy: bool = False
    error_message: str | None = None

    @property
    def phase(self) -> str:
        if self.busy:
            return "submitting"
        if self.result_image is not None:
            return "result"
        if self.error_message is not None:
            return "error"
        return "idle"

    @property
    def can_submit(self) -> bool:
        return not self.busy and self.source_image is not None

    @property
    def result_data_url(self) -> str | None:
        if self.result_image is None:
            return None
        return to_data_url(self.result_image)
