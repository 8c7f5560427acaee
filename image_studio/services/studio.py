"""Request orchestration between the bot and the Gemini gateway."""

import logging
from dataclasses import replace
from typing import Protocol

from image_studio.config import PRODUCT_SHOT_PROMPT, StudioConfig
from image_studio.errors import (
    GENERIC_UPSTREAM_MESSAGE,
    DecodeError,
    StudioError,
    ValidationError,
)
from image_studio.models import EncodedImage, Mode, RequestState
from image_studio.utils.file_handler import encode_image

logger = logging.getLogger(__name__)

MISSING_IMAGE_MESSAGE = "Please upload an image first."
MISSING_PROMPT_MESSAGE = "Please enter an editing prompt."


class ImageGateway(Protocol):
    async def transform(self, data: str, media_type: str, prompt: str) -> str: ...


# Transitions. Each returns a new RequestState and never touches the gateway.


def validate_submission(state: RequestState) -> None:
    """Raise ValidationError if the state cannot be submitted."""
    if state.source_image is None:
        raise ValidationError(MISSING_IMAGE_MESSAGE)
    if state.mode is Mode.EDIT and not state.instruction.strip():
        raise ValidationError(MISSING_PROMPT_MESSAGE)


def resolve_prompt(state: RequestState, product_shot_prompt: str = PRODUCT_SHOT_PROMPT) -> str:
    """Instruction actually sent for the current mode."""
    if state.mode is Mode.PRODUCT_SHOT:
        return product_shot_prompt
    return state.instruction


def begin_submission(state: RequestState) -> RequestState:
    return replace(state, busy=True, result_image=None, error_message=None)


def complete_with_result(state: RequestState, payload: str) -> RequestState:
    return replace(state, busy=False, result_image=payload, error_message=None)


def complete_with_error(state: RequestState, message: str) -> RequestState:
    return replace(state, busy=False, result_image=None, error_message=message)


def with_source_image(state: RequestState, image: EncodedImage) -> RequestState:
    """New upload replaces the source and drops any previous outcome."""
    return replace(state, source_image=image, result_image=None, error_message=None)


class ImageStudio:
    """Owns one session's RequestState and drives submissions.

    Failures never escape: they end up in ``state.error_message``.
    """

    def __init__(
        self,
        gateway: ImageGateway,
        config: StudioConfig | None = None,
        product_shot_prompt: str = PRODUCT_SHOT_PROMPT,
    ):
        self.gateway = gateway
        self.config = config or StudioConfig()
        self.product_shot_prompt = product_shot_prompt
        self.state = RequestState()

    def check_upload(self, raw: bytes, media_type: str) -> None:
        """Enforce accepted media types and the size ceiling.

        Raises:
            ValidationError: If the file is not acceptable
        """
        if media_type not in self.config.accepted_media_types:
            raise ValidationError(
                "Unsupported image type. Please upload a PNG, JPG or WEBP image."
            )
        if len(raw) > self.config.max_upload_bytes:
            limit_mb = self.config.max_upload_bytes / (1024 * 1024)
            raise ValidationError(f"Image is too large. Maximum size is {limit_mb:g}MB.")

    def upload(self, raw: bytes, media_type: str, name: str) -> RequestState:
        """Accept a new source image."""
        if self.state.busy:
            logger.info("Upload ignored: request in flight")
            return self.state

        try:
            self.check_upload(raw, media_type)
            image = encode_image(raw, media_type, name)
        except DecodeError as e:
            logger.error(f"Failed to encode upload {name}: {e.detail}")
            self.state = complete_with_error(self.state, e.user_message)
            return self.state
        except ValidationError as e:
            logger.info(f"Upload rejected ({name}, {media_type}, {len(raw)} bytes): {e.user_message}")
            self.state = complete_with_error(self.state, e.user_message)
            return self.state

        self.state = with_source_image(self.state, image)
        logger.info(f"Source image set: {name} ({media_type}, {len(raw)} bytes)")
        return self.state

    def set_mode(self, mode: Mode) -> RequestState:
        # Uploaded image and typed instruction both survive a mode switch
        self.state = replace(self.state, mode=Mode(mode))
        return self.state

    def set_instruction(self, text: str) -> RequestState:
        self.state = replace(self.state, instruction=text)
        return self.state

    async def submit(self) -> RequestState:
        """Run one transformation request.

        A call made while another request is in flight is a no-op.
        """
        if self.state.busy:
            logger.info("Submit ignored: request already in flight")
            return self.state

        try:
            validate_submission(self.state)
        except ValidationError as e:
            self.state = complete_with_error(self.state, e.user_message)
            return self.state

        prompt = resolve_prompt(self.state, self.product_shot_prompt)
        image = self.state.source_image
        self.state = begin_submission(self.state)
        logger.info(f"Submitting {image.name} in {self.state.mode.value} mode")

        try:
            payload = await self.gateway.transform(image.data, image.media_type, prompt)
        except StudioError as e:
            logger.error(f"Transformation failed: {type(e).__name__}: {e.detail or e.user_message}")
            self.state = complete_with_error(self.state, e.user_message)
        except Exception as e:
            logger.error(f"Unexpected transformation failure: {e}", exc_info=True)
            self.state = complete_with_error(self.state, GENERIC_UPSTREAM_MESSAGE)
        else:
            self.state = complete_with_result(self.state, payload)
            logger.info("Transformation completed")
        return self.state
