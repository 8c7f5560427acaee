"""Google Gemini client for image transformation."""

import asyncio
import base64
import binascii
import logging
from typing import Any

from google import genai
from google.genai import types

from image_studio.config import GeminiConfig
from image_studio.errors import (
    ConfigurationError,
    DecodeError,
    NoImageInResponse,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class GeminiClient:
    """Client for Google Gemini API.

    Every transformation is exactly one ``generate_content`` call carrying the
    source image and an instruction, with an image-only response modality.
    """

    def __init__(self, config: GeminiConfig, client: Any | None = None):
        """Initialize Gemini client.

        Args:
            config: Gemini configuration with the API key
            client: Prebuilt ``genai.Client``-compatible object (used in tests)
        """
        self.config = config
        self.client = client
        if self.client is None and config.is_configured:
            self.client = genai.Client(api_key=config.api_key)

        if not config.is_configured:
            logger.error("Gemini API key not set. Image transformation is disabled.")
        else:
            logger.info(f"Gemini Client initialized: model={self.config.model}")

    async def transform(self, data: str, media_type: str, prompt: str) -> str:
        """Send an image and an instruction, return the generated image.

        Args:
            data: Base64-encoded source image
            media_type: MIME type of the source image
            prompt: Instruction text

        Returns:
            Base64 payload of the first inline image in the response

        Raises:
            ConfigurationError: If no API key is configured
            DecodeError: If ``data`` is not valid base64
            NoImageInResponse: If the response carries no image
            UpstreamError: On any API error
        """
        if not self.config.is_configured or self.client is None:
            raise ConfigurationError()

        try:
            image_bytes = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(detail=f"Source image is not valid base64: {e}") from e

        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(data=image_bytes, mime_type=media_type),
                    types.Part.from_text(text=prompt),
                ],
            ),
        ]
        generate_content_config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
        )

        try:
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None, self._generate_sync, contents, generate_content_config
            )
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}", exc_info=True)
            raise UpstreamError(detail=str(e)) from e

        payload = extract_image_payload(response)
        if payload is None:
            logger.error("No image data was found in the Gemini API response")
            raise NoImageInResponse(detail="Response contained no inline image part")

        logger.info(f"Gemini returned image payload: {len(payload)} base64 chars")
        return payload

    def _generate_sync(
        self,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
    ):
        """Generate content (synchronous)."""
        return self.client.models.generate_content(
            model=self.config.model,
            contents=contents,
            config=config,
        )


def extract_image_payload(response: Any) -> str | None:
    """Return the first part carrying inline data, as base64.

    The SDK usually hands back raw bytes, which get encoded; string payloads
    are already base64 and pass through untouched. A part with inline data
    but no bytes yields an empty payload.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is None:
            continue
        data = inline_data.data or b""
        if isinstance(data, str):
            return data
        return base64.b64encode(data).decode("ascii")
    return None
