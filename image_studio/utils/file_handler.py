"""Image intake: encoding uploads and pulling them out of Telegram messages."""

import base64
import binascii
import logging
import mimetypes
from dataclasses import dataclass

from aiogram import Bot
from aiogram.types import Message

from image_studio.errors import DecodeError
from image_studio.models import RESULT_MEDIA_TYPE, EncodedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """Raw file received from the user, before encoding."""

    raw: bytes
    media_type: str
    name: str


def detect_mime_type(raw: bytes) -> str | None:
    """Detect image MIME type from magic bytes."""
    if raw.startswith(b"\x89PNG"):
        return "image/png"
    if raw.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if raw.startswith(b"RIFF") and raw.startswith(b"WEBP", 8):
        return "image/webp"
    if raw.startswith(b"GIF"):
        return "image/gif"
    return None


def encode_image(raw: bytes, media_type: str, name: str) -> EncodedImage:
    """Encode raw image bytes as an EncodedImage.

    No media type or size policy is applied here; callers do that.

    Raises:
        DecodeError: If the payload is empty or not bytes
    """
    if not isinstance(raw, (bytes, bytearray)):
        raise DecodeError(detail=f"Expected bytes, got {type(raw).__name__}")
    if not raw:
        raise DecodeError(detail=f"Empty file: {name}")

    data = base64.b64encode(bytes(raw)).decode("ascii")
    return EncodedImage(data=data, media_type=media_type, name=name)


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into media type and decoded bytes.

    Raises:
        DecodeError: If the URL is not a base64 data URL
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise DecodeError(detail="Malformed data URL")

    media_type = header[len("data:") : -len(";base64")] or RESULT_MEDIA_TYPE
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(detail=f"Invalid base64 payload: {e}") from e
    return media_type, raw


async def download_photo(bot: Bot, message: Message) -> UploadedFile | None:
    """Download the largest size of a Telegram photo into memory.

    Returns:
        UploadedFile, or None if the message has no photo
    """
    if not message.photo:
        return None

    photo = message.photo[-1]
    buffer = await bot.download(photo.file_id)
    raw = buffer.read() if buffer is not None else b""
    logger.info(f"Photo downloaded: {photo.file_unique_id}, size: {len(raw)}")

    # Telegram re-encodes compressed photos as JPEG
    return UploadedFile(
        raw=raw,
        media_type=detect_mime_type(raw) or "image/jpeg",
        name=f"photo_{photo.file_unique_id}.jpg",
    )


async def download_document(bot: Bot, message: Message) -> UploadedFile | None:
    """Download an image sent as a file (uncompressed) into memory.

    Returns:
        UploadedFile, or None if the message has no image document
    """
    document = message.document
    if document is None:
        return None

    mime_type = document.mime_type or mimetypes.guess_type(document.file_name or "")[0] or ""
    if not mime_type.startswith("image/"):
        logger.info(f"Ignoring non-image document: {document.file_name} ({mime_type})")
        return None

    buffer = await bot.download(document.file_id)
    raw = buffer.read() if buffer is not None else b""
    logger.info(f"Document downloaded: {document.file_name}, size: {len(raw)}")

    return UploadedFile(
        raw=raw,
        media_type=mime_type,
        name=document.file_name or f"image_{document.file_unique_id}",
    )
