import asyncio
import base64
from io import BytesIO
from types import SimpleNamespace

import pytest

from image_studio.errors import DecodeError
from image_studio.utils.file_handler import (
    decode_data_url,
    detect_mime_type,
    download_document,
    download_photo,
    encode_image,
)
from image_studio.models import to_data_url

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16
WEBP_BYTES = b"RIFF\x00\x00\x00\x00WEBPVP8 " + b"\x00" * 8


class FakeBot:
    def __init__(self, payload: bytes):
        self.payload = payload
        self.downloaded: list[str] = []

    async def download(self, file_id):
        self.downloaded.append(file_id)
        return BytesIO(self.payload)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (PNG_BYTES, "image/png"),
        (JPEG_BYTES, "image/jpeg"),
        (WEBP_BYTES, "image/webp"),
        (b"GIF89a", "image/gif"),
        (b"plain text", None),
    ],
)
def test_detect_mime_type(raw, expected):
    assert detect_mime_type(raw) == expected


def test_encode_image_produces_base64_payload():
    image = encode_image(PNG_BYTES, "image/png", "shirt.png")

    assert image.data == base64.b64encode(PNG_BYTES).decode("ascii")
    assert image.media_type == "image/png"
    assert image.name == "shirt.png"


def test_encode_image_does_not_enforce_media_type():
    image = encode_image(b"not really an image", "text/plain", "notes.txt")
    assert image.media_type == "text/plain"


def test_encode_image_rejects_empty_payload():
    with pytest.raises(DecodeError) as exc_info:
        encode_image(b"", "image/png", "empty.png")
    assert exc_info.value.user_message == "Failed to read the image file."


def test_data_url_helpers():
    url = to_data_url("AAAA")
    assert url == "data:image/png;base64,AAAA"

    media_type, raw = decode_data_url(url)
    assert media_type == "image/png"
    assert raw == b"\x00\x00\x00"


@pytest.mark.parametrize("url", ["AAAA", "data:image/png,AAAA", "data:image/png;base64,@@@"])
def test_decode_data_url_rejects_malformed(url):
    with pytest.raises(DecodeError):
        decode_data_url(url)


def test_download_photo_takes_largest_size():
    bot = FakeBot(JPEG_BYTES)
    message = SimpleNamespace(
        photo=[
            SimpleNamespace(file_id="small", file_unique_id="s1"),
            SimpleNamespace(file_id="large", file_unique_id="l1"),
        ]
    )

    uploaded = asyncio.run(download_photo(bot, message))

    assert bot.downloaded == ["large"]
    assert uploaded.raw == JPEG_BYTES
    assert uploaded.media_type == "image/jpeg"
    assert uploaded.name == "photo_l1.jpg"


def test_download_photo_without_photo():
    assert asyncio.run(download_photo(FakeBot(b""), SimpleNamespace(photo=None))) is None


def test_download_document_keeps_name_and_type():
    bot = FakeBot(WEBP_BYTES)
    document = SimpleNamespace(
        file_id="doc", file_unique_id="d1", file_name="dress.webp", mime_type="image/webp"
    )

    uploaded = asyncio.run(download_document(bot, SimpleNamespace(document=document)))

    assert uploaded.raw == WEBP_BYTES
    assert uploaded.media_type == "image/webp"
    assert uploaded.name == "dress.webp"


def test_download_document_ignores_non_images():
    bot = FakeBot(b"%PDF")
    document = SimpleNamespace(
        file_id="doc", file_unique_id="d1", file_name="invoice.pdf", mime_type="application/pdf"
    )

    assert asyncio.run(download_document(bot, SimpleNamespace(document=document))) is None
    assert bot.downloaded == []
