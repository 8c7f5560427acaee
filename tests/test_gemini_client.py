import asyncio
import base64
from types import SimpleNamespace

import pytest

from image_studio.config import GeminiConfig
from image_studio.errors import (
    GENERIC_UPSTREAM_MESSAGE,
    ConfigurationError,
    DecodeError,
    NoImageInResponse,
    UpstreamError,
)
from image_studio.services.gemini_client import GeminiClient, extract_image_payload

SOURCE = base64.b64encode(b"\x89PNG source").decode("ascii")


def make_response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def image_part(data, mime_type="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def text_part(text):
    return SimpleNamespace(inline_data=None, text=text)


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


def make_client(response=None, error=None, api_key="test-key"):
    models = FakeModels(response=response, error=error)
    client = GeminiClient(GeminiConfig(api_key=api_key), client=SimpleNamespace(models=models))
    return client, models


def test_missing_api_key_fails_before_network_call():
    client, models = make_client(response=make_response(image_part(b"\x00")), api_key=None)

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(client.transform(SOURCE, "image/png", "make it blue"))

    assert models.calls == []
    assert "not configured" in exc_info.value.user_message


def test_request_carries_image_prompt_and_image_modality():
    client, models = make_client(response=make_response(image_part(b"\x00\x00\x00")))

    asyncio.run(client.transform(SOURCE, "image/jpeg", "add a retro filter"))

    assert len(models.calls) == 1
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash-image"
    assert call["config"].response_modalities == ["IMAGE"]

    parts = call["contents"][0].parts
    assert parts[0].inline_data.mime_type == "image/jpeg"
    assert parts[0].inline_data.data == base64.b64decode(SOURCE)
    assert parts[1].text == "add a retro filter"


def test_raw_bytes_are_returned_as_base64():
    client, _ = make_client(response=make_response(image_part(b"\x00\x00\x00")))

    assert asyncio.run(client.transform(SOURCE, "image/png", "edit")) == "AAAA"


def test_string_payload_passes_through_unchanged():
    client, _ = make_client(response=make_response(image_part("AAAA")))

    assert asyncio.run(client.transform(SOURCE, "image/png", "edit")) == "AAAA"


def test_first_inline_image_wins():
    response = make_response(text_part("here you go"), image_part("FIRST"), image_part("SECOND"))

    assert extract_image_payload(response) == "FIRST"


def test_response_without_image_raises_generic_error():
    client, _ = make_client(response=make_response(text_part("I can't do that")))

    with pytest.raises(NoImageInResponse) as exc_info:
        asyncio.run(client.transform(SOURCE, "image/png", "edit"))

    assert exc_info.value.user_message == GENERIC_UPSTREAM_MESSAGE


def test_response_without_candidates():
    assert extract_image_payload(SimpleNamespace(candidates=None)) is None
    assert extract_image_payload(make_response()) is None


def test_sdk_failure_is_wrapped():
    client, _ = make_client(error=RuntimeError("quota exceeded"))

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(client.transform(SOURCE, "image/png", "edit"))

    assert exc_info.value.user_message == GENERIC_UPSTREAM_MESSAGE
    assert "quota exceeded" in exc_info.value.detail
    assert "quota" not in exc_info.value.user_message


def test_invalid_source_payload():
    client, models = make_client(response=make_response(image_part("AAAA")))

    with pytest.raises(DecodeError):
        asyncio.run(client.transform("not base64!", "image/png", "edit"))
    assert models.calls == []


def test_first_inline_part_wins_even_when_empty():
    response = make_response(text_part("here you go"), image_part(None), image_part("SECOND"))

    assert extract_image_payload(response) == ""


def test_empty_inline_payload_is_returned_as_empty_string():
    client, _ = make_client(response=make_response(image_part(b"")))

    assert asyncio.run(client.transform(SOURCE, "image/png", "edit")) == ""


def test_unconfigured_client_builds_no_sdk_client():
    client = GeminiClient(GeminiConfig(api_key=None))

    assert client.client is None
    with pytest.raises(ConfigurationError):
        asyncio.run(client.transform(SOURCE, "image/png", "edit"))
