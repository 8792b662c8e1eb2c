import os
from io import BytesIO

import httpx
import pytest
from PIL import Image

from snapart.config import GenerationSettings
from snapart.schemas import ConstraintProfile, GenerationRequest
from snapart.services.images import fit_image
from snapart.services.multipart import encode_request
from snapart.stability import StabilityClient

TEST_ENDPOINT = "https://api.example.com/v2beta/stable-image/control/structure"


@pytest.fixture
def make_image():
    def _make(width=64, height=48, color=(200, 120, 40), mode="RGB"):
        return Image.new(mode, (width, height), color)

    return _make


@pytest.fixture
def noise_image():
    def _make(width=256, height=256):
        return Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))

    return _make


@pytest.fixture
def image_bytes():
    def _encode(img, fmt="PNG"):
        buf = BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    return _encode


@pytest.fixture
def settings():
    return GenerationSettings(
        stability_api_key="test-key",
        stability_endpoint=TEST_ENDPOINT,
        openai_api_key="openai-key",
        openai_images_endpoint="https://api.example.com/v1/images/generations",
    )


@pytest.fixture
def make_client(settings):
    def _make(handler, endpoint=None):
        if endpoint is not None:
            client_settings = settings.model_copy(update={"stability_endpoint": endpoint})
        else:
            client_settings = settings
        transport = httpx.MockTransport(handler)
        return StabilityClient(client_settings, http_client=httpx.AsyncClient(transport=transport))

    return _make


@pytest.fixture
def payload(make_image):
    fitted = fit_image(make_image(), ConstraintProfile())
    request = GenerationRequest(image=fitted, prompt="A test prompt", control_strength=0.7)
    return encode_request(request)
