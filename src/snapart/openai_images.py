"""
Cliente para la generación de imágenes a partir de texto (OpenAI).

Camino secundario sin foto de origen: no hay ajuste de tamaño ni multipart,
solo una petición JSON y la descarga de la URL devuelta.
"""

import logging

import requests

from snapart.config import GenerationSettings
from snapart.errors import (ImageGenerationFailedError, InvalidResponseError,
                            TransportFailureError)
from snapart.stability import decode_image, parse_endpoint

logger = logging.getLogger(__name__)

SUPPORTED_SIZES = ("256x256", "512x512", "1024x1024")


class OpenAIImagesClient:

    def __init__(self, settings: GenerationSettings):
        self.endpoint = settings.openai_images_endpoint
        self.api_key = settings.openai_api_key
        self.timeout = settings.request_timeout

    def generate_image(self, prompt: str, size: str = "1024x1024") -> bytes:
        """Generate an image from a text prompt and return its bytes."""
        if size not in SUPPORTED_SIZES:
            raise ValueError(f"Unsupported size {size!r}, expected one of {SUPPORTED_SIZES}")
        url = str(parse_endpoint(self.endpoint))

        payload = {
            "prompt": prompt,
            "n": 1,
            "size": size,
            "response_format": "url",
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error contacting the text-to-image service: {e}")
            raise TransportFailureError(str(e)) from e

        if response.status_code != 200:
            raise ImageGenerationFailedError(self._error_message(response), response.status_code)

        try:
            image_url = response.json()["data"][0]["url"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InvalidResponseError("Response did not contain an image URL") from e
        if not isinstance(image_url, str) or not image_url.startswith(("http://", "https://")):
            raise InvalidResponseError(f"Invalid image URL in response: {image_url!r}")

        logger.info(f"Downloading generated image from {image_url}")
        try:
            image_response = requests.get(image_url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportFailureError(str(e)) from e

        if image_response.status_code != 200:
            raise InvalidResponseError(
                f"Could not download generated image: status {image_response.status_code}",
                image_response.status_code,
            )

        image_bytes = image_response.content
        decode_image(image_bytes)
        return image_bytes

    @staticmethod
    def _error_message(response) -> str:
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return "Unknown error"
