"""
Cliente para la interacción con el servicio de generación de Stability AI.

Este módulo contiene toda la comunicación con el endpoint de transferencia de
estilo: envía el cuerpo multipart ya construido y clasifica la respuesta.

Responsabilidades:
- Gestionar la conexión HTTP asíncrona con el servicio
- Enviar la petición con las cabeceras de autenticación
- Decodificar la imagen devuelta o el documento de error
- Permitir cancelar la petición en curso
"""

import asyncio
import contextlib
import logging
from io import BytesIO
from typing import Optional

import httpx
from PIL import Image

from snapart.config import GenerationSettings
from snapart.errors import (GenerationCancelledError, InvalidImageDataError,
                            InvalidResponseError, InvalidURLError)
from snapart.outcomes import ApiError, GenerationOutcome, Success, TransportError
from snapart.schemas import EncodedPayload

logger = logging.getLogger(__name__)


def parse_endpoint(endpoint: str) -> httpx.URL:
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidURLError(f"Invalid API URL: {endpoint!r}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(f"Invalid API URL: {endpoint!r}")
    return url


def decode_image(data: bytes) -> Image.Image:
    """Check that ``data`` holds an image Pillow can read."""
    try:
        img = Image.open(BytesIO(data))
        img.verify()
    except Exception as e:
        raise InvalidImageDataError(f"Response is not a valid image: {e}") from e
    return img


def error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if isinstance(body.get("message"), str):
            return body["message"]
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
    return f"Failed with status code: {response.status_code}"


class StabilityClient:

    def __init__(self, settings: GenerationSettings, http_client: Optional[httpx.AsyncClient] = None):
        self.endpoint = settings.stability_endpoint
        self.api_key = settings.stability_api_key
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.request_timeout)
        logger.info(f"Stability client ready, API key length: {len(self.api_key)}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, payload: EncodedPayload) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "image/*",
            "Content-Type": payload.content_type,
        }

    async def _post_cancellable(self, url, payload, cancel_event: asyncio.Event) -> httpx.Response:
        if cancel_event.is_set():
            raise GenerationCancelledError()

        request_task = asyncio.ensure_future(
            self._client.post(url, content=payload.body, headers=self._headers(payload))
        )
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (request_task, cancel_task):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

        if request_task in done:
            return request_task.result()
        logger.info("Generation cancelled by caller, discarding the request")
        raise GenerationCancelledError()

    async def generate(
        self, payload: EncodedPayload, cancel_event: Optional[asyncio.Event] = None
    ) -> GenerationOutcome:
        """Submit an encoded payload and classify the answer.

        Returns Success, ApiError or TransportError. Raises InvalidURLError,
        InvalidResponseError, InvalidImageDataError or GenerationCancelledError
        for the remaining failure modes. Makes a single attempt.
        """
        url = parse_endpoint(self.endpoint)
        logger.info(f"Sending {len(payload.body)} byte request to {url}")

        try:
            if cancel_event is None:
                response = await self._client.post(
                    url, content=payload.body, headers=self._headers(payload)
                )
            else:
                response = await self._post_cancellable(url, payload, cancel_event)
        except httpx.ProtocolError as e:
            raise InvalidResponseError(f"Malformed HTTP response: {e}") from e
        except httpx.TransportError as e:
            logger.error(f"Error contacting the image service: {e!r}")
            return TransportError(e)

        logger.info(f"Image service answered {response.status_code}")
        return self.classify_response(response)

    def classify_response(self, response: httpx.Response) -> GenerationOutcome:
        if response.status_code != 200:
            logger.debug(f"Error response: {response.text[:500]}")
            return ApiError(error_message(response), response.status_code)

        data = response.content
        if not data:
            raise InvalidResponseError("Successful response carried no body", 200)

        img = decode_image(data)
        media_type = response.headers.get("content-type") or Image.MIME.get(
            img.format, "application/octet-stream"
        )
        return Success(image_bytes=data, media_type=media_type)
