"""
Proporciona instancias compartidas de servicios y clientes que pueden ser inyectados en cualquier punto de la aplicación

Gestiona:
- Configuración de la aplicación
- Cliente de Stability (transferencia de estilo)
- Cliente de OpenAI (texto a imagen)
- Vigilancia de desconexión del navegador durante una generación

Este módulo es fundamental para mantener un solo punto para las dependencias compartidas y evitar la inicialización repetida
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import Request

from snapart.config import CHECK_INTERVAL, GenerationSettings, load_settings
from snapart.openai_images import OpenAIImagesClient
from snapart.stability import StabilityClient

logger = logging.getLogger(__name__)


class DisconnectMonitor:
    """
    Polls a request and sets a cancel event once the client has gone away
    """

    def __init__(self, request: Request, cancel_event: asyncio.Event, check_interval=5):
        self.request = request
        self.cancel_event = cancel_event
        self.check_interval = check_interval
        self.task = None

    async def disconnect_monitor(self):
        while not self.cancel_event.is_set():
            await asyncio.sleep(self.check_interval)
            if await self.request.is_disconnected():
                logger.info("Client disconnected, cancelling generation.")
                self.cancel_event.set()


@asynccontextmanager
async def watch_disconnect(request: Request, cancel_event: asyncio.Event):
    monitor = DisconnectMonitor(request, cancel_event, check_interval=CHECK_INTERVAL)
    task = asyncio.create_task(monitor.disconnect_monitor())
    monitor.task = task
    try:
        yield monitor
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


settings = load_settings()

stabilityClient = StabilityClient(settings)

openAIClient = OpenAIImagesClient(settings)


def get_settings() -> GenerationSettings:
    return settings


def get_stability_client() -> StabilityClient:
    return stabilityClient


def get_openai_client() -> OpenAIImagesClient:
    return openAIClient


@asynccontextmanager
async def lifespan(app):

    yield

    await stabilityClient.aclose()
    logger.info("Stability client shutting down.")
