"""
Resultados de una generación

Un resultado es siempre uno de:
- Success: bytes de la imagen generada
- ApiError: fallo estructurado reportado por el servicio remoto
- TransportError: no se recibió respuesta
- Failure: cualquier otro error de la taxonomía, recuperado en el pipeline
"""

from dataclasses import dataclass
from typing import Union

from snapart.errors import SnapArtError


@dataclass(frozen=True)
class Success:
    image_bytes: bytes
    media_type: str = "image/webp"

    ok = True
    description = "OK"


@dataclass(frozen=True)
class ApiError:
    message: str
    http_status: int

    ok = False

    @property
    def description(self) -> str:
        return f"Generation failed: {self.message}"


@dataclass(frozen=True)
class TransportError:
    cause: BaseException

    ok = False

    @property
    def description(self) -> str:
        return f"Could not reach the image service: {self.cause}"


@dataclass(frozen=True)
class Failure:
    error: SnapArtError

    ok = False

    @property
    def description(self) -> str:
        return self.error.description


GenerationOutcome = Union[Success, ApiError, TransportError, Failure]
