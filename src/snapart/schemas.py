"""
Modelos de datos y validación

Define los modelos utilizados para:
- Describir las restricciones de tamaño que impone el servicio remoto
- Representar la imagen ajustada y la petición de generación
- Validar los datos de entrada en los endpoints
- Documentar automáticamente la API con OpenAPI
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator

from snapart.styles import ArtStyle

logger = logging.getLogger(__name__)


class ConstraintProfile(BaseModel):
    max_pixel_count: int = Field(default=9_000_000, gt=0)
    max_byte_size: int = Field(default=1024 * 1024, gt=0)
    quality_step: float = Field(default=0.1, gt=0.0, lt=1.0)

    model_config = ConfigDict(frozen=True)


class OutputFormat(str, Enum):
    WEBP = "webp"
    PNG = "png"
    JPEG = "jpeg"


@dataclass(frozen=True)
class FittedImage:
    """An image that satisfies a ConstraintProfile, with its JPEG encoding."""

    image: Image.Image
    data: bytes
    quality: float

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def pixel_count(self) -> int:
        return self.image.width * self.image.height

    @property
    def byte_size(self) -> int:
        return len(self.data)


class GenerationRequest(BaseModel):
    image: InstanceOf[FittedImage]
    prompt: str
    negative_prompt: str = ""
    control_strength: float = 0.7
    seed: int = 0
    output_format: OutputFormat = OutputFormat.WEBP

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @field_validator("control_strength")
    @classmethod
    def clamp_control_strength(cls, value: float) -> float:
        if math.isnan(value):
            raise ValueError("control_strength must be a number")
        clamped = min(max(value, 0.0), 1.0)
        if clamped != value:
            logger.warning(f"control_strength {value} out of range, clamped to {clamped}")
        return clamped


@dataclass(frozen=True)
class EncodedPayload:
    boundary: str
    body: bytes
    content_type: str


class StylizeRequest(BaseModel):
    image_b64: str
    style: ArtStyle = ArtStyle.WHIMSICAL_WATERCOLOR
    control_strength: float = 0.7
    seed: int = -1
    negative_prompt: str = ""
    output_format: OutputFormat = OutputFormat.WEBP


class TextImageRequest(BaseModel):
    prompt: str
    size: str = "1024x1024"
