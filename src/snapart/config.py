"""Este módulo contiene las variables de configuración de la aplicación."""

import os

from pydantic import BaseModel

from snapart.schemas import ConstraintProfile

STABILITY_API_KEY: str = os.getenv("STABILITY_API_KEY", "")
STABILITY_ENDPOINT: str = os.getenv(
    "STABILITY_ENDPOINT",
    "https://api.stability.ai/v2beta/stable-image/control/structure",
)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_IMAGES_ENDPOINT: str = os.getenv(
    "OPENAI_IMAGES_ENDPOINT", "https://api.openai.com/v1/images/generations"
)

MAX_PIXEL_COUNT: int = int(os.getenv("SNAPART_MAX_PIXEL_COUNT", "9000000"))
MAX_BYTE_SIZE: int = int(os.getenv("SNAPART_MAX_BYTE_SIZE", str(1024 * 1024)))
QUALITY_STEP: float = float(os.getenv("SNAPART_QUALITY_STEP", "0.1"))

DEFAULT_CONTROL_STRENGTH: float = 0.7
REQUEST_TIMEOUT: float = float(os.getenv("SNAPART_REQUEST_TIMEOUT", "60"))  # seconds
CHECK_INTERVAL: float = 1  # seconds
LOG_LEVEL: str = os.getenv("SNAPART_LOG_LEVEL", "INFO")


class GenerationSettings(BaseModel):
    """Explicit configuration handed to the HTTP clients at construction time."""

    stability_api_key: str = ""
    stability_endpoint: str = STABILITY_ENDPOINT
    openai_api_key: str = ""
    openai_images_endpoint: str = OPENAI_IMAGES_ENDPOINT
    max_pixel_count: int = MAX_PIXEL_COUNT
    max_byte_size: int = MAX_BYTE_SIZE
    quality_step: float = QUALITY_STEP
    request_timeout: float = REQUEST_TIMEOUT

    model_config = {"frozen": True}

    @property
    def profile(self) -> ConstraintProfile:
        return ConstraintProfile(
            max_pixel_count=self.max_pixel_count,
            max_byte_size=self.max_byte_size,
            quality_step=self.quality_step,
        )


def load_settings() -> GenerationSettings:
    """Build the settings from the environment-backed constants above."""
    return GenerationSettings(
        stability_api_key=STABILITY_API_KEY,
        stability_endpoint=STABILITY_ENDPOINT,
        openai_api_key=OPENAI_API_KEY,
        openai_images_endpoint=OPENAI_IMAGES_ENDPOINT,
        max_pixel_count=MAX_PIXEL_COUNT,
        max_byte_size=MAX_BYTE_SIZE,
        quality_step=QUALITY_STEP,
        request_timeout=REQUEST_TIMEOUT,
    )
