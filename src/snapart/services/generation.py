"""
Servicios de generación de imágenes

Implementa el pipeline completo de estilización, actuando como capa intermedia
entre los endpoints de la API y el cliente de Stability.

Responsabilidades:
- Ajustar la foto a los límites de tamaño del servicio
- Construir la petición con el prompt del estilo elegido
- Enviar la petición y devolver siempre un resultado tipado
"""

import asyncio
import logging
from typing import Optional, Union

from PIL import Image

from snapart.errors import SnapArtError
from snapart.outcomes import Failure, GenerationOutcome
from snapart.schemas import (ConstraintProfile, EncodedPayload,
                             GenerationRequest, OutputFormat)
from snapart.services.images import fit_image, load_source_image
from snapart.services.multipart import encode_request
from snapart.stability import StabilityClient
from snapart.styles import prompt_for

logger = logging.getLogger(__name__)


def prepare_payload(
    source: Union[bytes, Image.Image],
    style,
    *,
    profile: ConstraintProfile,
    control_strength: float = 0.7,
    seed: int = 0,
    negative_prompt: str = "",
    output_format: OutputFormat = OutputFormat.WEBP,
) -> EncodedPayload:
    img = load_source_image(source) if isinstance(source, bytes) else source
    fitted = fit_image(img, profile)
    request = GenerationRequest(
        image=fitted,
        prompt=prompt_for(style),
        negative_prompt=negative_prompt,
        control_strength=control_strength,
        seed=seed,
        output_format=output_format,
    )
    return encode_request(request)


async def stylize(
    source: Union[bytes, Image.Image],
    style,
    *,
    client: StabilityClient,
    profile: ConstraintProfile,
    control_strength: float = 0.7,
    seed: int = 0,
    negative_prompt: str = "",
    output_format: OutputFormat = OutputFormat.WEBP,
    cancel_event: Optional[asyncio.Event] = None,
) -> GenerationOutcome:
    """Run the whole pipeline for one photo and one style.

    Local encoding problems short-circuit before any network call. Every
    pipeline error is returned as ``Failure`` rather than raised.
    """
    try:
        # fitting is CPU bound, keep the event loop free while it runs
        payload = await asyncio.to_thread(
            prepare_payload,
            source,
            style,
            profile=profile,
            control_strength=control_strength,
            seed=seed,
            negative_prompt=negative_prompt,
            output_format=output_format,
        )
        outcome = await client.generate(payload, cancel_event=cancel_event)
    except SnapArtError as e:
        logger.warning(f"Generation failed: {e.description} ({e.message})")
        return Failure(e)

    if not outcome.ok:
        logger.warning(f"Generation failed: {outcome.description}")
    return outcome
