import asyncio
import base64
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from snapart.config import GenerationSettings
from snapart.deps import (get_openai_client, get_settings,
                          get_stability_client, watch_disconnect)
from snapart.errors import (EncodingError, GenerationCancelledError,
                            ImageGenerationFailedError, InvalidURLError,
                            SnapArtError, TransportFailureError)
from snapart.openai_images import OpenAIImagesClient
from snapart.outcomes import ApiError, Failure, GenerationOutcome, TransportError
from snapart.schemas import StylizeRequest, TextImageRequest
from snapart.services.generation import stylize
from snapart.services.images import prepare_img_bytes
from snapart.stability import StabilityClient
from snapart.styles import list_styles
from snapart.utils import define_seed

logger = logging.getLogger(__name__)

router = APIRouter()


def status_for_error(error: SnapArtError) -> int:
    if isinstance(error, EncodingError):
        return 400
    if isinstance(error, GenerationCancelledError):
        return 499
    if isinstance(error, InvalidURLError):
        return 500
    if isinstance(error, TransportFailureError):
        return 504
    return 502


def raise_for_outcome(outcome: GenerationOutcome):
    if outcome.ok:
        return
    if isinstance(outcome, ApiError):
        status_code = 502
    elif isinstance(outcome, TransportError):
        status_code = 504
    elif isinstance(outcome, Failure):
        status_code = status_for_error(outcome.error)
    else:
        status_code = 500
    raise HTTPException(status_code=status_code, detail=outcome.description)


def prepare_api_response(outcome, req: StylizeRequest, seed: int) -> dict:
    return {
        "image": base64.b64encode(outcome.image_bytes).decode("ascii"),
        "media_type": outcome.media_type,
        "style": req.style.value,
        "seed": seed,
        "output_format": req.output_format.value,
    }


@router.get("/styles")
async def get_styles():
    """Lists the available art styles for the theme picker."""
    return [style.to_dict() for style in list_styles()]


@router.post("/stylize")
async def stylize_image(
    req: StylizeRequest,
    request: Request,
    client: StabilityClient = Depends(get_stability_client),
    settings: GenerationSettings = Depends(get_settings),
):
    """Restyle a photo with one of the catalog styles."""
    try:
        img_bytes = await asyncio.to_thread(prepare_img_bytes, req.image_b64)
    except EncodingError as e:
        raise HTTPException(status_code=400, detail=f"Imagen inválida: {e.message}") from e

    seed = define_seed(req.seed)
    cancel_event = asyncio.Event()
    async with watch_disconnect(request, cancel_event):
        outcome = await stylize(
            img_bytes,
            req.style,
            client=client,
            profile=settings.profile,
            control_strength=req.control_strength,
            seed=seed,
            negative_prompt=req.negative_prompt,
            output_format=req.output_format,
            cancel_event=cancel_event,
        )

    raise_for_outcome(outcome)
    return prepare_api_response(outcome, req, seed)


@router.post("/generate")
async def generate_from_text(
    req: TextImageRequest,
    client: OpenAIImagesClient = Depends(get_openai_client),
):
    """Generate an image from a text prompt, without a source photo."""
    try:
        image_bytes = await asyncio.to_thread(client.generate_image, req.prompt, req.size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ImageGenerationFailedError as e:
        raise HTTPException(status_code=502, detail=e.description) from e
    except SnapArtError as e:
        logger.error(f"Text-to-image error: {e.message}")
        raise HTTPException(status_code=status_for_error(e), detail=e.description) from e

    return {
        "image": base64.b64encode(image_bytes).decode("ascii"),
        "size": req.size,
    }


def get_router():
    return router
