"""
Servicios de procesamiento de imágenes

Prepara la foto de origen para que cumpla los límites del servicio remoto
antes de subirla.

Características:
- Conversión de base64, data URLs y URLs remotas a bytes
- Decodificación de la foto respetando la orientación EXIF
- Reducción del número de píxeles conservando la relación de aspecto
- Recompresión JPEG hasta entrar en el tamaño máximo en bytes
"""

import base64
import binascii
import logging
import math
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from snapart.errors import EncodingError, SourceImageError
from snapart.schemas import ConstraintProfile, FittedImage
from snapart.utils import get_image_bytes_from_url, is_data_url, remove_b64_header

logger = logging.getLogger(__name__)


def prepare_img_bytes(img_data: str) -> bytes:
    """Turn a base64 string, data URL or http(s) URL into raw image bytes."""
    if not img_data:
        raise SourceImageError("No image data received")
    if is_data_url(img_data):
        try:
            return get_image_bytes_from_url(img_data)
        except Exception as e:
            raise SourceImageError(f"Could not download image: {e}") from e

    img_b64 = remove_b64_header(img_data)
    try:
        return base64.b64decode(img_b64)
    except binascii.Error as e:
        raise SourceImageError(f"Invalid base64 image: {e}") from e


def load_source_image(img_bytes: bytes) -> Image.Image:
    if not img_bytes:
        raise SourceImageError("Source image is empty")
    try:
        img = Image.open(BytesIO(img_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise SourceImageError(f"Source image could not be decoded: {e}") from e
    # Camera photos store their rotation as metadata
    return ImageOps.exif_transpose(img)


def encode_jpeg(img: Image.Image, quality: float) -> bytes:
    """Encode as JPEG. quality is in (0, 1] and maps onto Pillow's 1-100 scale."""
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    output_buffer = BytesIO()
    try:
        img.save(output_buffer, format="JPEG", quality=max(1, round(quality * 100)))
    except (OSError, ValueError) as e:
        raise EncodingError(f"JPEG encoding failed: {e}") from e
    return output_buffer.getvalue()


def fit_to_pixel_count(img: Image.Image, max_pixel_count: int) -> Image.Image:
    pixel_count = img.width * img.height
    if pixel_count <= max_pixel_count:
        return img

    scale = math.sqrt(max_pixel_count / pixel_count)
    new_width = max(1, math.floor(img.width * scale))
    new_height = max(1, math.floor(img.height * scale))
    # a side clamped up to 1 px must not push the other past the budget
    if new_height == 1:
        new_width = min(new_width, max_pixel_count)
    if new_width == 1:
        new_height = min(new_height, max_pixel_count)
    logger.info(
        f"Resizing {img.width}x{img.height} to {new_width}x{new_height} "
        f"(limit {max_pixel_count} px)"
    )
    return img.resize((new_width, new_height), Image.Resampling.LANCZOS)


def fit_image(img: Image.Image, profile: ConstraintProfile) -> FittedImage:
    """Fit an image into the pixel and byte budgets of a ConstraintProfile.

    The pixel pass is analytic and runs at most once. The byte pass starts at
    quality 1.0 and steps down by ``profile.quality_step`` while the encoding
    is too large, never going to or below zero. When the floor is reached the
    last encoding is kept even if it is still over budget.
    """
    fitted = fit_to_pixel_count(img, profile.max_pixel_count)

    quality = 1.0
    data = encode_jpeg(fitted, quality)
    while len(data) > profile.max_byte_size and quality > profile.quality_step:
        # rounded so repeated subtraction does not drift below the step
        quality = round(quality - profile.quality_step, 6)
        data = encode_jpeg(fitted, quality)

    if len(data) > profile.max_byte_size:
        logger.warning(
            f"Image still {len(data)} bytes at quality {quality}, "
            f"over the {profile.max_byte_size} byte limit; sending best effort"
        )
    else:
        logger.debug(f"Encoded {fitted.width}x{fitted.height} at quality {quality}: {len(data)} bytes")

    return FittedImage(image=fitted, data=data, quality=quality)
