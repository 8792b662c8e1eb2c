"""Errores del pipeline de generación"""
from typing import Optional


class SnapArtError(Exception):
    """Base exception for the stylization pipeline"""

    description = "Unexpected error occurred"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.description
        self.status_code = status_code
        super().__init__(self.message)


class InvalidURLError(SnapArtError):
    """The configured endpoint could not be parsed"""

    description = "Invalid API URL"


class InvalidResponseError(SnapArtError):
    """The server answered with something that is not a usable response"""

    description = "Invalid response from server"


class ImageGenerationFailedError(SnapArtError):
    """The remote service reported a structured failure"""

    description = "Generation failed"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, status_code)
        self.description = f"Generation failed: {message}"


class InvalidImageDataError(SnapArtError):
    """A successful response carried bytes that are not an image"""

    description = "Unable to process the image data"


class EncodingError(SnapArtError):
    """The local image could not be serialized"""

    description = "Failed to encode image data"


class SourceImageError(EncodingError):
    """The source photo is empty or cannot be decoded"""

    description = "Unable to read the source image"


class TransportFailureError(SnapArtError):
    """No response reached us"""

    description = "Could not reach the image service"


class GenerationCancelledError(SnapArtError):
    description = "Generation was cancelled"
