"""
Codificación multipart/form-data

Construye el cuerpo de la petición de generación con el codificador de
urllib3, con un boundary aleatorio nuevo en cada llamada y un orden de campos
fijo: image, prompt, negative_prompt, control_strength, seed, output_format.
"""

import uuid

from urllib3.filepost import encode_multipart_formdata

from snapart.schemas import EncodedPayload, GenerationRequest

IMAGE_FILENAME = "image.jpg"
IMAGE_CONTENT_TYPE = "image/jpeg"


def new_boundary() -> str:
    return f"Boundary-{uuid.uuid4()}"


def scalar_fields(request: GenerationRequest) -> list:
    """Scalar form fields of a request, in wire order, as (name, value) pairs."""
    return [
        ("prompt", request.prompt),
        ("negative_prompt", request.negative_prompt),
        ("control_strength", repr(float(request.control_strength))),
        ("seed", str(int(request.seed))),
        ("output_format", request.output_format.value),
    ]


def _collides(boundary: str, chunks: list) -> bool:
    token = boundary.encode("utf-8")
    return any(token in chunk for chunk in chunks)


def encode_request(request: GenerationRequest, boundary: str = None) -> EncodedPayload:
    """Serialize a GenerationRequest into a multipart/form-data body.

    A fresh boundary is drawn for every call unless one is given. A drawn
    boundary that happens to appear in the image or a field value is redrawn;
    a given one raises ValueError instead.
    """
    fields = scalar_fields(request)
    chunks = [request.image.data] + [value.encode("utf-8") for _, value in fields]

    if boundary is None:
        boundary = new_boundary()
        while _collides(boundary, chunks):
            boundary = new_boundary()
    elif _collides(boundary, chunks):
        raise ValueError(f"Boundary {boundary!r} occurs inside the payload")

    body, content_type = encode_multipart_formdata(
        [("image", (IMAGE_FILENAME, request.image.data, IMAGE_CONTENT_TYPE))] + fields,
        boundary=boundary,
    )

    return EncodedPayload(boundary=boundary, body=body, content_type=content_type)
