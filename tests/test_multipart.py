from unittest.mock import patch

import pytest
from urllib3.filepost import encode_multipart_formdata

from snapart.schemas import ConstraintProfile, GenerationRequest, OutputFormat
from snapart.services.images import fit_image
from snapart.services.multipart import encode_request

FIELD_ORDER = ["image", "prompt", "negative_prompt", "control_strength", "seed", "output_format"]


@pytest.fixture
def fitted(make_image):
    return fit_image(make_image(), ConstraintProfile())


def field_value(body: bytes, boundary: str, name: str) -> bytes:
    if name == "image":
        marker = b"Content-Type: image/jpeg\r\n\r\n"
    else:
        marker = f'name="{name}"\r\n\r\n'.encode()
    start = body.index(marker) + len(marker)
    end = body.index(f"\r\n--{boundary}".encode(), start)
    return body[start:end]


def test_encode_request_framing(fitted):
    request = GenerationRequest(image=fitted, prompt="Paint it", control_strength=0.7, seed=7)
    payload = encode_request(request)
    body = payload.body
    boundary = payload.boundary

    assert payload.content_type == f"multipart/form-data; boundary={boundary}"
    assert body.startswith(f"--{boundary}\r\n".encode())
    assert body.endswith(f"--{boundary}--\r\n".encode())
    assert body.count(f"--{boundary}\r\n".encode()) == 6
    assert body.count(f"--{boundary}--".encode()) == 1


def test_encode_request_fields(fitted):
    request = GenerationRequest(
        image=fitted,
        prompt="Paint it",
        negative_prompt="blurry",
        control_strength=0.7,
        seed=1234,
        output_format=OutputFormat.PNG,
    )
    payload = encode_request(request)
    body = payload.body

    positions = [body.index(f'name="{name}"'.encode()) for name in FIELD_ORDER]
    assert positions == sorted(positions)

    assert (
        b'Content-Disposition: form-data; name="image"; filename="image.jpg"\r\n'
        b"Content-Type: image/jpeg\r\n\r\n" in body
    )
    assert field_value(body, payload.boundary, "image") == fitted.data
    assert field_value(body, payload.boundary, "prompt") == b"Paint it"
    assert field_value(body, payload.boundary, "negative_prompt") == b"blurry"
    assert field_value(body, payload.boundary, "control_strength") == b"0.7"
    assert field_value(body, payload.boundary, "seed") == b"1234"
    assert field_value(body, payload.boundary, "output_format") == b"png"
    # only the image part carries a content type
    assert body.count(b"Content-Type:") == 1


def test_empty_negative_prompt(fitted):
    payload = encode_request(GenerationRequest(image=fitted, prompt="p"))
    assert field_value(payload.body, payload.boundary, "negative_prompt") == b""
    assert field_value(payload.body, payload.boundary, "output_format") == b"webp"


def test_non_ascii_prompt_is_utf8(fitted):
    payload = encode_request(GenerationRequest(image=fitted, prompt="acuarela en tonos pastel ñ"))
    assert field_value(payload.body, payload.boundary, "prompt") == "acuarela en tonos pastel ñ".encode()


def test_boundary_is_fresh_per_call(fitted):
    request = GenerationRequest(image=fitted, prompt="p")
    first = encode_request(request)
    second = encode_request(request)

    assert first.boundary != second.boundary
    assert first.body.replace(first.boundary.encode(), b"") == second.body.replace(
        second.boundary.encode(), b""
    )


def test_fixed_boundary_is_reproducible(fitted):
    request = GenerationRequest(image=fitted, prompt="p", seed=3)
    assert encode_request(request, boundary="Boundary-test").body == encode_request(
        request, boundary="Boundary-test"
    ).body


def test_colliding_boundary_is_rejected(fitted):
    request = GenerationRequest(image=fitted, prompt="contains Boundary-test inside")
    with pytest.raises(ValueError):
        encode_request(request, boundary="Boundary-test")


@pytest.mark.parametrize("value,expected", [(1.5, 1.0), (-0.2, 0.0), (0.0, 0.0), (1.0, 1.0), (0.35, 0.35)])
def test_control_strength_is_clamped(fitted, value, expected):
    request = GenerationRequest(image=fitted, prompt="p", control_strength=value)
    assert request.control_strength == expected

    payload = encode_request(request)
    assert field_value(payload.body, payload.boundary, "control_strength") == repr(expected).encode()


def test_body_is_built_by_urllib3_encoder(fitted):
    request = GenerationRequest(image=fitted, prompt="p", seed=5)
    with patch(
        "snapart.services.multipart.encode_multipart_formdata", wraps=encode_multipart_formdata
    ) as spy:
        payload = encode_request(request, boundary="Boundary-fixed")

    fields = spy.call_args.args[0]
    assert [name for name, _ in fields] == FIELD_ORDER
    assert fields[0][1] == ("image.jpg", fitted.data, "image/jpeg")
    assert spy.call_args.kwargs["boundary"] == "Boundary-fixed"
    assert payload.content_type == "multipart/form-data; boundary=Boundary-fixed"
