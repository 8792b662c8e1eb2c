import random

import requests

from snapart.config import REQUEST_TIMEOUT

# Largest seed the generation service accepts
MAX_SEED = 4294967294


def define_seed(seed):
    """
    Define the seed for the generation request.
    If the seed is -1, a new random seed is generated.
    Otherwise, the provided seed is used.
    """
    return random.randint(0, MAX_SEED) if seed == -1 else seed


def is_data_url(data):
    """
    Check if the provided data is a remote http(s) URL
    """
    return data.startswith(("http://", "https://"))


def get_image_bytes_from_url(url):
    """
    Fetch image bytes from a URL.
    """
    resp = requests.get(url, timeout=REQUEST_TIMEOUT)
    if resp.status_code != 200:
        raise ValueError(f"Failed to fetch image from {url}")
    return resp.content


def remove_b64_header(data):
    """
    Remove the base64 header from a data URL.
    """
    if data.startswith("data:image/"):
        img_b64 = data.split(",", 1)[-1]
        img_b64 = "".join(img_b64.split())
        padding = len(img_b64) % 4
        if padding:
            img_b64 += "=" * (4 - padding)
        return img_b64
    return data
