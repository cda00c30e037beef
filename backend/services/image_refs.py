"""
Image reference helpers.

Photos travel through the system as opaque strings, normally
`data:image/...;base64,...` URLs produced by the upload step. Only the
renderer ever needs the pixels.
"""
import base64
import binascii
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError


DATA_URL_PREFIX = "data:"


def is_data_url(ref: str) -> bool:
    return ref.startswith(DATA_URL_PREFIX) and "," in ref


def decode_image_ref(ref: str) -> Image.Image:
    """
    Load the image behind a reference.

    Accepts base64 data URLs and local file paths.

    Raises:
        ValueError: If the reference cannot be turned into an image
    """
    if is_data_url(ref):
        header, _, payload = ref.partition(",")
        if ";base64" not in header:
            raise ValueError("Only base64 data URLs are supported")
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Invalid base64 payload: {exc}") from exc
        source = io.BytesIO(raw)
    else:
        path = Path(ref)
        if not path.is_file():
            raise ValueError(f"Not a data URL or existing file: {ref[:64]}")
        source = path

    try:
        with Image.open(source) as img:
            img.load()
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"Undecodable image: {exc}") from exc


def encode_data_url(img: Image.Image, fmt: str = "JPEG", quality: int = 85) -> str:
    """Encode a Pillow image as a base64 data URL."""
    buf = io.BytesIO()
    params = {"quality": quality} if fmt.upper() == "JPEG" else {}
    img.convert("RGB").save(buf, format=fmt, **params)
    mime = "jpeg" if fmt.upper() == "JPEG" else fmt.lower()
    payload = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/{mime};base64,{payload}"
