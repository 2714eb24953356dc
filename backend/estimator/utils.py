# backend/estimator/utils.py
import base64

DEFAULT_IMAGE_MIME = "image/jpeg"


def image_to_data_uri(data: bytes, mime: str | None = None) -> str:
    """
    Returns a base64 data URI for the raw image bytes, suitable for an
    ``image_url`` content part.
    """
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime or DEFAULT_IMAGE_MIME};base64,{b64}"
