"""
Module: adv_client.utils.encoding
Purpose: Text encodings of binary image data and of the strength parameter

The preview of an uploaded image and the adversarial image returned by the
service both travel as base64 text; these helpers keep the two directions
symmetric.
"""

import base64
import binascii
import re
from typing import Tuple

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?;base64,(?P<data>.*)$", re.DOTALL)


def to_data_url(raw: bytes, mime: str = "application/octet-stream") -> str:
    """
    Encode raw bytes as a base64 data URL that a browser can render directly.

    Example:
        >>> to_data_url(b"ABC", "image/png")
        'data:image/png;base64,QUJD'
    """
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def from_data_url(url: str) -> Tuple[str, bytes]:
    """
    Decode a data URL produced by `to_data_url`.

    Returns:
        (mime type, raw bytes)

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    match = _DATA_URL_RE.match(url)
    if match is None:
        raise ValueError("Not a base64 data URL")
    mime = match.group("mime") or "application/octet-stream"
    return mime, decode_base64(match.group("data"))


def decode_base64(text: str) -> bytes:
    """
    Strictly decode base64 text.

    Raises:
        ValueError: If the text contains non-alphabet characters or bad padding
    """
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 data: {e}") from e


def format_strength(value: float) -> str:
    """
    Decimal string form of a strength value, as sent in the `epsilon` field.

    Example:
        >>> format_strength(0.1), format_strength(0.0), format_strength(0.5)
        ('0.1', '0', '0.5')
    """
    return f"{value:g}"
