"""Image byte helpers shared by the vendor adapters."""

from __future__ import annotations

import base64


def detect_media_type(image_bytes: bytes) -> str:
    """Detect the MIME type of an image from its magic bytes.

    PNG starts with: 89 50 4E 47 0D 0A 1A 0A
    WEBP starts with: RIFF....WEBP
    JPEG starts with: FF D8
    GIF starts with: GIF87a / GIF89a
    BMP starts with: BM
    TIFF starts with: II*\\0 or MM\\0*
    """
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:2] == b"\xff\xd8":
        return "image/jpeg"
    if image_bytes[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if image_bytes[:2] == b"BM":
        return "image/bmp"
    if image_bytes[:4] in (b"II*\x00", b"MM\x00*"):
        return "image/tiff"
    return "image/jpeg"  # most vendors accept JPEG when in doubt


def to_base64(image_bytes: bytes) -> str:
    """Return the bare base64 payload (no ``data:`` prefix)."""
    return base64.b64encode(image_bytes).decode("utf-8")


def to_data_uri(image_bytes: bytes, media_type: str | None = None) -> str:
    """Return a ``data:<type>;base64,<payload>`` URI for vision chat APIs."""
    media_type = media_type or detect_media_type(image_bytes)
    return f"data:{media_type};base64,{to_base64(image_bytes)}"
