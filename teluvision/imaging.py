from __future__ import annotations

from teluvision.contracts import ImagePayload

# Declared for anything the sniffer does not recognize; the model service decodes by content.
FALLBACK_IMAGE_MIME = "image/jpeg"


class ImageError(ValueError):
    pass


_HEIF_BRANDS = {
    b"heic": "image/heic",
    b"heix": "image/heic",
    b"heim": "image/heic",
    b"heis": "image/heic",
    b"mif1": "image/heif",
    b"msf1": "image/heif",
}


def sniff_image_mime(data: bytes) -> str | None:
    """Detect the image format from its magic bytes. Returns None if unrecognized."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if data.startswith(b"BM"):
        return "image/bmp"
    if data.startswith((b"II*\x00", b"MM\x00*")):
        return "image/tiff"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if len(data) >= 12 and data[4:8] == b"ftyp":
        return _HEIF_BRANDS.get(data[8:12])
    return None


def prepare_image(data: bytes) -> ImagePayload:
    raw = bytes(data or b"")
    if not raw:
        raise ImageError("image is empty")
    return ImagePayload(data=raw, mime_type=sniff_image_mime(raw) or FALLBACK_IMAGE_MIME)
