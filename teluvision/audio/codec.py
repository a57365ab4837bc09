from __future__ import annotations

import base64
import binascii


class DecodeError(ValueError):
    pass


def decode_base64(data: str | bytes) -> bytes:
    """Decode standard base64 text (as returned by the remote service) into raw bytes."""
    if isinstance(data, str):
        try:
            data = data.strip().encode("ascii")
        except UnicodeEncodeError as e:
            raise DecodeError("base64 payload contains non-ASCII characters") from e
    else:
        data = bytes(data).strip()
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 payload: {e}") from e


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
