from __future__ import annotations

from .errors import HexError, Utf8Error


def decode_hex(s: str, size: int, label: str) -> bytes:
    """
    Decode *s* into exactly *size* bytes or raise HexError.
    """
    if not isinstance(s, str):
        raise HexError(f"{label} must be a hex string")
    try:
        raw = bytes.fromhex(s.strip())
    except ValueError as exc:
        raise HexError(f"{label} is not valid hex") from exc
    if len(raw) != size:
        raise HexError(f"{label} must be {size * 2}-hex ({size} bytes), got {len(raw)} bytes")
    return raw


def decode_utf8(data: bytes, label: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8Error(f"{label} is not valid UTF-8") from exc


def encode_utf8(s: str, label: str) -> bytes:
    try:
        return s.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise Utf8Error(f"{label} is not encodable as UTF-8") from exc
