"""BIP-340 Schnorr signature value."""

from __future__ import annotations

from .errors import HexError, InvalidSignatureError
from .utils import decode_hex

SIGNATURE_SIZE = 64


class Signature:
    """A 64-byte Schnorr signature, shown as 128 lowercase hex characters."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes) -> None:
        if not isinstance(raw, (bytes, bytearray)) or len(raw) != SIGNATURE_SIZE:
            raise InvalidSignatureError(f"signature must be {SIGNATURE_SIZE} bytes")
        self._raw = bytes(raw)

    @classmethod
    def from_bytes(cls, raw: bytes) -> Signature:
        return cls(raw)

    @classmethod
    def from_hex(cls, s: str) -> Signature:
        try:
            return cls(decode_hex(s, SIGNATURE_SIZE, "signature"))
        except HexError as exc:
            raise InvalidSignatureError(str(exc)) from exc

    def serialize(self) -> bytes:
        return self._raw

    def hex(self) -> str:
        return self._raw.hex()

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Signature({self.hex()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)
