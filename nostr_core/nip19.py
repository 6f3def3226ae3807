"""NIP-19 bech32 encoding and the TLV payload layout.

Identifiers look like ``<hrp>1<data><checksum>``. ``npub`` and ``nsec`` carry
the 32 raw key bytes; ``nevent`` and ``nprofile`` carry a sequence of
``[type:u8][length:u8][value]`` entries. This module only knows about bytes;
the typed views live in ``keys`` and ``entities``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import bech32

from .errors import (
    Bech32Error,
    ChecksumError,
    InvalidLengthError,
    InvalidPrefixError,
    InvalidTypeError,
    InvalidVariantError,
    MissingLengthError,
    TruncatedValueError,
    UnexpectedDataError,
)

PUBLIC_PREFIX = "npub"
SECRET_PREFIX = "nsec"
EVENT_PREFIX = "nevent"
PROFILE_PREFIX = "nprofile"

SPECIAL_TYPE = 0x00
RELAY_TYPE = 0x01

PUBKEY_SIZE = 32
MAX_VALUE_SIZE = 0xFF

# polymod residues of a valid checksum
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3


def encode(prefix: str, data: bytes) -> str:
    """Wrap *data* in a bech32 string under the human-readable *prefix*."""
    words = bech32.convertbits(list(data), 8, 5, True)
    if words is None:
        raise Bech32Error("convertbits failed")
    return bech32.bech32_encode(prefix, words)


def _split(bech: str) -> tuple[str, list[int]]:
    """
    Split a bech32 string into (hrp, 5-bit words including the checksum).

    Same rules as the reference decoder minus the 90 character cap, which
    TLV identifiers with a few relays easily exceed.
    """
    if not isinstance(bech, str):
        raise Bech32Error("bech32 value must be a string")
    bech = bech.strip()
    if any(ord(c) < 33 or ord(c) > 126 for c in bech):
        raise Bech32Error("invalid character in bech32 string")
    if bech.lower() != bech and bech.upper() != bech:
        raise Bech32Error("mixed case in bech32 string")
    bech = bech.lower()
    pos = bech.rfind("1")
    if pos < 1 or pos + 7 > len(bech):
        raise Bech32Error("missing separator or checksum")
    try:
        words = [bech32.CHARSET.index(c) for c in bech[pos + 1:]]
    except ValueError as exc:
        raise Bech32Error("invalid character in bech32 data part") from exc
    return bech[:pos], words


def decode(prefix: str, bech: str) -> bytes:
    """
    Unwrap a bech32 string, checking prefix, checksum and variant.
    """
    hrp, words = _split(bech)
    residue = bech32.bech32_polymod(bech32.bech32_hrp_expand(hrp) + words)
    if residue == _BECH32M_CONST:
        raise InvalidVariantError()
    if residue != _BECH32_CONST:
        raise ChecksumError("invalid bech32 checksum")
    if hrp != prefix:
        raise InvalidPrefixError(prefix, hrp)
    decoded = bech32.convertbits(words[:-6], 5, 8, False)
    if decoded is None:
        raise Bech32Error("convertbits failed")
    return bytes(decoded)


def decode_any(bech: str) -> tuple[str, bytes]:
    """
    Decode without an expected prefix, returning (hrp, payload).
    """
    hrp, _ = _split(bech)
    return hrp, decode(hrp, bech)


class ByteCursor:
    """Forward-only reader over a byte buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def read_byte(self) -> int:
        if self.at_end:
            raise MissingLengthError(self._pos)
        b = self._data[self._pos]
        self._pos += 1
        return b

    def read_exact(self, n: int) -> bytes:
        if n > self.remaining:
            raise TruncatedValueError(n, self.remaining)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk


@dataclass(frozen=True)
class TlvEntry:
    type: int
    value: bytes

    @property
    def length(self) -> int:
        return len(self.value)


def read_tlv(data: bytes, allowed_types: Iterable[int] = (SPECIAL_TYPE, RELAY_TYPE)) -> list[TlvEntry]:
    """
    Parse every entry in *data*, in order.

    Unknown types are rejected rather than skipped. A first entry cut short
    raises MissingLengthError or TruncatedValueError; an incomplete entry
    after at least one complete one is reported as UnexpectedDataError.
    """
    allowed = frozenset(allowed_types)
    cursor = ByteCursor(data)
    entries: list[TlvEntry] = []
    while not cursor.at_end:
        start = cursor.position
        t = cursor.read_byte()
        if t not in allowed:
            raise InvalidTypeError(t)
        try:
            length = cursor.read_byte()
            value = cursor.read_exact(length)
        except (MissingLengthError, TruncatedValueError) as exc:
            if entries:
                raise UnexpectedDataError(bytes(data[start:])) from exc
            raise
        entries.append(TlvEntry(t, value))
    return entries


def write_tlv(entries: Iterable[TlvEntry]) -> bytes:
    out = bytearray()
    for entry in entries:
        if entry.length > MAX_VALUE_SIZE:
            raise InvalidLengthError(MAX_VALUE_SIZE, entry.length)
        out.append(entry.type)
        out.append(entry.length)
        out += entry.value
    return bytes(out)
