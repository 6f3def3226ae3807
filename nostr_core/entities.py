"""NIP-19 shareable identifiers with a TLV payload: nevent and nprofile."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from . import nip19
from .curve import Curve
from .errors import Bech32Error, InvalidKeyError, InvalidLengthError
from .keys import PublicKey, SecretKey
from .nip19 import RELAY_TYPE, SPECIAL_TYPE, TlvEntry
from .utils import decode_utf8, encode_utf8

Entity = Union[PublicKey, SecretKey, "NEvent", "Profile"]


def _relay_entries(relays: list[str]) -> list[TlvEntry]:
    return [TlvEntry(RELAY_TYPE, encode_utf8(relay, "relay")) for relay in relays]


@dataclass
class NEvent:
    """
    Event reference. The special entry holds the id as UTF-8 hex text.
    """

    id: str
    relays: list[str] = field(default_factory=list)

    def to_bech32(self) -> str:
        entries = [TlvEntry(SPECIAL_TYPE, encode_utf8(self.id, "nevent id"))]
        entries += _relay_entries(self.relays)
        return nip19.encode(nip19.EVENT_PREFIX, nip19.write_tlv(entries))

    @classmethod
    def from_bech32(cls, nevent: str) -> NEvent:
        data = nip19.decode(nip19.EVENT_PREFIX, nevent)
        event = cls(id="")
        for entry in nip19.read_tlv(data):
            if entry.type == SPECIAL_TYPE:
                event.id = decode_utf8(entry.value, "nevent id")
            else:
                event.relays.append(decode_utf8(entry.value, "nevent relay"))
        return event


@dataclass
class Profile:
    """
    Profile reference. The special entry holds the 32 raw public key bytes;
    a profile without a key is written with 32 zero bytes.
    """

    public_key: PublicKey | None
    relays: list[str] = field(default_factory=list)

    def to_bech32(self) -> str:
        key = self.public_key.serialize() if self.public_key is not None else bytes(nip19.PUBKEY_SIZE)
        entries = [TlvEntry(SPECIAL_TYPE, key)]
        entries += _relay_entries(self.relays)
        return nip19.encode(nip19.PROFILE_PREFIX, nip19.write_tlv(entries))

    @classmethod
    def from_bech32(cls, nprofile: str, strict: bool = True, curve: Curve | None = None) -> Profile:
        """
        Decode an nprofile string.

        With ``strict=False`` a special entry that is not a valid key (such
        as the zero placeholder) yields ``public_key=None`` instead of
        raising InvalidKeyError.
        """
        data = nip19.decode(nip19.PROFILE_PREFIX, nprofile)
        profile = cls(public_key=None)
        for entry in nip19.read_tlv(data):
            if entry.type == SPECIAL_TYPE:
                if entry.length != nip19.PUBKEY_SIZE:
                    raise InvalidLengthError(nip19.PUBKEY_SIZE, entry.length)
                try:
                    profile.public_key = PublicKey(entry.value, curve)
                except InvalidKeyError:
                    if strict:
                        raise
                    profile.public_key = None
            else:
                profile.relays.append(decode_utf8(entry.value, "nprofile relay"))
        return profile


_DECODERS = {
    nip19.PUBLIC_PREFIX: PublicKey.from_bech32,
    nip19.SECRET_PREFIX: SecretKey.from_bech32,
    nip19.EVENT_PREFIX: NEvent.from_bech32,
    nip19.PROFILE_PREFIX: Profile.from_bech32,
}


def decode_entity(bech: str) -> Entity:
    """
    Decode any supported NIP-19 identifier, picking the type from its prefix.
    """
    hrp, _ = nip19.decode_any(bech)
    try:
        decoder = _DECODERS[hrp]
    except KeyError:
        raise Bech32Error(f"unsupported NIP-19 prefix {hrp!r}") from None
    return decoder(bech)
