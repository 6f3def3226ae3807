"""secp256k1 key material for Nostr (NIP-01, NIP-06, NIP-19).

Public keys are 32-byte x-only keys as used by BIP-340. A ``Pair`` always has
a public key; it has a secret key only when it can sign.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives.asymmetric import ec

from . import nip19
from .curve import Curve, default_curve
from .errors import HexError, InvalidKeyError, InvalidMessageError, NoSecretKeyError, VerificationError
from .signature import Signature
from .utils import decode_hex

logger = logging.getLogger(__name__)

KEY_SIZE = 32
MESSAGE_SIZE = 32


class SecretKey:
    """A 32-byte secp256k1 scalar."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes, curve: Curve | None = None) -> None:
        if not isinstance(raw, (bytes, bytearray)) or len(raw) != KEY_SIZE:
            raise InvalidKeyError(f"secret key must be {KEY_SIZE} bytes")
        try:
            (curve or default_curve()).private_key(bytes(raw))
        except Exception as exc:
            raise InvalidKeyError("secret key is not a valid secp256k1 scalar") from exc
        self._raw = bytes(raw)

    @classmethod
    def from_bytes(cls, raw: bytes, curve: Curve | None = None) -> SecretKey:
        return cls(raw, curve)

    @classmethod
    def from_hex(cls, s: str, curve: Curve | None = None) -> SecretKey:
        try:
            raw = decode_hex(s, KEY_SIZE, "secret key")
        except HexError as exc:
            raise InvalidKeyError(str(exc)) from exc
        return cls(raw, curve)

    @classmethod
    def from_bech32(cls, nsec: str, curve: Curve | None = None) -> SecretKey:
        """Parse an ``nsec1...`` string."""
        return cls(nip19.decode(nip19.SECRET_PREFIX, nsec), curve)

    def serialize(self) -> bytes:
        return self._raw

    def hex(self) -> str:
        return self._raw.hex()

    def display_as_nsec(self) -> str:
        return nip19.encode(nip19.SECRET_PREFIX, self._raw)

    display_as_identifier = display_as_nsec

    def public_key(self, curve: Curve | None = None) -> PublicKey:
        priv = (curve or default_curve()).private_key(self._raw)
        return PublicKey(priv.pubkey.serialize(compressed=True)[1:33], curve)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretKey):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"


class PublicKey:
    """A 32-byte x-only secp256k1 public key."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes, curve: Curve | None = None) -> None:
        if not isinstance(raw, (bytes, bytearray)) or len(raw) != KEY_SIZE:
            raise InvalidKeyError(f"public key must be {KEY_SIZE} bytes")
        try:
            (curve or default_curve()).xonly_public_key(bytes(raw))
        except Exception as exc:
            raise InvalidKeyError("public key is not a point on secp256k1") from exc
        self._raw = bytes(raw)

    @classmethod
    def from_bytes(cls, raw: bytes, curve: Curve | None = None) -> PublicKey:
        return cls(raw, curve)

    @classmethod
    def from_hex(cls, s: str, curve: Curve | None = None) -> PublicKey:
        try:
            raw = decode_hex(s, KEY_SIZE, "public key")
        except HexError as exc:
            raise InvalidKeyError(str(exc)) from exc
        return cls(raw, curve)

    @classmethod
    def from_bech32(cls, npub: str, curve: Curve | None = None) -> PublicKey:
        """Parse an ``npub1...`` string."""
        return cls(nip19.decode(nip19.PUBLIC_PREFIX, npub), curve)

    def serialize(self) -> bytes:
        return self._raw

    def hex(self) -> str:
        return self._raw.hex()

    def to_bech32(self) -> str:
        return nip19.encode(nip19.PUBLIC_PREFIX, self._raw)

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"PublicKey({self.hex()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)


def _require_message(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray)) or len(data) != MESSAGE_SIZE:
        raise InvalidMessageError(f"message must be {MESSAGE_SIZE} bytes")
    return bytes(data)


def verify(signature: Signature, data: bytes, public_key: PublicKey, curve: Curve | None = None) -> None:
    """
    Check a BIP-340 signature over a 32-byte message.

    Raises VerificationError when the signature does not match.
    """
    msg = _require_message(data)
    pub = (curve or default_curve()).xonly_public_key(public_key.serialize())
    if not pub.schnorr_verify(msg, signature.serialize(), None, raw=True):
        raise VerificationError(f"invalid signature for public key {public_key.hex()}")


def derive_shared_secret(our_secret: SecretKey, their_public: PublicKey) -> bytes:
    """
    ECDH between our scalar and the peer's x-only key (lifted with even Y).

    Returns the 32-byte X coordinate of the shared point, unhashed, which is
    what NIP-04 uses as the AES key. Both sides lift the peer key the same
    way, so they arrive at the same value.
    """
    priv = ec.derive_private_key(int.from_bytes(our_secret.serialize(), "big"), ec.SECP256K1())
    pub = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), b"\x02" + their_public.serialize())
    shared = priv.exchange(ec.ECDH(), pub)
    if len(shared) != KEY_SIZE:
        raise InvalidKeyError(f"ECDH shared secret unexpected length: {len(shared)}")
    return shared


class Pair:
    """Keypair for the secp256k1 curve, as defined in NIP-01."""

    def __init__(
        self,
        secret_key: SecretKey | None,
        public_key: PublicKey,
        curve: Curve | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._public_key = public_key
        self._curve = curve

    @property
    def curve(self) -> Curve:
        return self._curve or default_curve()

    @property
    def secret_key(self) -> SecretKey | None:
        return self._secret_key

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def can_sign(self) -> bool:
        return self._secret_key is not None

    @classmethod
    def generate(cls, curve: Curve | None = None) -> Pair:
        priv = (curve or default_curve()).generate_private_key()
        pair = cls.from_secret_key(SecretKey(priv.private_key, curve), curve)
        logger.debug("Generated key pair %s", pair.public_key.hex())
        return pair

    @classmethod
    def from_secret_key(cls, secret_key: SecretKey, curve: Curve | None = None) -> Pair:
        return cls(secret_key, secret_key.public_key(curve), curve)

    @classmethod
    def from_public_key(cls, public_key: PublicKey, curve: Curve | None = None) -> Pair:
        return cls(None, public_key, curve)

    @classmethod
    def from_hex(cls, secret_hex: str, curve: Curve | None = None) -> Pair:
        return cls.from_secret_key(SecretKey.from_hex(secret_hex, curve), curve)

    @classmethod
    def from_nsec(cls, nsec: str, curve: Curve | None = None) -> Pair:
        return cls.from_secret_key(SecretKey.from_bech32(nsec, curve), curve)

    @classmethod
    def from_mnemonic(cls, phrase: str, curve: Curve | None = None) -> Pair:
        """Derive the NIP-06 pair for a BIP-39 phrase."""
        from .mnemonic import Mnemonic

        return cls.from_secret_key(SecretKey(Mnemonic(phrase).to_bytes(), curve), curve)

    def shared_pair(self, their_public: PublicKey) -> Pair:
        """
        Pair whose secret key is the ECDH shared secret with *their_public*.
        """
        if self._secret_key is None:
            raise NoSecretKeyError()
        shared = derive_shared_secret(self._secret_key, their_public)
        return Pair.from_secret_key(SecretKey(shared, self._curve), self._curve)

    def sign(self, data: bytes) -> Signature:
        """Schnorr-sign a 32-byte message."""
        if self._secret_key is None:
            raise NoSecretKeyError()
        msg = _require_message(data)
        priv = self.curve.private_key(self._secret_key.serialize())
        return Signature(priv.schnorr_sign(msg, None, raw=True))

    def verify(self, signature: Signature, data: bytes, public_key: PublicKey | None = None) -> None:
        verify(signature, data, public_key or self._public_key, self._curve)

    def __repr__(self) -> str:
        return f"Pair(public_key={self._public_key.hex()!r}, can_sign={self.can_sign})"
