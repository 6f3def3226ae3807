"""Exception hierarchy for nostr_core.

Every failure raised by the package derives from ``NostrError``, which is a
``ValueError`` so callers that only catch ``ValueError`` keep working.

```text
NostrError
├── FormatError                 -- invalid hex, UTF-8 or JSON
│   ├── HexError
│   └── Utf8Error
├── Bech32Error                 -- NIP-19 outer encoding
│   ├── InvalidPrefixError
│   ├── InvalidVariantError
│   └── ChecksumError
├── TlvError                    -- NIP-19 payload structure
│   ├── MissingLengthError
│   ├── TruncatedValueError
│   ├── InvalidTypeError
│   ├── UnexpectedDataError
│   └── InvalidLengthError
├── CryptoError
│   ├── InvalidKeyError
│   ├── InvalidSignatureError
│   ├── InvalidMessageError
│   ├── NoSecretKeyError
│   ├── HashMismatchError
│   └── VerificationError
├── MnemonicError
├── PaddingError
└── ConfigurationError
```
"""

from __future__ import annotations


class NostrError(ValueError):
    """Base exception for all nostr_core errors. Never raised directly."""


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


class FormatError(NostrError):
    """Input is not valid hex, UTF-8 or JSON, or lacks a required field."""


class HexError(FormatError):
    """A hex string has the wrong length or non-hex characters."""


class Utf8Error(FormatError):
    """A byte string expected to hold UTF-8 text does not decode."""


# ---------------------------------------------------------------------------
# Bech32
# ---------------------------------------------------------------------------


class Bech32Error(NostrError):
    """The outer bech32 string is malformed."""


class InvalidPrefixError(Bech32Error):
    def __init__(self, expected: str, found: str) -> None:
        super().__init__(f"invalid prefix (expected {expected!r}, found {found!r})")
        self.expected = expected
        self.found = found


class InvalidVariantError(Bech32Error):
    def __init__(self) -> None:
        super().__init__("variant must be bech32, not bech32m")


class ChecksumError(Bech32Error):
    """Checksum does not match either bech32 variant."""


# ---------------------------------------------------------------------------
# TLV
# ---------------------------------------------------------------------------


class TlvError(NostrError):
    """The type-length-value payload inside a bech32 identifier is malformed."""


class MissingLengthError(TlvError):
    def __init__(self, position: int) -> None:
        super().__init__(f"length is missing at offset {position}")
        self.position = position


class TruncatedValueError(TlvError):
    def __init__(self, expected: int, found: int) -> None:
        super().__init__(f"truncated value (expected {expected} bytes, found {found})")
        self.expected = expected
        self.found = found


class InvalidTypeError(TlvError):
    def __init__(self, found: int) -> None:
        super().__init__(f"invalid type (found {found:#04x})")
        self.found = found


class UnexpectedDataError(TlvError):
    def __init__(self, found: bytes) -> None:
        super().__init__(f"unexpected data (found {found.hex()})")
        self.found = found


class InvalidLengthError(TlvError):
    def __init__(self, expected: int, found: int) -> None:
        super().__init__(f"invalid length (expected {expected}, found {found})")
        self.expected = expected
        self.found = found


# ---------------------------------------------------------------------------
# Cryptography
# ---------------------------------------------------------------------------


class CryptoError(NostrError):
    """Base for key, signature and verification failures."""


class InvalidKeyError(CryptoError):
    """Bytes do not encode a valid secp256k1 secret or x-only public key."""


class InvalidSignatureError(CryptoError):
    """A signature is not 64 bytes (128 hex characters)."""


class InvalidMessageError(CryptoError):
    """The data to sign or verify is not a 32-byte message."""


class NoSecretKeyError(CryptoError):
    def __init__(self) -> None:
        super().__init__("no secret key in the key pair")


class HashMismatchError(CryptoError):
    """The event id does not match the hash of its fields."""

    def __init__(self, expected: str, found: str) -> None:
        super().__init__(f"hash mismatch (id {expected}, computed {found})")
        self.expected = expected
        self.found = found


class VerificationError(CryptoError):
    """The Schnorr signature does not verify for the message and key."""


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


class MnemonicError(NostrError):
    """A BIP-39 phrase fails the wordlist or checksum check."""


class PaddingError(NostrError):
    """PKCS7 padding is inconsistent or the ciphertext is not block aligned."""


class ConfigurationError(NostrError):
    """No key material could be loaded from the environment."""
