"""NIP-06: secret key derivation from a BIP-39 mnemonic.

Derivation path: m/44'/1237'/0'/0/0
"""

from __future__ import annotations

from embit import bip32
from mnemonic import Mnemonic as _Wordlist

from .errors import MnemonicError

DERIVATION_PATH = "m/44h/1237h/0h/0/0"
LANGUAGE = "english"


class Mnemonic:
    """A BIP-39 phrase that passed the wordlist and checksum check."""

    def __init__(self, phrase: str) -> None:
        phrase = " ".join((phrase or "").split())
        if not _Wordlist(LANGUAGE).check(phrase):
            raise MnemonicError("invalid BIP-39 seed phrase (unknown word or checksum failed)")
        self._phrase = phrase

    @classmethod
    def random(cls, strength: int = 256) -> Mnemonic:
        return cls(_Wordlist(LANGUAGE).generate(strength=strength))

    @property
    def phrase(self) -> str:
        return self._phrase

    def to_seed(self, passphrase: str = "") -> bytes:
        return _Wordlist.to_seed(self._phrase, passphrase=passphrase)

    def to_bytes(self) -> bytes:
        """The 32-byte secret key at the NIP-06 path."""
        root = bip32.HDKey.from_seed(self.to_seed())
        child = root.derive(DERIVATION_PATH)
        return child.key.serialize()

    def __repr__(self) -> str:
        return "Mnemonic(<redacted>)"
