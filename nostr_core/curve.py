"""secp256k1 context handle.

libsecp256k1 keeps its precomputed tables in a context object. The binding
creates one context at import and only ever reads it afterwards, so it is
safe to share across threads. ``Curve`` is the handle key, signing and
verification code is given; callers pass one explicitly, and
``default_curve()`` hands out a fresh handle when they do not.
"""

from __future__ import annotations

import secp256k1


class Curve:
    """Read-only secp256k1 context used for signing, verification and key parsing."""

    def __init__(self) -> None:
        self._ctx = secp256k1.secp256k1_ctx

    @property
    def ctx(self):
        return self._ctx

    def generate_private_key(self) -> secp256k1.PrivateKey:
        return secp256k1.PrivateKey(None, raw=True)

    def private_key(self, raw: bytes) -> secp256k1.PrivateKey:
        return secp256k1.PrivateKey(raw, raw=True)

    def xonly_public_key(self, xonly: bytes) -> secp256k1.PublicKey:
        """
        Lift a 32-byte x-only key to a full point with even Y (BIP-340).
        """
        return secp256k1.PublicKey(b"\x02" + xonly, raw=True)


def default_curve() -> Curve:
    return Curve()
