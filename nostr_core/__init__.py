from .curve import Curve, default_curve
from .entities import NEvent, Profile, decode_entity
from .events import Event
from .keys import Pair, PublicKey, SecretKey, derive_shared_secret, verify
from .mnemonic import Mnemonic
from .signature import Signature

__all__ = [
    "Curve",
    "Event",
    "Mnemonic",
    "NEvent",
    "Pair",
    "Profile",
    "PublicKey",
    "SecretKey",
    "Signature",
    "decode_entity",
    "default_curve",
    "derive_shared_secret",
    "verify",
]
