import hashlib
import json
import logging
import time
from dataclasses import dataclass, field

from .curve import Curve
from .errors import FormatError, HashMismatchError
from .keys import Pair, PublicKey, verify as verify_signature
from .nip04 import encrypt_content
from .signature import Signature
from .utils import decode_hex, encode_utf8

logger = logging.getLogger(__name__)

SET_METADATA = 0
TEXT_NOTE = 1
RECOMMEND_RELAY = 2
ENCRYPTED_DIRECT_MESSAGE = 4

U32_MAX = 0xFFFFFFFF

FIELDS = ("id", "pubkey", "created_at", "kind", "tags", "content", "sig")


# NIP-01 canonical serialization: position fixes the order, not field names
def serialize_for_id(pubkey: str, created_at: int, kind: int, tags: list, content: str) -> bytes:
    event_data = [0, pubkey, created_at, kind, tags, content]
    serialized = json.dumps(event_data, separators=(",", ":"), ensure_ascii=False)
    return encode_utf8(serialized, "event")


def compute_id(pubkey: str, created_at: int, kind: int, tags: list, content: str) -> bytes:
    return hashlib.sha256(serialize_for_id(pubkey, created_at, kind, tags, content)).digest()


@dataclass
class Event:
    """
    A NIP-01 event.

    Events built with ``new`` are signed; events read from JSON carry their
    id and sig as-is until ``verify`` is called.
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: list[list[str]] = field(default_factory=list)
    content: str = ""
    sig: str = ""

    @classmethod
    def new(
        cls,
        kind: int,
        tags: list[list[str]],
        content: str,
        pair: Pair,
        created_at: int | None = None,
    ) -> "Event":
        """
        Build and sign an event with the pair's key and the current time.
        """
        event = cls(
            id="",
            pubkey=pair.public_key.hex(),
            created_at=int(time.time()) if created_at is None else created_at,
            kind=kind,
            tags=[list(t) for t in tags],
            content=content,
        )
        digest = event.hash()
        event.sig = pair.sign(digest).hex()
        event.id = digest.hex()
        logger.debug("Signed event %s kind=%d", event.id, kind)
        return event

    def hash(self) -> bytes:
        return compute_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def verify(self, curve: Curve | None = None) -> None:
        """
        Raise HashMismatchError if the fields were changed after signing,
        VerificationError if the signature itself is wrong.
        """
        computed = self.hash().hex()
        if computed != self.id:
            raise HashMismatchError(self.id, computed)
        sig = Signature.from_hex(self.sig)
        data = decode_hex(self.id, 32, "event id")
        pk = PublicKey.from_hex(self.pubkey, curve)
        verify_signature(sig, data, pk, curve)
        logger.debug("Verified event %s", self.id)

    def is_valid(self, curve: Curve | None = None) -> bool:
        try:
            self.verify(curve)
        except ValueError:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": self.tags,
            "content": self.content,
            "sig": self.sig,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """
        Read an event, ignoring fields NIP-01 does not define (e.g. "ots").
        """
        if not isinstance(data, dict):
            raise FormatError("event must be a JSON object")
        missing = [name for name in FIELDS if name not in data]
        if missing:
            raise FormatError(f"event is missing fields: {', '.join(missing)}")

        for name in ("id", "pubkey", "content", "sig"):
            if not isinstance(data[name], str):
                raise FormatError(f"event {name} must be a string")
        for name in ("created_at", "kind"):
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U32_MAX:
                raise FormatError(f"event {name} must be an integer in 0..{U32_MAX}")
        tags = data["tags"]
        if not isinstance(tags, list) or not all(
            isinstance(t, list) and all(isinstance(v, str) for v in t) for t in tags
        ):
            raise FormatError("event tags must be a list of string lists")

        # json.loads lets lone surrogates through
        for name in ("id", "pubkey", "content", "sig"):
            encode_utf8(data[name], f"event {name}")
        for tag in tags:
            for value in tag:
                encode_utf8(value, "event tag")

        return cls(
            id=data["id"],
            pubkey=data["pubkey"],
            created_at=data["created_at"],
            kind=data["kind"],
            tags=[list(t) for t in tags],
            content=data["content"],
            sig=data["sig"],
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> "Event":
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FormatError(f"invalid event JSON: {exc}") from exc
        return cls.from_dict(data)


def event_tag(event_id: str, relay: str | None = None) -> list[str]:
    return ["e", event_id] if relay is None else ["e", event_id, relay]


def profile_tag(pubkey: str, relay: str | None = None) -> list[str]:
    return ["p", pubkey] if relay is None else ["p", pubkey, relay]


# NIP-01 set metadata (kind:0)
def build_set_metadata(pair: Pair, name: str, about: str, picture: str) -> Event:
    content = json.dumps({"name": name, "about": about, "picture": picture}, separators=(",", ":"), ensure_ascii=False)
    return Event.new(SET_METADATA, [], content, pair)


# NIP-01 text note (kind:1)
def build_text_note(pair: Pair, content: str, tags: list[list[str]] | None = None) -> Event:
    return Event.new(TEXT_NOTE, tags or [], content, pair)


# NIP-01 recommend relay (kind:2)
def build_recommend_relay(pair: Pair, relay: str) -> Event:
    relay = (relay or "").strip()
    if not relay:
        raise FormatError("relay URL cannot be empty")
    return Event.new(RECOMMEND_RELAY, [], relay, pair)


# NIP-04 DM (kind:4)
def build_direct_message(pair: Pair, recipient: PublicKey, plaintext: str) -> Event:
    """
    tags: [["p", recipient_pubkey]]
    content: encrypted string
    """
    if not plaintext.strip():
        raise FormatError("DM message cannot be empty")
    content = encrypt_content(pair, recipient, plaintext)
    return Event.new(ENCRYPTED_DIRECT_MESSAGE, [profile_tag(recipient.hex())], content, pair)
