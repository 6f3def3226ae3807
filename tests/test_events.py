"""Tests for NIP-01 event identity: hashing, signing, verification, JSON."""

from __future__ import annotations

import json

import pytest

from nostr_core.errors import (
    FormatError,
    HashMismatchError,
    HexError,
    InvalidKeyError,
    InvalidSignatureError,
    NoSecretKeyError,
    Utf8Error,
    VerificationError,
)
from nostr_core.events import (
    ENCRYPTED_DIRECT_MESSAGE,
    RECOMMEND_RELAY,
    SET_METADATA,
    TEXT_NOTE,
    Event,
    build_direct_message,
    build_recommend_relay,
    build_set_metadata,
    build_text_note,
    event_tag,
    profile_tag,
    serialize_for_id,
)
from nostr_core.keys import Pair
from nostr_core.nip04 import decrypt_content

SIMPLE_JSON = (
    '{"id":"id","pubkey":"pubkey","created_at":0,"kind":1,'
    '"tags":[["p","profile","relays"]],"content":"content","sig":"sig"}'
)


def _simple_event() -> Event:
    return Event(
        id="id",
        pubkey="pubkey",
        created_at=0,
        kind=1,
        tags=[["p", "profile", "relays"]],
        content="content",
        sig="sig",
    )


@pytest.fixture
def reference_event() -> Event:
    return Event(
        id="6623d3fb9270903631ee00c9683be7065726244518ea3fe334b3b490a8bece20",
        pubkey="c2e54fc64221e3b58dd960507db72909956cc0aa41019626ca64112984b85c2d",
        created_at=1675631647,
        kind=70202,
        tags=[],
        content="test",
        sig=(
            "aaeba9765a6a6a82833fc5593fc3fe70997371a4fbd50afc064e2a50d7c21b2a"
            "7910f796ead8a4fcd2f7c592b8603c9cbe4f4756c6650127ba8334782ca53247"
        ),
    )


# ---------------------------------------------------------------------------
# canonical hash
# ---------------------------------------------------------------------------


def test_canonical_preimage_is_compact():
    data = serialize_for_id("ab", 1, 2, [["e", "x"]], "hi")
    assert data == b'[0,"ab",1,2,[["e","x"]],"hi"]'


def test_canonical_preimage_keeps_unicode():
    data = serialize_for_id("ab", 1, 2, [], "héllo\n")
    assert data == '[0,"ab",1,2,[],"héllo\\n"]'.encode("utf-8")


def test_hash_matches_reference(reference_event: Event):
    assert reference_event.hash().hex() == reference_event.id


def test_reference_event_verifies(reference_event: Event):
    reference_event.verify()
    assert reference_event.is_valid()


# ---------------------------------------------------------------------------
# new / verify
# ---------------------------------------------------------------------------


def test_new_event_verifies(pair: Pair):
    event = Event.new(0, [], "content", pair)
    event.verify()
    assert event.pubkey == pair.public_key.hex()
    assert len(event.id) == 64
    assert len(event.sig) == 128


def test_new_event_uses_given_time(pair: Pair):
    event = Event.new(1, [], "x", pair, created_at=1700000000)
    assert event.created_at == 1700000000
    event.verify()


def test_verify_is_idempotent_and_pure(pair: Pair):
    event = Event.new(1, [event_tag("ab" * 32)], "note", pair)
    before = event.to_dict()
    event.verify()
    event.verify()
    assert event.to_dict() == before


def test_new_requires_secret_key(pair: Pair):
    with pytest.raises(NoSecretKeyError):
        Event.new(1, [], "x", Pair.from_public_key(pair.public_key))


@pytest.mark.parametrize(
    "field, value",
    [
        ("content", "edited"),
        ("tags", [["p", "00" * 32]]),
        ("kind", 7),
        ("created_at", 1),
    ],
)
def test_mutation_after_signing_is_hash_mismatch(pair: Pair, field: str, value):
    event = Event.new(1, [], "original", pair, created_at=1700000000)
    setattr(event, field, value)
    with pytest.raises(HashMismatchError):
        event.verify()


def test_swapped_pubkey_is_hash_mismatch(pair: Pair, curve):
    event = Event.new(1, [], "original", pair)
    event.pubkey = Pair.generate(curve).public_key.hex()
    with pytest.raises(HashMismatchError):
        event.verify()


def test_resigned_with_other_key_is_verification_error(pair: Pair, curve):
    event = Event.new(1, [], "original", pair)
    other = Event.new(1, [], "original", Pair.generate(curve))
    event.sig = other.sig
    with pytest.raises(VerificationError):
        event.verify()


def test_malformed_sig_is_parse_error(pair: Pair):
    event = Event.new(1, [], "x", pair)
    event.sig = "not hex"
    with pytest.raises(InvalidSignatureError):
        event.verify()


def test_malformed_pubkey_is_parse_error():
    event = Event(id="", pubkey="zz", created_at=0, kind=1, tags=[], content="", sig="00" * 64)
    event.id = event.hash().hex()
    with pytest.raises(InvalidKeyError):
        event.verify()


def test_non_hex_id_is_hash_mismatch():
    event = _simple_event()
    with pytest.raises(HashMismatchError):
        event.verify()
    assert not event.is_valid()


def test_hex_error_is_format_error():
    assert issubclass(HexError, FormatError)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def test_serialize_works():
    assert _simple_event().to_json() == SIMPLE_JSON


def test_deserialize_works():
    assert Event.from_json(SIMPLE_JSON) == _simple_event()


def test_unknown_fields_are_ignored_and_not_written():
    data = json.loads(SIMPLE_JSON)
    data["ots"] = "proof"
    event = Event.from_dict(data)
    assert event == _simple_event()
    assert "ots" not in event.to_json()


def test_json_round_trip_keeps_signature(pair: Pair):
    event = Event.new(1, [["t", "nostr"]], "round trip", pair)
    again = Event.from_json(event.to_json())
    assert again == event
    again.verify()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        '{"id":"id"}',
        SIMPLE_JSON.replace('"kind":1', '"kind":"1"'),
        SIMPLE_JSON.replace('"created_at":0', '"created_at":-5'),
        SIMPLE_JSON.replace('[["p","profile","relays"]]', '[["p",1]]'),
        SIMPLE_JSON.replace('"created_at":0', '"created_at":4294967296'),
        SIMPLE_JSON.replace('"kind":1', '"kind":4294967296'),
    ],
)
def test_malformed_json_rejected(raw: str):
    with pytest.raises(FormatError):
        Event.from_json(raw)


def test_u32_bounds_accepted():
    event = Event.from_json(SIMPLE_JSON.replace('"kind":1', '"kind":4294967295'))
    assert event.kind == 4294967295


@pytest.mark.parametrize(
    "raw",
    [
        SIMPLE_JSON.replace('"content":"content"', '"content":"\\ud800"'),
        SIMPLE_JSON.replace('"relays"', '"\\udfff"'),
    ],
)
def test_lone_surrogate_json_rejected(raw: str):
    with pytest.raises(Utf8Error):
        Event.from_json(raw)


def test_lone_surrogate_content_cannot_be_signed(pair: Pair):
    with pytest.raises(Utf8Error):
        Event.new(TEXT_NOTE, [], "\ud800", pair)


def test_lone_surrogate_hash_is_format_error():
    event = _simple_event()
    event.content = "\ud800"
    with pytest.raises(FormatError):
        event.verify()


# ---------------------------------------------------------------------------
# builders
# ---------------------------------------------------------------------------


def test_build_text_note(pair: Pair):
    event = build_text_note(pair, "hello", tags=[profile_tag("ab" * 32, "wss://r")])
    assert event.kind == TEXT_NOTE
    assert event.tags == [["p", "ab" * 32, "wss://r"]]
    event.verify()


def test_build_set_metadata(pair: Pair):
    event = build_set_metadata(pair, "alice", "about me", "https://x/p.png")
    assert event.kind == SET_METADATA
    assert json.loads(event.content) == {"name": "alice", "about": "about me", "picture": "https://x/p.png"}
    event.verify()


def test_build_recommend_relay(pair: Pair):
    event = build_recommend_relay(pair, " wss://relay.example ")
    assert event.kind == RECOMMEND_RELAY
    assert event.content == "wss://relay.example"


def test_build_recommend_relay_rejects_empty(pair: Pair):
    with pytest.raises(FormatError):
        build_recommend_relay(pair, "  ")


def test_build_direct_message(pair: Pair, curve):
    bob = Pair.generate(curve)
    event = build_direct_message(pair, bob.public_key, "secret hello")
    assert event.kind == ENCRYPTED_DIRECT_MESSAGE
    assert event.tags == [["p", bob.public_key.hex()]]
    assert "?iv=" in event.content
    event.verify()
    assert decrypt_content(bob, pair.public_key, event.content) == "secret hello"


def test_build_direct_message_rejects_empty(pair: Pair, curve):
    with pytest.raises(FormatError):
        build_direct_message(pair, Pair.generate(curve).public_key, "   ")


def test_tag_helpers():
    assert event_tag("id") == ["e", "id"]
    assert event_tag("id", "wss://r") == ["e", "id", "wss://r"]
    assert profile_tag("pk") == ["p", "pk"]
