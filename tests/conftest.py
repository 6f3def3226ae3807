"""Shared fixtures."""

from __future__ import annotations

import pytest

from nostr_core.curve import Curve
from nostr_core.keys import Pair, PublicKey


@pytest.fixture(scope="session")
def curve() -> Curve:
    return Curve()


@pytest.fixture
def pair(curve: Curve) -> Pair:
    return Pair.generate(curve)


@pytest.fixture
def public_key() -> PublicKey:
    return PublicKey.from_hex("3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d")
