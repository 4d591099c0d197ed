"""
Test configuration for hdkeys tests.
"""

from __future__ import annotations

import pytest

from hdkeys.mnemonic import mnemonic_to_seed

REFERENCE_MNEMONIC = (
    "panda eyebrow bullet gorilla call smoke muffin taste mesh discover soft ostrich "
    "alcohol speed nation flash devote level hobby quick inner drive ghost inside"
)
REFERENCE_PATH = "m/44'/60'/0'/0/0"
REFERENCE_SECRET = bytes.fromhex(
    "ff1e68eb7bf2f48651c47ef0177eb815857322257c5894bb4cfd1176c9989314"
)


@pytest.fixture(scope="session")
def reference_seed() -> bytes:
    """Seed for the reference mnemonic with an empty passphrase."""
    return mnemonic_to_seed(REFERENCE_MNEMONIC)


@pytest.fixture
def vector1_seed() -> bytes:
    """BIP32 test vector 1 seed."""
    return bytes.fromhex("000102030405060708090a0b0c0d0e0f")
