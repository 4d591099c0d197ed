"""
BIP39 mnemonic to seed conversion.
"""

from __future__ import annotations

import unicodedata
from hashlib import pbkdf2_hmac

PBKDF2_ROUNDS = 2048
SEED_LENGTH = 64


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """
    Convert BIP39 mnemonic to a 64-byte seed.
    The wordlist checksum is not validated.
    """
    mnemonic_bytes = unicodedata.normalize("NFKD", mnemonic).encode("utf-8")
    salt = unicodedata.normalize("NFKD", "mnemonic" + passphrase).encode("utf-8")

    return pbkdf2_hmac("sha512", mnemonic_bytes, salt, PBKDF2_ROUNDS, dklen=SEED_LENGTH)
