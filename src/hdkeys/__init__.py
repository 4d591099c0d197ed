"""
hdkeys - BIP32 hierarchical deterministic private keys for secp256k1

Provides master/child key derivation, xprv parsing and zeroizing
containers for key material.
"""

__version__ = "0.1.0"

from hdkeys.bip32 import SECP256K1_N, ExtendedPrivKey
from hdkeys.errors import (
    CurveParameterError,
    HDKeyError,
    InvalidChildNumberError,
    InvalidExtendedKeyError,
    InvalidPathError,
    KeyWipedError,
)
from hdkeys.mnemonic import mnemonic_to_seed
from hdkeys.path import HARDENED_OFFSET, ChildNumber, DerivationPath, into_derivation_path
from hdkeys.protected import SecretBuffer

__all__ = [
    "ChildNumber",
    "CurveParameterError",
    "DerivationPath",
    "ExtendedPrivKey",
    "HARDENED_OFFSET",
    "HDKeyError",
    "InvalidChildNumberError",
    "InvalidExtendedKeyError",
    "InvalidPathError",
    "KeyWipedError",
    "SECP256K1_N",
    "SecretBuffer",
    "into_derivation_path",
    "mnemonic_to_seed",
]
