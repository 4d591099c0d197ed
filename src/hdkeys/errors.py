"""
Exceptions raised by hdkeys.
"""


class HDKeyError(Exception):
    """Base class for all key derivation errors."""


class CurveParameterError(HDKeyError):
    """A 32-byte value is not a valid secp256k1 scalar in [1, n)."""


class InvalidChildNumberError(HDKeyError):
    pass


class InvalidExtendedKeyError(HDKeyError):
    """Serialized extended private key could not be decoded."""


class InvalidPathError(HDKeyError, ValueError):
    pass


class KeyWipedError(HDKeyError):
    """The key material was already zeroized."""
