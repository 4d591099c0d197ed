"""
BIP32 HD private key derivation on secp256k1.

Both the chain code and the private scalar are held in SecretBuffers and
wiped when the key is wiped. Protection is best-effort: HMAC digests and
the bytes returned by secret() are ordinary immutable objects.
"""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Iterable
from types import TracebackType

import base58
from coincurve import PrivateKey
from loguru import logger

from hdkeys.errors import (
    CurveParameterError,
    InvalidChildNumberError,
    InvalidExtendedKeyError,
    KeyWipedError,
)
from hdkeys.path import ChildNumber, DerivationPath, into_derivation_path
from hdkeys.protected import SECRET_SIZE, SecretBuffer

# secp256k1 curve order
SECP256K1_N = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

MASTER_HMAC_KEY = b"Bitcoin seed"

# Serialized extended key layout:
# version(4) depth(1) parent fingerprint(4) child number(4) chain code(32) key data(33) checksum(4)
XPRV_LENGTH = 82
XPRV_VERSIONS = {
    bytes.fromhex("0488ADE4"): "mainnet",
    bytes.fromhex("04358394"): "testnet",
}

RECOMMENDED_SEED_LENGTHS = range(16, 65)

PathLike = str | DerivationPath | Iterable[ChildNumber | int]


def _scalar_from_bytes(data: bytes | bytearray | memoryview) -> int:
    """Interpret 32 big-endian bytes as a scalar in [1, n)."""
    value = int.from_bytes(data, "big")
    if not 0 < value < SECP256K1_N:
        raise CurveParameterError("Value is not a valid secp256k1 private key")
    return value


def _new_chain_hmac(chain_code: SecretBuffer) -> hmac.HMAC:
    key = bytearray(chain_code.view())
    try:
        return hmac.new(key, digestmod=hashlib.sha512)
    except (TypeError, ValueError) as e:
        raise InvalidChildNumberError(f"Cannot key HMAC with chain code: {e}") from e
    finally:
        for i in range(len(key)):
            key[i] = 0


class ExtendedPrivKey:
    """
    Extended private key: a secp256k1 scalar plus a 32-byte chain code.

    Derivation never mutates the parent, so siblings can be derived from a
    shared parent freely. Use as a context manager to wipe on exit:

        with ExtendedPrivKey.derive(seed, "m/44'/60'/0'/0/0") as key:
            secret = key.secret()
    """

    def __init__(
        self,
        secret_key: bytes | bytearray | SecretBuffer,
        chain_code: bytes | bytearray | SecretBuffer,
        depth: int = 0,
        child_number: ChildNumber | None = None,
    ):
        # Buffers passed in are owned from here on and wiped on any failure
        owned = [b for b in (secret_key, chain_code) if isinstance(b, SecretBuffer)]
        try:
            if not isinstance(secret_key, SecretBuffer):
                secret_key = SecretBuffer(secret_key)
                owned.append(secret_key)
            if not isinstance(chain_code, SecretBuffer):
                chain_code = SecretBuffer(chain_code)
                owned.append(chain_code)
            self._secret = secret_key
            self._chain_code = chain_code
            _scalar_from_bytes(self._secret.view())
        except (CurveParameterError, ValueError):
            for buf in owned:
                buf.wipe()
            raise

        self.depth = depth
        self.child_number = child_number if child_number is not None else ChildNumber(0)

    @classmethod
    def from_seed(cls, seed: bytes) -> ExtendedPrivKey:
        """Create master key from seed"""
        if len(seed) not in RECOMMENDED_SEED_LENGTHS:
            logger.warning(
                f"Seed length {len(seed)} bytes is outside the recommended 16-64 byte range"
            )

        digest = hmac.new(MASTER_HMAC_KEY, seed, hashlib.sha512).digest()
        return cls(digest[:SECRET_SIZE], digest[SECRET_SIZE:], depth=0)

    @classmethod
    def derive(cls, seed: bytes, path: PathLike = "m") -> ExtendedPrivKey:
        """
        Derive the key at path from seed.

        The path is folded left to right from the master key; the first
        failing step is raised and nothing is returned. The master key and
        every intermediate key are wiped before returning.
        """
        derivation_path = into_derivation_path(path)
        master = cls.from_seed(seed)
        try:
            return master.derive_path(derivation_path)
        finally:
            master.wipe()

    @classmethod
    def from_xprv(cls, xprv: str, strict: bool = True) -> ExtendedPrivKey:
        """
        Parse a Base58Check serialized extended private key.

        Only the chain code and key bytes are required to be well formed.
        With strict=True the checksum, version, key-data prefix and the
        depth/fingerprint/child-number consistency of a master key are
        validated as well.
        """
        try:
            data = base58.b58decode(xprv)
        except ValueError as e:
            raise InvalidExtendedKeyError(f"Invalid base58 encoding: {e}") from e

        if len(data) != XPRV_LENGTH:
            raise InvalidExtendedKeyError(
                f"Extended key must be {XPRV_LENGTH} bytes, got {len(data)}"
            )

        version = data[0:4]
        depth = data[4]
        parent_fingerprint = data[5:9]
        child_number = ChildNumber(int.from_bytes(data[9:13], "big"))

        if strict:
            try:
                base58.b58decode_check(xprv)
            except ValueError as e:
                raise InvalidExtendedKeyError("Extended key checksum mismatch") from e
            if version not in XPRV_VERSIONS:
                raise InvalidExtendedKeyError(
                    f"Unknown extended private key version {version.hex()}"
                )
            if data[45] != 0:
                raise InvalidExtendedKeyError("Private key data must be prefixed with 0x00")
            if depth == 0 and (parent_fingerprint != b"\x00" * 4 or child_number.index != 0):
                raise InvalidExtendedKeyError(
                    "Master key must have zero parent fingerprint and child number"
                )

        return cls(data[46:78], data[13:45], depth=depth, child_number=child_number)

    parse = from_xprv

    @property
    def chain_code(self) -> SecretBuffer:
        self._ensure_live()
        return self._chain_code

    @property
    def wiped(self) -> bool:
        return self._secret.wiped or self._chain_code.wiped

    def secret(self) -> bytes:
        """
        Return the 32-byte private scalar.

        The returned bytes are an unprotected copy; callers are responsible
        for them.
        """
        self._ensure_live()
        return bytes(self._secret)

    def public_key(self) -> bytes:
        """Compressed 33-byte public key for this scalar"""
        self._ensure_live()
        return PrivateKey(bytes(self._secret)).public_key.format(compressed=True)

    def child(self, index: ChildNumber | int) -> ExtendedPrivKey:
        """Derive the child key at index (>= 2^31 for hardened)"""
        self._ensure_live()
        child_number = index if isinstance(index, ChildNumber) else ChildNumber(index)

        mac = _new_chain_hmac(self._chain_code)
        if child_number.is_normal():
            mac.update(self.public_key())
        else:
            mac.update(b"\x00")
            mac.update(self._secret.view())
        mac.update(child_number.to_bytes())

        digest = mac.digest()
        tweak = _scalar_from_bytes(digest[:SECRET_SIZE])
        parent_key_int = _scalar_from_bytes(self._secret.view())

        child_key_int = (parent_key_int + tweak) % SECP256K1_N
        if child_key_int == 0:
            raise CurveParameterError(f"Derived key for index {child_number} is zero")

        logger.debug(
            f"Derived child {child_number} at depth {self.depth + 1} "
            f"({'hardened' if child_number.is_hardened() else 'normal'})"
        )

        return ExtendedPrivKey(
            child_key_int.to_bytes(SECRET_SIZE, "big"),
            digest[SECRET_SIZE:],
            depth=self.depth + 1,
            child_number=child_number,
        )

    def derive_path(self, path: PathLike) -> ExtendedPrivKey:
        """
        Derive a descendant, interpreting path relative to this key.

        Always returns a new key; this key is left untouched while the
        intermediate keys are wiped.
        """
        self._ensure_live()
        key = self
        for index in into_derivation_path(path):
            try:
                child = key.child(index)
            finally:
                if key is not self:
                    key.wipe()
            key = child

        if key is self:
            return self.copy()
        return key

    def copy(self) -> ExtendedPrivKey:
        """Independent copy with its own buffers"""
        self._ensure_live()
        return ExtendedPrivKey(
            SecretBuffer(self._secret.view()),
            SecretBuffer(self._chain_code.view()),
            depth=self.depth,
            child_number=self.child_number,
        )

    def wipe(self) -> None:
        """Zeroize both the private scalar and the chain code"""
        self._secret.wipe()
        self._chain_code.wipe()

    def _ensure_live(self) -> None:
        if self.wiped:
            raise KeyWipedError("Extended key has been wiped")

    def __enter__(self) -> ExtendedPrivKey:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedPrivKey):
            return NotImplemented
        # Compare both buffers unconditionally
        same_secret = self._secret == other._secret
        same_chain = self._chain_code == other._chain_code
        return same_secret and same_chain

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "wiped" if self.wiped else "live"
        return f"ExtendedPrivKey(depth={self.depth}, child_number={self.child_number}, {state})"
