"""
Wipe-on-release container for chain codes and private scalars.
"""

from __future__ import annotations

import hmac
from types import TracebackType

SECRET_SIZE = 32


class SecretBuffer:
    """
    Owned 32-byte secret with explicit zeroization.

    Content lives in a private bytearray so it can be overwritten in place.
    Use it as a context manager to wipe on every exit path; __del__ only
    wipes as a fallback since finalizer timing is not guaranteed.
    """

    __slots__ = ("_buf", "_wiped")

    def __init__(self, source: bytes | bytearray | memoryview):
        if len(source) != SECRET_SIZE:
            raise ValueError(f"SecretBuffer requires {SECRET_SIZE} bytes, got {len(source)}")
        self._buf = bytearray(SECRET_SIZE)
        self._buf[:] = source
        self._wiped = False

    @property
    def wiped(self) -> bool:
        return self._wiped

    def view(self) -> memoryview:
        """Read-only view over the buffer, no copy."""
        return memoryview(self._buf).toreadonly()

    def wipe(self) -> None:
        for i in range(len(self._buf)):
            self._buf[i] = 0
        self._wiped = True

    def __len__(self) -> int:
        return len(self._buf)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __getitem__(self, item: int | slice) -> int | bytes:
        if isinstance(item, slice):
            return bytes(self._buf[item])
        return self._buf[item]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBuffer):
            return NotImplemented
        return hmac.compare_digest(self._buf, other._buf)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "SecretBuffer(<redacted>)"

    __str__ = __repr__

    def __enter__(self) -> SecretBuffer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.wipe()

    def __del__(self) -> None:
        # Attributes may be missing if __init__ raised
        if getattr(self, "_buf", None) is not None:
            self.wipe()
