"""
BIP32 derivation path notation (e.g., "m/44'/60'/0'/0/0").
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from hdkeys.errors import InvalidPathError

HARDENED_OFFSET = 0x80000000
MAX_INDEX = 0xFFFFFFFF


@dataclass(frozen=True, order=True)
class ChildNumber:
    """
    A single derivation step.

    Indices >= 2^31 are hardened; the stored index always includes the offset.
    """

    index: int

    def __post_init__(self) -> None:
        if not isinstance(self.index, int) or isinstance(self.index, bool):
            raise InvalidPathError(f"Child index must be an int, got {type(self.index).__name__}")
        if not 0 <= self.index <= MAX_INDEX:
            raise InvalidPathError(f"Child index out of range: {self.index}")

    @classmethod
    def normal(cls, index: int) -> ChildNumber:
        if not 0 <= index < HARDENED_OFFSET:
            raise InvalidPathError(f"Normal index out of range: {index}")
        return cls(index)

    @classmethod
    def hardened(cls, index: int) -> ChildNumber:
        if not 0 <= index < HARDENED_OFFSET:
            raise InvalidPathError(f"Hardened index out of range: {index}")
        return cls(index + HARDENED_OFFSET)

    @classmethod
    def from_str(cls, text: str) -> ChildNumber:
        """Parse "0", "44'", "44h" or "44H"."""
        part = text.strip()
        hardened = part.endswith(("'", "h", "H"))
        if hardened:
            part = part[:-1]

        if not (part.isascii() and part.isdigit()):
            raise InvalidPathError(f"Invalid path component: {text!r}")

        index = int(part)
        return cls.hardened(index) if hardened else cls.normal(index)

    def is_normal(self) -> bool:
        return self.index < HARDENED_OFFSET

    def is_hardened(self) -> bool:
        return not self.is_normal()

    def to_bytes(self) -> bytes:
        """4-byte big-endian serialization, as fed into the child HMAC."""
        return self.index.to_bytes(4, "big")

    def __int__(self) -> int:
        return self.index

    def __str__(self) -> str:
        if self.is_hardened():
            return f"{self.index - HARDENED_OFFSET}'"
        return str(self.index)


class DerivationPath:
    """Immutable ordered sequence of child numbers, walked from the master key."""

    __slots__ = ("_children",)

    def __init__(self, children: Iterable[ChildNumber | int] = ()):
        self._children: tuple[ChildNumber, ...] = tuple(
            c if isinstance(c, ChildNumber) else ChildNumber(c) for c in children
        )

    @classmethod
    def parse(cls, path: str) -> DerivationPath:
        """
        Parse path notation.

        The path must start with 'm'; "m" alone is the master key and a
        trailing slash is tolerated. ' / h / H mark hardened components.
        """
        path = path.strip()
        if not path.startswith("m"):
            raise InvalidPathError("Path must start with 'm'")

        if path != "m" and not path.startswith("m/"):
            raise InvalidPathError(f"Invalid path: {path!r}")

        parts = path.split("/")[1:]
        if parts and parts[-1] == "":
            parts = parts[:-1]

        children = []
        for part in parts:
            if not part:
                raise InvalidPathError(f"Empty component in path: {path!r}")
            children.append(ChildNumber.from_str(part))

        return cls(children)

    def child(self, child: ChildNumber | int) -> DerivationPath:
        return DerivationPath((*self._children, child))

    @property
    def depth(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[ChildNumber]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __getitem__(self, item: int) -> ChildNumber:
        return self._children[item]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DerivationPath):
            return self._children == other._children
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._children)

    def __str__(self) -> str:
        return "/".join(["m", *(str(c) for c in self._children)])

    def __repr__(self) -> str:
        return f"DerivationPath({str(self)!r})"


def into_derivation_path(
    value: str | DerivationPath | Iterable[ChildNumber | int],
) -> DerivationPath:
    """Coerce any accepted path form into a DerivationPath."""
    if isinstance(value, DerivationPath):
        return value
    if isinstance(value, str):
        return DerivationPath.parse(value)
    return DerivationPath(value)
