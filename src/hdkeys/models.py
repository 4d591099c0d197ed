"""
Output models for derived keys.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from hdkeys.bip32 import ExtendedPrivKey


class DerivedKey(BaseModel):
    """Public view of a derived key; secret fields are only filled on request."""

    path: str
    depth: int = Field(ge=0)
    child_number: str
    public_key: str
    secret_key: str | None = None
    chain_code: str | None = None

    @classmethod
    def from_key(cls, key: ExtendedPrivKey, path: str, reveal: bool = False) -> DerivedKey:
        return cls(
            path=path,
            depth=key.depth,
            child_number=str(key.child_number),
            public_key=key.public_key().hex(),
            secret_key=key.secret().hex() if reveal else None,
            chain_code=bytes(key.chain_code).hex() if reveal else None,
        )
