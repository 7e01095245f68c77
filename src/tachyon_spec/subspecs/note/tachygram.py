"""Tachygrams: the 32-byte public markers published by every action."""

from __future__ import annotations

from typing_extensions import Self

from tachyon_spec.subspecs.pallas import Fp
from tachyon_spec.types import Bytes32


class Tachygram(Bytes32):
    """
    A canonical `F_p` element that is either a nullifier or a note commitment.

    Observers cannot tell which: spends publish nullifiers, outputs publish
    note commitments, and both are uniformly distributed field elements.
    """

    def __new__(cls, value: object = b"") -> Self:
        instance = super().__new__(cls, value)
        # Raises on non-canonical encodings.
        Fp.from_bytes(bytes(instance))
        return instance

    @classmethod
    def from_field(cls, element: Fp) -> Self:
        """Encode a field element."""
        return cls(bytes(element))

    def to_field(self) -> Fp:
        """Decode to a field element."""
        return Fp.from_bytes(bytes(self))
