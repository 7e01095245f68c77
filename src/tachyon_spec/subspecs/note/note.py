"""
Notes and note commitments.

A note is the unit of value: `(pk, v, Ψ, rcm)`. Its commitment

    cm = ToBase(H("z.cash:Tachyon-NoteCommit", pk || v || Ψ || rcm))

is the tachygram an output action publishes. Ψ is the nullifier trapdoor
that, together with nk, seeds the note's nullifiers.
"""

from __future__ import annotations

from typing import Self

from pydantic import field_validator

from tachyon_spec.subspecs.constants import MAX_MONEY, NOTE_COMMITMENT_DOMAIN
from tachyon_spec.subspecs.keys import PaymentKey
from tachyon_spec.subspecs.pallas import Fp, Fq, domain_hash
from tachyon_spec.types import StrictBaseModel

from .tachygram import Tachygram


class Note(StrictBaseModel):
    """A spendable or creatable unit of value."""

    pk: PaymentKey
    """The recipient's payment key."""

    value: int
    """Amount in zatoshis, in [0, MAX_MONEY]."""

    psi: Fp
    """The nullifier trapdoor Ψ."""

    rcm: Fq
    """The note commitment randomness."""

    @field_validator("value")
    @classmethod
    def check_value(cls, v: int) -> int:
        """Reject values outside the money range."""
        if not 0 <= v <= MAX_MONEY:
            raise ValueError(f"note value {v} outside [0, {MAX_MONEY}]")
        return v

    @classmethod
    def random(cls, pk: PaymentKey, value: int) -> Self:
        """Create a note for `pk` with fresh Ψ and rcm."""
        return cls(pk=pk, value=value, psi=Fp.random(), rcm=Fq.random())

    def commitment(self) -> Tachygram:
        """Compute the note commitment cm."""
        digest = domain_hash(
            NOTE_COMMITMENT_DOMAIN,
            bytes(self.pk),
            self.value.to_bytes(8, "little"),
            bytes(self.psi),
            bytes(self.rcm),
        )
        return Tachygram.from_field(Fp.from_uniform_bytes(digest))
