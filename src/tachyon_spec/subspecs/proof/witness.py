"""Private inputs of the action leaf circuit."""

from __future__ import annotations

from dataclasses import dataclass

from tachyon_spec.subspecs.accumulator import Anchor
from tachyon_spec.subspecs.keys import ActionRandomizer, ActionRole, ProofAuthorizingKey
from tachyon_spec.subspecs.note import Note, Tachygram
from tachyon_spec.subspecs.pallas import Point
from tachyon_spec.subspecs.value import ValueCommitment, ValueCommitTrapdoor


@dataclass(frozen=True, slots=True)
class ActionWitness:
    """
    Everything the prover needs to show that one action is well formed.

    The randomizer is shared with the unsigned action it came from, so wiping
    the plan after proving also wipes the witness.
    """

    role: ActionRole
    """Spend or output."""

    note: Note
    """The note being spent or created."""

    alpha: ActionRandomizer
    """The action randomizer α."""

    rcv: ValueCommitTrapdoor
    """The value commitment trapdoor."""

    flavor: int
    """The epoch the tachygram is derived for."""

    anchor: Anchor
    """The validity window; must contain `flavor`."""

    cv: ValueCommitment
    """Public value commitment."""

    rk: Point
    """Public randomized verification key."""

    tachygram: Tachygram
    """Public nullifier (spend) or note commitment (output)."""

    pak: ProofAuthorizingKey | None = None
    """Proof authorizing key; required for spends."""

    @property
    def signed_value(self) -> int:
        """The value as committed: positive for spends, negative for outputs."""
        return self.note.value if self.role is ActionRole.SPEND else -self.note.value

    def public_digest(self) -> bytes:
        """The action's contribution to the actions accumulator: `cv || rk`."""
        return bytes(self.cv) + bytes(self.rk)
