"""
Per-action entropy and randomizers.

A fresh `ActionEntropy` θ is sampled for every action. The randomizer used
to re-randomize the action's key is derived from it:

    α = ToScalar(BLAKE2b-512(role_tag, θ || cm))

Separating θ from α lets a low-trust signing device hold (ask, θ) without
ever building a proof, while the prover rebuilds α from (θ, cm).
"""

from __future__ import annotations

from enum import Enum

from tachyon_spec.subspecs.constants import (
    ACTION_ENTROPY_LENGTH,
    OUTPUT_ALPHA_PERSONALIZATION,
    SPEND_ALPHA_PERSONALIZATION,
)
from tachyon_spec.subspecs.pallas import FIELD_BYTES, Fq, blake2b_512

from .erasure import SecretBytes


class ActionRole(Enum):
    """Whether an action consumes a note or creates one."""

    SPEND = "spend"
    OUTPUT = "output"

    @property
    def personalization(self) -> bytes:
        """The role tag used when deriving α."""
        if self is ActionRole.SPEND:
            return SPEND_ALPHA_PERSONALIZATION
        return OUTPUT_ALPHA_PERSONALIZATION


class ActionRandomizer(SecretBytes):
    """The randomizer α, stored as its canonical 32-byte scalar encoding."""

    __slots__ = ()

    LENGTH = FIELD_BYTES

    def scalar(self) -> Fq:
        """Read α as a scalar."""
        return Fq.from_bytes(self.expose())


class ActionEntropy(SecretBytes):
    """The per-action entropy θ."""

    __slots__ = ()

    LENGTH = ACTION_ENTROPY_LENGTH

    def randomizer(self, role: ActionRole, commitment: bytes) -> ActionRandomizer:
        """Derive the role-tagged randomizer α for the note commitment `commitment`."""
        digest = blake2b_512(role.personalization, self.expose(), commitment)
        return ActionRandomizer(bytes(Fq.from_uniform_bytes(digest)))
