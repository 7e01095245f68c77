"""
Two-phase action assembly.

### Assemble

For each action, sample θ and derive the role-tagged randomizer
`α = ToScalar(H(role_tag, θ || cm))`. Then:

- spend:  rk = ak + [α]G, cv = [v]V + [rcv]R, tachygram = nf(Ψ, nk, flavor)
- output: rk = [α]G,      cv = [-v]V + [rcv]R, tachygram = cm

Assembly needs no signing key, only the public ak.

### Authorize

Once every `(cv, rk)` pair of the bundle is fixed, a single sighash covers
them all together with the value balance. Spends are signed by the custody
holder with `rsk = ask + α`. Outputs are signed by the assembler with
`rsk = α`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from typing_extensions import Self

from tachyon_spec.subspecs.accumulator import Anchor
from tachyon_spec.subspecs.keys import (
    ActionEntropy,
    ActionRandomizer,
    ActionRole,
    ProofAuthorizingKey,
    SecretBytes,
)
from tachyon_spec.subspecs.note import Note, Tachygram
from tachyon_spec.subspecs.nullifier import TARGET_NULLIFIER_SCHEME, NullifierScheme
from tachyon_spec.subspecs.pallas import Fq, Point
from tachyon_spec.subspecs.proof import ActionWitness
from tachyon_spec.subspecs.redpallas import BINDING, SPEND_AUTH, Signature
from tachyon_spec.subspecs.value import (
    ValueCommitment,
    ValueCommitTrapdoor,
    check_value_balance,
    derive_bvk,
)
from tachyon_spec.types import UnbalancedValue

from .action import Action
from .sighash import compute_sighash

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpendRequest:
    """
    What the custody holder needs to sign one spend.

    The holder re-derives α from `(theta, commitment)` and checks that
    `ak + [α]G` is the rk at `index` of the plan before signing.
    """

    index: int
    """Position of the action in the plan."""

    theta: ActionEntropy
    """The action entropy θ."""

    commitment: Tachygram
    """The commitment of the note being spent."""


@dataclass(frozen=True, slots=True)
class AuthorizationData:
    """One signature per action, in plan order."""

    signatures: tuple[Signature, ...]


@dataclass(slots=True)
class UnsignedAction:
    """An assembled action awaiting its signature."""

    role: ActionRole
    note: Note
    cv: ValueCommitment
    rk: Point
    rcv: ValueCommitTrapdoor
    theta: ActionEntropy
    alpha: ActionRandomizer
    tachygram: Tachygram
    flavor: int
    pak: ProofAuthorizingKey | None = None

    @classmethod
    def spend(
        cls,
        note: Note,
        pak: ProofAuthorizingKey,
        theta: ActionEntropy,
        flavor: int,
        nullifier_scheme: NullifierScheme = TARGET_NULLIFIER_SCHEME,
    ) -> Self:
        """Assemble a spend of `note` for epoch `flavor`."""
        commitment = note.commitment()
        alpha = theta.randomizer(ActionRole.SPEND, commitment)
        rcv = ValueCommitTrapdoor.random()
        return cls(
            role=ActionRole.SPEND,
            note=note,
            cv=ValueCommitment.commit(note.value, rcv),
            rk=pak.ak.randomize(alpha.scalar()),
            rcv=rcv,
            theta=theta,
            alpha=alpha,
            tachygram=nullifier_scheme.nullifier(note.psi, pak.nk, flavor),
            flavor=flavor,
            pak=pak,
        )

    @classmethod
    def output(cls, note: Note, theta: ActionEntropy, flavor: int) -> Self:
        """Assemble an output creating `note`."""
        commitment = note.commitment()
        alpha = theta.randomizer(ActionRole.OUTPUT, commitment)
        rcv = ValueCommitTrapdoor.random()
        return cls(
            role=ActionRole.OUTPUT,
            note=note,
            cv=ValueCommitment.commit(-note.value, rcv),
            rk=SPEND_AUTH.verification_key(alpha.scalar()),
            rcv=rcv,
            theta=theta,
            alpha=alpha,
            tachygram=commitment,
            flavor=flavor,
        )

    @property
    def signed_value(self) -> int:
        """The committed value: positive for spends, negative for outputs."""
        return self.note.value if self.role is ActionRole.SPEND else -self.note.value

    def public_digest(self) -> bytes:
        """`cv || rk`, as covered by the sighash."""
        return bytes(self.cv) + bytes(self.rk)

    def sign_output(self, sighash: bytes) -> Signature:
        """Sign an output action with rsk = α."""
        if self.role is not ActionRole.OUTPUT:
            raise ValueError("only outputs are signed by the assembler")
        return SPEND_AUTH.sign(self.alpha.scalar(), sighash)

    def authorize(self, signature: Signature) -> Action:
        """Attach a signature, producing the public action."""
        return Action(cv=self.cv, rk=self.rk, sig=signature)

    def witness(self, anchor: Anchor) -> ActionWitness:
        """The private inputs for this action's leaf proof."""
        return ActionWitness(
            role=self.role,
            note=self.note,
            alpha=self.alpha,
            rcv=self.rcv,
            flavor=self.flavor,
            anchor=anchor,
            cv=self.cv,
            rk=self.rk,
            tachygram=self.tachygram,
            pak=self.pak,
        )

    def wipe(self) -> None:
        """Discard θ and α."""
        self.theta.wipe()
        self.alpha.wipe()


@dataclass(slots=True)
class BundlePlan:
    """The unsigned actions of a bundle plus its declared value balance."""

    actions: list[UnsignedAction]
    value_balance: int

    def __post_init__(self) -> None:
        check_value_balance(self.value_balance)

    def action_digests(self) -> list[bytes]:
        """Every action's `cv || rk`, in order."""
        return [action.public_digest() for action in self.actions]

    def sighash(self) -> bytes:
        """The transaction-wide signing digest."""
        return compute_sighash(self.value_balance, self.action_digests())

    def spend_requests(self) -> list[SpendRequest]:
        """The requests the custody holder must sign, one per spend."""
        return [
            SpendRequest(index=i, theta=action.theta, commitment=action.note.commitment())
            for i, action in enumerate(self.actions)
            if action.role is ActionRole.SPEND
        ]

    def binding_signing_key(self) -> Fq:
        """
        Compute bsk = sum(rcv_i) after checking the plan balances.

        Raises:
            UnbalancedValue: If the action values do not sum to the value
                balance, or [bsk]R differs from the recomputed bvk.
        """
        total = sum(action.signed_value for action in self.actions)
        if total != self.value_balance:
            raise UnbalancedValue(
                f"actions sum to {total} but the declared value balance is {self.value_balance}"
            )
        bsk = ValueCommitTrapdoor.sum(action.rcv for action in self.actions).scalar
        bvk = derive_bvk((action.cv for action in self.actions), self.value_balance)
        if BINDING.verification_key(bsk) != bvk:
            raise UnbalancedValue("binding key does not match the value commitments")
        return bsk

    def binding_signature(self) -> Signature:
        """Sign the sighash under bsk with the Binding parameterization."""
        return BINDING.sign(self.binding_signing_key(), self.sighash())

    def secrets(self) -> list[SecretBytes]:
        """Every θ and α of the plan."""
        return [secret for action in self.actions for secret in (action.theta, action.alpha)]

    def wipe_entropy(self) -> None:
        """Discard every θ, keeping α as proof witness."""
        for action in self.actions:
            action.theta.wipe()

    def wipe(self) -> None:
        """Discard every θ and α so assembly must restart from scratch."""
        logger.debug("Wiping ephemeral secrets of %s actions", len(self.actions))
        for action in self.actions:
            action.wipe()
