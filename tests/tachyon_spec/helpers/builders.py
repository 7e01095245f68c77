"""
Factory functions for constructing test fixtures.

Wallets are derived from deterministic spending keys. Notes, entropy and
value commitment trapdoors are still sampled fresh, so two bundles built
from the same arguments never share tachygrams.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from typing import NamedTuple

from tachyon_spec.subspecs.accumulator import Anchor
from tachyon_spec.subspecs.action import Action, BundlePlan, UnsignedAction
from tachyon_spec.subspecs.bundle import Bundle, build_stamped_bundle
from tachyon_spec.subspecs.keys import (
    ActionEntropy,
    PaymentKey,
    ProofAuthorizingKey,
    SpendAuthorizingKey,
    SpendingKey,
)
from tachyon_spec.subspecs.note import Note
from tachyon_spec.subspecs.pallas import Point
from tachyon_spec.subspecs.proof import TransparentProofSystem
from tachyon_spec.subspecs.redpallas import Signature
from tachyon_spec.subspecs.stamp import Stamp
from tachyon_spec.subspecs.value import ValueCommitment

DEFAULT_FLAVOR = 20
"""Epoch every test action is derived for, unless stated otherwise."""

DEFAULT_ANCHOR = Anchor.of(10, 50)
"""Anchor containing `DEFAULT_FLAVOR`."""


class Wallet(NamedTuple):
    """Every key a test needs, derived from one spending key."""

    sk: SpendingKey
    ask: SpendAuthorizingKey
    pak: ProofAuthorizingKey
    pk: PaymentKey


def make_wallet(seed: int = 0) -> Wallet:
    """Derive a wallet from a deterministic spending key."""
    sk = SpendingKey(seed.to_bytes(SpendingKey.LENGTH, "little"))
    return Wallet(
        sk=sk,
        ask=sk.spend_authorizing_key(),
        pak=sk.proof_authorizing_key(),
        pk=sk.payment_key(),
    )


def make_plan(
    wallet: Wallet,
    spends: Sequence[int] = (100,),
    outputs: Sequence[int] = (60,),
    *,
    flavor: int = DEFAULT_FLAVOR,
    value_balance: int | None = None,
) -> BundlePlan:
    """
    Assemble a plan spending and creating notes of the given values.

    The value balance defaults to the one that makes the plan balance.
    """
    actions = [
        UnsignedAction.spend(Note.random(wallet.pk, v), wallet.pak, ActionEntropy.random(), flavor)
        for v in spends
    ]
    actions.extend(
        UnsignedAction.output(Note.random(wallet.pk, v), ActionEntropy.random(), flavor)
        for v in outputs
    )
    if value_balance is None:
        value_balance = sum(spends) - sum(outputs)
    return BundlePlan(actions=actions, value_balance=value_balance)


def make_stamped_bundle(
    proof_system: TransparentProofSystem,
    wallet: Wallet | None = None,
    spends: Sequence[int] = (100,),
    outputs: Sequence[int] = (60,),
    *,
    flavor: int = DEFAULT_FLAVOR,
    anchor: Anchor = DEFAULT_ANCHOR,
) -> Bundle:
    """Build a valid stamped bundle with a locally held ask."""
    if wallet is None:
        wallet = make_wallet()
    plan = make_plan(wallet, spends, outputs, flavor=flavor)
    return build_stamped_bundle(plan, wallet.ask, proof_system, anchor)


def make_scan_bundle(actions: int, stamped: bool) -> Bundle:
    """
    Build a structurally shaped bundle for scan tests.

    Its signatures and proof are placeholders: only the action count and the
    presence of a stamp are meaningful.
    """
    placeholder = Action(
        cv=ValueCommitment(point=Point.generator()),
        rk=Point.generator(),
        sig=Signature.zero(),
    )
    stamp = Stamp(tachygrams=(), anchor=DEFAULT_ANCHOR, proof=b"") if stamped else None
    return Bundle(
        actions=(placeholder,) * actions,
        value_balance=0,
        binding_sig=Signature.zero(),
        stamp=stamp,
    )


class ToyBackend:
    """
    The additive group of integers modulo 2^61 - 1, generated by 3.

    Small enough to reason about by hand, and structured like the Pallas
    backend: commutative, and not idempotent.
    """

    MODULUS = 2**61 - 1
    GENERATOR = 3

    def identity(self) -> int:
        return 0

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.MODULUS

    def mul_generator(self, k: int) -> int:
        return (k * self.GENERATOR) % self.MODULUS

    def hash_to_scalar(self, tag: bytes, data: bytes) -> int:
        digest = hashlib.blake2b(tag + b"\x00" + data, digest_size=16).digest()
        return int.from_bytes(digest, "little") % self.MODULUS
