"""Tests for action assembly, the sighash and the binding key."""

import pytest

from tachyon_spec.subspecs.action import (
    Action,
    BundlePlan,
    compute_sighash,
    encode_value_balance,
)
from tachyon_spec.subspecs.constants import MAX_MONEY
from tachyon_spec.subspecs.keys import ActionRole
from tachyon_spec.subspecs.nullifier import TARGET_NULLIFIER_SCHEME
from tachyon_spec.subspecs.redpallas import BINDING, SPEND_AUTH
from tachyon_spec.subspecs.value import ValueCommitment
from tachyon_spec.types import UnbalancedValue
from tests.tachyon_spec.helpers import DEFAULT_FLAVOR, Wallet, make_plan


def test_value_balance_encoding() -> None:
    """The balance is a little-endian signed 64-bit integer."""
    assert encode_value_balance(1) == b"\x01" + b"\x00" * 7
    assert encode_value_balance(-1) == b"\xff" * 8
    with pytest.raises(ValueError):
        encode_value_balance(MAX_MONEY + 1)


def test_sighash_covers_balance_and_order() -> None:
    """The sighash changes with the balance and the action order."""
    digests = [b"\x01" * 64, b"\x02" * 64]
    sighash = compute_sighash(10, digests)
    assert len(sighash) == 64
    assert sighash != compute_sighash(11, digests)
    assert sighash != compute_sighash(10, list(reversed(digests)))


def test_spend_assembly(wallet: Wallet) -> None:
    """A spend commits to +v, re-randomizes ak and publishes the nullifier."""
    spend = make_plan(wallet).actions[0]
    assert spend.role is ActionRole.SPEND
    assert spend.signed_value == 100
    assert spend.cv == ValueCommitment.commit(100, spend.rcv)
    assert spend.rk == wallet.pak.ak.randomize(spend.alpha.scalar())
    assert spend.tachygram == TARGET_NULLIFIER_SCHEME.nullifier(
        spend.note.psi, wallet.pak.nk, DEFAULT_FLAVOR
    )
    assert spend.alpha == spend.theta.randomizer(ActionRole.SPEND, spend.note.commitment())


def test_output_assembly(wallet: Wallet) -> None:
    """An output commits to -v, uses rk = [α]G and publishes cm."""
    output = make_plan(wallet).actions[1]
    assert output.role is ActionRole.OUTPUT
    assert output.signed_value == -60
    assert output.cv == ValueCommitment.commit(-60, output.rcv)
    assert output.rk == SPEND_AUTH.verification_key(output.alpha.scalar())
    assert output.tachygram == output.note.commitment()


def test_output_signature(wallet: Wallet) -> None:
    """The assembler signs outputs only."""
    plan = make_plan(wallet)
    spend, output = plan.actions
    sighash = plan.sighash()

    action = output.authorize(output.sign_output(sighash))
    assert isinstance(action, Action)
    assert action.verify(sighash)
    assert not action.verify(compute_sighash(plan.value_balance + 1, plan.action_digests()))

    with pytest.raises(ValueError, match="only outputs"):
        spend.sign_output(sighash)


def test_spend_requests(wallet: Wallet) -> None:
    """Only spends are sent to custody, with their plan positions."""
    plan = make_plan(wallet, spends=(10, 20), outputs=(5,))
    requests = plan.spend_requests()
    assert [r.index for r in requests] == [0, 1]
    assert requests[1].commitment == plan.actions[1].note.commitment()
    assert requests[0].theta is plan.actions[0].theta


def test_binding_key(wallet: Wallet) -> None:
    """bsk signs the sighash under bvk for a balanced plan."""
    plan = make_plan(wallet, spends=(100, 50), outputs=(60, 40))
    assert plan.value_balance == 50

    sig = plan.binding_signature()
    bvk = BINDING.verification_key(plan.binding_signing_key())
    assert BINDING.verify(bvk, plan.sighash(), sig)


def test_unbalanced_plan_rejected(wallet: Wallet) -> None:
    """A declared balance that does not match the actions is refused."""
    plan = make_plan(wallet, value_balance=39)
    with pytest.raises(UnbalancedValue, match="declared value balance is 39"):
        plan.binding_signing_key()


def test_balance_out_of_range(wallet: Wallet) -> None:
    """Plans cannot declare a balance beyond MAX_MONEY."""
    with pytest.raises(ValueError):
        BundlePlan(actions=[], value_balance=MAX_MONEY + 1)


def test_wiping(wallet: Wallet) -> None:
    """wipe_entropy keeps α for proving; wipe discards both."""
    plan = make_plan(wallet)
    plan.wipe_entropy()
    assert all(a.theta.is_wiped and not a.alpha.is_wiped for a in plan.actions)
    plan.wipe()
    assert all(a.alpha.is_wiped for a in plan.actions)


def test_action_encoding(wallet: Wallet) -> None:
    """Actions encode as cv || rk || sig in 128 bytes."""
    plan = make_plan(wallet)
    output = plan.actions[1]
    action = output.authorize(output.sign_output(plan.sighash()))

    data = action.encode_bytes()
    assert len(data) == Action.ENCODED_LENGTH == 128
    assert data[:64] == action.public_digest()
    assert Action.decode_bytes(data) == action

    with pytest.raises(ValueError):
        Action.decode_bytes(data[:-1])
    with pytest.raises(ValueError):
        Action.decode_bytes(b"\xff" * 32 + data[32:])
