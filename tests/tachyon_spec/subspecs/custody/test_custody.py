"""Tests for the custody round trip."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from tachyon_spec.subspecs.action import BundlePlan, SpendRequest
from tachyon_spec.subspecs.bundle import build_bundle
from tachyon_spec.subspecs.custody import Custody, LocalCustody, authorize_plan
from tachyon_spec.subspecs.pallas import Fq
from tachyon_spec.subspecs.proof import TransparentProofSystem
from tachyon_spec.subspecs.redpallas import SPEND_AUTH, Signature
from tachyon_spec.types import CustodyRejected, CustodyUnavailable
from tests.tachyon_spec.helpers import DEFAULT_ANCHOR, Wallet, make_plan


class HangingCustody:
    """A signer that never answers."""

    async def sign_batch(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        await asyncio.sleep(60)
        return []


class UnreachableCustody:
    """A signer behind a broken transport."""

    def __init__(self, error: OSError) -> None:
        self.error = error

    async def sign_batch(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        raise self.error


class FaultyCustody:
    """A signer whose firmware raises an unexpected error."""

    async def sign_batch(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        raise RuntimeError("firmware bug")


class ForgingCustody:
    """A signer that answers promptly with signatures under the wrong key."""

    def __init__(self, count: int | None = None) -> None:
        self.count = count

    async def sign_batch(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        count = len(spend_requests) if self.count is None else self.count
        return [SPEND_AUTH.sign(Fq.random(), expected_sighash) for _ in range(count)]


def assert_wiped(plan: BundlePlan) -> None:
    for action in plan.actions:
        assert action.theta.is_wiped
        assert action.alpha.is_wiped


def test_local_custody_is_a_custody(wallet: Wallet) -> None:
    """The in-process signer satisfies the custody interface."""
    assert isinstance(LocalCustody(wallet.ask), Custody)


class TestAuthorizePlan:
    """Tests for collecting signatures through custody."""

    @pytest.mark.asyncio
    async def test_success(self, wallet: Wallet) -> None:
        """Every action gets a verifying signature; θ is wiped and α kept."""
        plan = make_plan(wallet, spends=(30, 70), outputs=(90,))
        authorization = await authorize_plan(plan, LocalCustody(wallet.ask))

        sighash = plan.sighash()
        assert len(authorization.signatures) == 3
        for action, sig in zip(plan.actions, authorization.signatures, strict=True):
            assert action.authorize(sig).verify(sighash)
        assert all(a.theta.is_wiped and not a.alpha.is_wiped for a in plan.actions)

    @pytest.mark.asyncio
    async def test_timeout(self, wallet: Wallet) -> None:
        """A signer that never answers is reported unavailable and the plan wiped."""
        plan = make_plan(wallet)
        with pytest.raises(CustodyUnavailable, match="timed out"):
            await authorize_plan(plan, HangingCustody(), timeout=0.05)
        assert_wiped(plan)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [ConnectionError("device unplugged"), OSError("device unplugged")]
    )
    async def test_unreachable(self, wallet: Wallet, error: OSError) -> None:
        """Transport failures are reported unavailable and the plan wiped."""
        plan = make_plan(wallet)
        with pytest.raises(CustodyUnavailable, match="device unplugged"):
            await authorize_plan(plan, UnreachableCustody(error))
        assert_wiped(plan)

    @pytest.mark.asyncio
    async def test_unexpected_error(self, wallet: Wallet) -> None:
        """Errors of any other type propagate unchanged and still wipe the plan."""
        plan = make_plan(wallet, spends=(50, 50), outputs=(100,))
        with pytest.raises(RuntimeError, match="firmware bug"):
            await authorize_plan(plan, FaultyCustody())
        assert_wiped(plan)

    @pytest.mark.asyncio
    async def test_cancellation(self, wallet: Wallet) -> None:
        """Cancelling the round trip propagates and still wipes the plan."""
        plan = make_plan(wallet)
        task = asyncio.create_task(authorize_plan(plan, HangingCustody(), timeout=30))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert_wiped(plan)

    @pytest.mark.asyncio
    async def test_wrong_key(self, wallet: Wallet, other_wallet: Wallet) -> None:
        """A custodian holding a different ask refuses to sign."""
        plan = make_plan(wallet)
        with pytest.raises(CustodyRejected, match="does not match ak"):
            await authorize_plan(plan, LocalCustody(other_wallet.ask))
        assert_wiped(plan)

    @pytest.mark.asyncio
    async def test_forged_signatures(self, wallet: Wallet) -> None:
        """Signatures that do not verify under rk are rejected."""
        plan = make_plan(wallet)
        with pytest.raises(CustodyRejected, match="does not verify"):
            await authorize_plan(plan, ForgingCustody())
        assert_wiped(plan)

    @pytest.mark.asyncio
    async def test_wrong_signature_count(self, wallet: Wallet) -> None:
        """One signature per spend is required."""
        plan = make_plan(wallet, spends=(50, 50), outputs=(100,))
        with pytest.raises(CustodyRejected, match="1 signatures for 2 spends"):
            await authorize_plan(plan, ForgingCustody(count=1))
        assert_wiped(plan)


class TestLocalCustody:
    """Tests for the in-process custodian's own checks."""

    @pytest.mark.asyncio
    async def test_rejects_substituted_sighash(self, wallet: Wallet) -> None:
        """The custodian recomputes the sighash rather than trusting the assembler."""
        plan = make_plan(wallet)
        with pytest.raises(CustodyRejected, match="sighash"):
            await LocalCustody(wallet.ask).sign_batch(plan, plan.spend_requests(), b"\x00" * 64)

    @pytest.mark.asyncio
    async def test_rejects_output_requests(self, wallet: Wallet) -> None:
        """Requests must point at spends inside the plan."""
        plan = make_plan(wallet)
        custody = LocalCustody(wallet.ask)
        theta = plan.actions[0].theta
        commitment = plan.actions[1].note.commitment()

        with pytest.raises(CustodyRejected, match="not a spend"):
            await custody.sign_batch(plan, [SpendRequest(1, theta, commitment)], plan.sighash())
        with pytest.raises(CustodyRejected, match="outside the plan"):
            await custody.sign_batch(plan, [SpendRequest(5, theta, commitment)], plan.sighash())

    def test_close_wipes_ask(self, wallet: Wallet) -> None:
        """Closing the custodian wipes the held key."""
        LocalCustody(wallet.ask).close()
        with pytest.raises(ValueError, match="wiped"):
            wallet.ask.scalar()


@pytest.mark.asyncio
async def test_build_bundle(wallet: Wallet, proof_system: TransparentProofSystem) -> None:
    """The async client flow produces a fully valid stamped bundle."""
    plan = make_plan(wallet)
    bundle = await build_bundle(plan, LocalCustody(wallet.ask), proof_system, DEFAULT_ANCHOR)

    assert bundle.is_stamped
    bundle.verify_signatures()
    assert_wiped(plan)
