"""
Custody: the holder of `ask`, modelled as a capability boundary.

The assembler never sees `ask`. Once the plan is fixed it sends the custody
holder the plan, one request per spend, and the sighash it expects to be
signed. The holder recomputes the sighash itself, so a compromised
assembler cannot substitute a different message, and it authenticates every
request by re-deriving rk from `(θ, cm)` before signing.

The custody holder may be a same-process object, another process, or a
hardware device behind a flaky transport. The round trip is therefore
bounded by a timeout and can be cancelled. Any failure wipes every θ and α
of the plan, so no signed-but-unconfirmed state can be replayed and
assembly restarts from scratch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from tachyon_spec.subspecs.action import AuthorizationData, BundlePlan, SpendRequest
from tachyon_spec.subspecs.constants import TARGET_CONFIG
from tachyon_spec.subspecs.keys import ActionRole, SpendAuthorizingKey
from tachyon_spec.subspecs.redpallas import Signature
from tachyon_spec.types import CustodyRejected, CustodyUnavailable

logger = logging.getLogger(__name__)


@runtime_checkable
class Custody(Protocol):
    """Abstract custody signer."""

    async def sign_batch(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        """
        Sign every spend request over the plan's sighash.

        Returns one signature per request, in request order.

        Raises:
            CustodyRejected: If the sighash or any request fails authentication.
        """
        ...


class LocalCustody:
    """An in-process custody holder wrapping `ask`."""

    def __init__(self, ask: SpendAuthorizingKey) -> None:
        self._ask = ask

    def _sign(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        sighash = plan.sighash()
        if sighash != expected_sighash:
            raise CustodyRejected("sighash does not match the plan")

        ak = self._ask.validating_key()
        signatures = []
        for request in spend_requests:
            if not 0 <= request.index < len(plan.actions):
                raise CustodyRejected(f"request index {request.index} outside the plan")
            action = plan.actions[request.index]
            if action.role is not ActionRole.SPEND:
                raise CustodyRejected(f"action {request.index} is not a spend")
            with request.theta.randomizer(ActionRole.SPEND, request.commitment) as alpha:
                if ak.randomize(alpha.scalar()) != action.rk:
                    raise CustodyRejected(f"rk of action {request.index} does not match ak")
                signatures.append(self._ask.sign_randomized(alpha.scalar(), sighash))
        return signatures

    async def sign_batch(
        self,
        plan: BundlePlan,
        spend_requests: Sequence[SpendRequest],
        expected_sighash: bytes,
    ) -> list[Signature]:
        """Sign in a worker thread; the scalar multiplications are CPU-bound."""
        return await asyncio.to_thread(self._sign, plan, spend_requests, expected_sighash)

    def close(self) -> None:
        """Wipe the held ask."""
        self._ask.wipe()


async def authorize_plan(
    plan: BundlePlan,
    custody: Custody,
    timeout: float | None = None,
) -> AuthorizationData:
    """
    Collect one signature per action of the plan.

    Spends are signed by `custody`; outputs are signed here with rsk = α.
    Each custody signature is checked against its rk before it is accepted.
    On success θ is discarded and α is kept as the proof witness. Any
    failure, whatever its type, wipes every θ and α of the plan before it
    propagates.

    Raises:
        CustodyUnavailable: On timeout or transport failure.
        CustodyRejected: If custody refuses, or returns bad signatures.
        asyncio.CancelledError: Propagated after wiping.
    """
    if timeout is None:
        timeout = TARGET_CONFIG.CUSTODY_TIMEOUT_SECONDS

    requests = plan.spend_requests()
    sighash = plan.sighash()

    try:
        try:
            spend_signatures = await asyncio.wait_for(
                custody.sign_batch(plan, requests, sighash), timeout=timeout
            )
        except asyncio.TimeoutError as e:
            logger.warning("Custody signer timed out after %ss", timeout)
            raise CustodyUnavailable(f"custody signer timed out after {timeout}s") from e
        except OSError as e:
            logger.warning("Custody signer unreachable: %s", e)
            raise CustodyUnavailable(f"custody signer unreachable: {e}") from e

        if len(spend_signatures) != len(requests):
            raise CustodyRejected(
                f"custody returned {len(spend_signatures)} signatures for {len(requests)} spends"
            )

        by_index: dict[int, Signature] = {}
        for request, signature in zip(requests, spend_signatures, strict=True):
            action = plan.actions[request.index]
            if not action.authorize(signature).verify(sighash):
                raise CustodyRejected(
                    f"custody signature for action {request.index} does not verify"
                )
            by_index[request.index] = signature

        signatures = tuple(
            by_index[i] if action.role is ActionRole.SPEND else action.sign_output(sighash)
            for i, action in enumerate(plan.actions)
        )
    except BaseException:
        plan.wipe()
        raise

    plan.wipe_entropy()
    logger.debug("Authorized %s actions (%s via custody)", len(plan.actions), len(requests))
    return AuthorizationData(signatures=signatures)
