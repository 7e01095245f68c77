"""
Bundle construction.

`build_bundle` is the full client flow: the custody round trip, then the
binding signature, then the stamp. `build_stamped_bundle` is the same flow
for a wallet that holds `ask` itself and needs no async round trip.
"""

from __future__ import annotations

import logging
from typing import Any

from tachyon_spec.subspecs.accumulator import Anchor
from tachyon_spec.subspecs.action import AuthorizationData, BundlePlan
from tachyon_spec.subspecs.custody import Custody, authorize_plan
from tachyon_spec.subspecs.keys import ActionRole, SpendAuthorizingKey, ephemeral
from tachyon_spec.subspecs.proof import ProofSystem
from tachyon_spec.subspecs.stamp import Stamp

from .bundle import Bundle

logger = logging.getLogger(__name__)


def finalize_bundle(
    plan: BundlePlan,
    authorization: AuthorizationData,
    proof_system: ProofSystem[Any],
    anchor: Anchor,
) -> Bundle:
    """
    Attach signatures, sign the balance, prove, and wipe the plan.

    The plan's θ and α are wiped however this returns.

    Raises:
        ValueError: If there is not one signature per action.
        UnbalancedValue: If the plan does not balance.
    """
    with ephemeral(*plan.secrets()):
        if len(authorization.signatures) != len(plan.actions):
            raise ValueError(
                f"{len(authorization.signatures)} signatures for {len(plan.actions)} actions"
            )
        binding_sig = plan.binding_signature()
        actions = tuple(
            action.authorize(sig)
            for action, sig in zip(plan.actions, authorization.signatures, strict=True)
        )
        stamp = Stamp.prove([a.witness(anchor) for a in plan.actions], anchor, proof_system)
    logger.debug("Built stamped bundle with %s actions", len(actions))
    return Bundle(
        actions=actions,
        value_balance=plan.value_balance,
        binding_sig=binding_sig,
        stamp=stamp,
    )


def build_stamped_bundle(
    plan: BundlePlan,
    ask: SpendAuthorizingKey,
    proof_system: ProofSystem[Any],
    anchor: Anchor,
) -> Bundle:
    """Sign every action locally and produce a stamped bundle (an autonome)."""
    sighash = plan.sighash()
    try:
        signatures = tuple(
            ask.sign_randomized(action.alpha.scalar(), sighash)
            if action.role is ActionRole.SPEND
            else action.sign_output(sighash)
            for action in plan.actions
        )
    except BaseException:
        plan.wipe()
        raise
    return finalize_bundle(plan, AuthorizationData(signatures=signatures), proof_system, anchor)


async def build_bundle(
    plan: BundlePlan,
    custody: Custody,
    proof_system: ProofSystem[Any],
    anchor: Anchor,
    timeout: float | None = None,
) -> Bundle:
    """
    Run the custody round trip, then finalize.

    Raises:
        CustodyUnavailable: If custody times out or is unreachable.
        CustodyRejected: If custody refuses the plan.
    """
    authorization = await authorize_plan(plan, custody, timeout)
    return finalize_bundle(plan, authorization, proof_system, anchor)
