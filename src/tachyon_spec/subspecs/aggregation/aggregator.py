"""
Stamp aggregation.

An aggregator folds the stamps of many bundles into one. The first bundle
keeps its actions and receives the merged stamp, becoming the *aggregate*.
Every other bundle is stripped to an *adjunct*: it keeps its actions,
balance and binding signature, and loses its stamp. No cross-reference is
added. A block lists the aggregate followed by its adjuncts, and the
validator associates them by position alone.

Folding one aggregate is a linear chain, since each merge consumes the
previous result. Aggregates over disjoint bundle sets are independent and
can be built concurrently.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Sequence
from typing import Any

from tachyon_spec.subspecs.bundle import Bundle
from tachyon_spec.subspecs.proof import ProofSystem
from tachyon_spec.subspecs.stamp import Stamp

logger = logging.getLogger(__name__)


class Aggregator:
    """Merges stamps with an injected proof system."""

    def __init__(self, proof_system: ProofSystem[Any]) -> None:
        self.proof_system = proof_system

    def merge_stamps(self, left: Stamp, right: Stamp) -> Stamp:
        """
        Merge two stamps.

        Raises:
            EmptyAnchorIntersection: If the anchors do not overlap.
        """
        return left.merge(right, self.proof_system)

    @staticmethod
    def _stamps(bundles: Sequence[Bundle]) -> list[Stamp]:
        if not bundles:
            raise ValueError("cannot aggregate an empty bundle list")
        stamps = []
        for i, bundle in enumerate(bundles):
            if bundle.stamp is None:
                raise ValueError(f"bundle {i} is already stripped")
            stamps.append(bundle.stamp)
        return stamps

    @staticmethod
    def _assemble(bundles: Sequence[Bundle], merged: Stamp) -> list[Bundle]:
        aggregate = bundles[0].model_copy(update={"stamp": merged})
        return [aggregate, *(bundle.strip() for bundle in bundles[1:])]

    def aggregate(self, bundles: Sequence[Bundle]) -> list[Bundle]:
        """
        Fold every stamp into the first bundle and strip the rest.

        Returns:
            `[aggregate, *adjuncts]`, in input order.
        """
        stamps = self._stamps(bundles)
        merged = functools.reduce(self.merge_stamps, stamps)
        logger.debug(
            "Aggregated %s bundles into %s tachygrams", len(bundles), len(merged.tachygrams)
        )
        return self._assemble(bundles, merged)

    async def aggregate_async(self, bundles: Sequence[Bundle]) -> list[Bundle]:
        """
        Like `aggregate`, running each merge in a worker thread.

        Cancellation takes effect between merge steps, never inside one.
        """
        stamps = self._stamps(bundles)
        merged = stamps[0]
        for step, stamp in enumerate(stamps[1:], start=1):
            merged = await asyncio.to_thread(self.merge_stamps, merged, stamp)
            logger.debug("Merge step %s/%s complete", step, len(stamps) - 1)
        return self._assemble(bundles, merged)

    async def aggregate_groups(self, groups: Sequence[Sequence[Bundle]]) -> list[list[Bundle]]:
        """Build independent aggregates over disjoint bundle groups concurrently."""
        return list(await asyncio.gather(*(self.aggregate_async(group) for group in groups)))
