"""
Block validation.

A block is an ordered sequence of bundles. Each entry is non-Tachyon
(`None`, or a bundle with no actions and no stamp), stamped, or an adjunct.
Adjuncts belong to the nearest preceding stamped bundle. The association is
purely positional: nothing in an adjunct names its aggregate.

### Scan

One left-to-right pass:

- skip entries with no Tachyon data
- a stamped bundle opens a new window, closing the previous one
- every bundle with actions joins the open window
- an adjunct with no open window is malformed

### Window checks, in order

(a) the anchor contains the landing epoch
(b) the stamp has no duplicate tachygrams, and one tachygram per action
(c) every action signature verifies under its bundle's sighash
(d) every bundle's binding signature verifies against its value balance
(e) the rebuilt stamp digest is what the proof attests to

Any failure invalidates the whole block; there is no partial acceptance.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tachyon_spec.subspecs.accumulator import StampDigest
from tachyon_spec.subspecs.bundle import Bundle
from tachyon_spec.subspecs.proof import ProofSystem
from tachyon_spec.types import (
    AnchorOutOfRange,
    DuplicateTachygram,
    MalformedBundle,
    ProofVerificationFailed,
    TachyonError,
    UnsupportedTachygramCount,
)

logger = logging.getLogger(__name__)

Block = Sequence[Bundle | None]
"""An ordered sequence of bundles; `None` marks a non-Tachyon transaction."""


@dataclass(frozen=True, slots=True)
class ValidationWindow:
    """A stamped bundle and the adjuncts that follow it."""

    stamp_index: int
    """Block position of the bundle carrying the stamp."""

    member_indices: tuple[int, ...]
    """Block positions of the adjuncts, in order."""

    @property
    def bundle_indices(self) -> tuple[int, ...]:
        """Every bundle in the window, the stamped one first."""
        return (self.stamp_index, *self.member_indices)


class BlockValidator:
    """Validates the Tachyon content of blocks against an injected proof system."""

    def __init__(self, proof_system: ProofSystem[Any]) -> None:
        self.proof_system = proof_system

    def scan(self, block: Block) -> list[ValidationWindow]:
        """
        Partition a block into validation windows.

        Raises:
            MalformedBundle: If an adjunct appears before any stamped bundle.
        """
        windows: list[ValidationWindow] = []
        stamp_index: int | None = None
        members: list[int] = []

        for i, bundle in enumerate(block):
            if bundle is None or bundle.is_empty:
                continue
            if bundle.is_stamped:
                if stamp_index is not None:
                    windows.append(ValidationWindow(stamp_index, tuple(members)))
                stamp_index, members = i, []
            elif stamp_index is None:
                raise MalformedBundle("adjunct has no preceding stamp", bundle_index=i)
            else:
                members.append(i)

        if stamp_index is not None:
            windows.append(ValidationWindow(stamp_index, tuple(members)))
        return windows

    def validate_window(self, block: Block, window: ValidationWindow, landing_epoch: int) -> None:
        """Run checks (a) to (e) on one window."""
        stamped = block[window.stamp_index]
        if stamped is None or stamped.stamp is None:
            raise MalformedBundle(
                "window does not open on a stamp", bundle_index=window.stamp_index
            )
        stamp = stamped.stamp
        bundles = [(i, b) for i in window.bundle_indices if (b := block[i]) is not None]

        # (a)
        if not stamp.anchor.contains(landing_epoch):
            raise AnchorOutOfRange(
                landing_epoch, stamp.anchor.lo, stamp.anchor.hi, bundle_index=window.stamp_index
            )

        # (b)
        seen: set[bytes] = set()
        for tachygram in stamp.tachygrams:
            if tachygram in seen:
                raise DuplicateTachygram(tachygram, bundle_index=window.stamp_index)
            seen.add(tachygram)

        action_count = sum(len(bundle.actions) for _, bundle in bundles)
        if len(stamp.tachygrams) > action_count:
            raise UnsupportedTachygramCount(
                len(stamp.tachygrams), action_count, bundle_index=window.stamp_index
            )
        if len(stamp.tachygrams) < action_count:
            raise MalformedBundle(
                f"{len(stamp.tachygrams)} tachygrams for {action_count} actions",
                bundle_index=window.stamp_index,
            )

        # (c) and (d)
        for i, bundle in bundles:
            bundle.verify_signatures(bundle_index=i)

        # (e)
        digest = StampDigest.reconstruct(
            [a.public_digest() for _, b in bundles for a in b.actions],
            stamp.tachygrams,
            stamp.anchor,
        )
        try:
            accepted = self.proof_system.verify(
                self.proof_system.decompress(stamp.proof), digest
            )
        except Exception as e:
            raise ProofVerificationFailed(
                f"proof system error: {e}", bundle_index=window.stamp_index
            ) from e
        if not accepted:
            raise ProofVerificationFailed(
                "proof does not attest to the reconstructed digest",
                bundle_index=window.stamp_index,
            )

    def validate_block(self, block: Block, landing_epoch: int) -> list[ValidationWindow]:
        """
        Validate every window of a block.

        Returns:
            The validated windows.

        Raises:
            BundleValidationError: The first failure; the whole block is invalid.
        """
        try:
            windows = self.scan(block)
        except TachyonError as e:
            logger.warning("Rejecting block during scan: %s", e)
            raise
        for window in windows:
            try:
                self.validate_window(block, window, landing_epoch)
            except TachyonError as e:
                logger.warning("Rejecting block at window %s: %s", window.stamp_index, e)
                raise
        logger.debug("Validated %s windows", len(windows))
        return windows
