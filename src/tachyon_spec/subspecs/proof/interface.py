"""
The capability surface of the external proof system.

The protocol core never builds circuits or runs a polynomial IOP. It relies
on an injected object offering five operations:

- `prove(kind, witness)`: a leaf proof for one action, or a merge step
- `verify(proof, digest)`: does the proof attest to this stamp digest?
- `merge(left, right)`: fold two decompressed proofs into one
- `compress(proof)`: the immutable byte form used for storage and broadcast
- `decompress(data)`: the mutable form a merge needs
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

from tachyon_spec.subspecs.accumulator import StampDigest

ProofT = TypeVar("ProofT")


class CircuitKind(Enum):
    """Which relation a proof step establishes."""

    ACTION_LEAF = "action_leaf"
    """A single action: its cv, rk and tachygram are correctly formed."""

    STAMP_MERGE = "stamp_merge"
    """Two stamps fold into one whose digest is the sum of theirs."""


@runtime_checkable
class ProofSystem(Protocol[ProofT]):
    """Abstract recursive proof system."""

    def prove(self, kind: CircuitKind, witness: Any) -> ProofT:
        """Create a proof of the given kind."""
        ...

    def verify(self, proof: ProofT, digest: StampDigest) -> bool:
        """Check that `proof` attests to `digest`."""
        ...

    def merge(self, left: ProofT, right: ProofT) -> ProofT:
        """Fold two decompressed proofs."""
        ...

    def compress(self, proof: ProofT) -> bytes:
        """Serialize a proof for broadcast."""
        ...

    def decompress(self, data: bytes) -> ProofT:
        """Parse broadcast bytes back into a mergeable proof."""
        ...
