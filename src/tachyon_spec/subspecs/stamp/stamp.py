"""
Stamps: the recursive proof attached to a set of actions.

A stamp carries the tachygram list, the anchor, and the compressed proof.
The accumulators are not transmitted; verifiers rebuild them.

Wire layout (integers little-endian):

    u32 n || tachygram_1 .. tachygram_n (32 bytes each) || lo (u32) || hi (u32)
        || u32 proof_len || proof
"""

from __future__ import annotations

import functools
from collections.abc import Sequence
from typing import Any, Self

from tachyon_spec.subspecs.accumulator import Anchor
from tachyon_spec.subspecs.note import Tachygram
from tachyon_spec.subspecs.proof import ActionWitness, CircuitKind, ProofSystem
from tachyon_spec.types import MalformedBundle, StrictBaseModel


class Stamp(StrictBaseModel):
    """A tachystamp `(tachygrams, anchor, proof)`."""

    tachygrams: tuple[Tachygram, ...]
    """Tachygrams in proof order; duplicates are kept, never silently removed."""

    anchor: Anchor
    """Validity window."""

    proof: bytes
    """Compressed proof."""

    @classmethod
    def prove(
        cls,
        witnesses: Sequence[ActionWitness],
        anchor: Anchor,
        proof_system: ProofSystem[Any],
    ) -> Self:
        """
        Prove every action and fold the leaf proofs with sequential merges.

        Each merge consumes the output of the previous one, so the fold is
        inherently sequential.
        """
        if not witnesses:
            raise ValueError("a stamp needs at least one action")
        if any(w.anchor != anchor for w in witnesses):
            raise ValueError("every witness must use the stamp anchor")
        leaves = [proof_system.prove(CircuitKind.ACTION_LEAF, w) for w in witnesses]
        proof = functools.reduce(proof_system.merge, leaves)
        return cls(
            tachygrams=tuple(w.tachygram for w in witnesses),
            anchor=anchor,
            proof=proof_system.compress(proof),
        )

    def merge(self, other: Stamp, proof_system: ProofSystem[Any]) -> Self:
        """
        Merge two stamps into one.

        Tachygrams are concatenated, anchors intersected, and the proofs
        decompressed, merged and recompressed.

        Raises:
            EmptyAnchorIntersection: If the anchors do not overlap.
        """
        anchor = self.anchor.intersect(other.anchor)
        merged = proof_system.prove(
            CircuitKind.STAMP_MERGE,
            (proof_system.decompress(self.proof), proof_system.decompress(other.proof)),
        )
        return self.__class__(
            tachygrams=self.tachygrams + other.tachygrams,
            anchor=anchor,
            proof=proof_system.compress(merged),
        )

    def encode_bytes(self) -> bytes:
        """Serialize to the wire layout."""
        return b"".join(
            [
                len(self.tachygrams).to_bytes(4, "little"),
                *self.tachygrams,
                bytes(self.anchor),
                len(self.proof).to_bytes(4, "little"),
                self.proof,
            ]
        )

    @classmethod
    def decode_prefix(cls, data: bytes, offset: int = 0) -> tuple[Self, int]:
        """
        Decode a stamp starting at `offset`.

        Returns:
            The stamp and the offset just past it.

        Raises:
            MalformedBundle: On truncation or an invalid field.
        """

        def take(size: int) -> bytes:
            nonlocal offset
            if offset + size > len(data):
                raise MalformedBundle(f"stamp truncated at byte {offset}")
            chunk = data[offset : offset + size]
            offset += size
            return chunk

        count = int.from_bytes(take(4), "little")
        try:
            tachygrams = tuple(Tachygram(take(Tachygram.LENGTH)) for _ in range(count))
            anchor = Anchor.from_bytes(take(Anchor.ENCODED_LENGTH))
        except ValueError as e:
            raise MalformedBundle(f"invalid stamp field: {e}") from e
        proof = take(int.from_bytes(take(4), "little"))
        return cls(tachygrams=tachygrams, anchor=anchor, proof=bytes(proof)), offset

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """Decode a stamp that spans all of `data`."""
        stamp, end = cls.decode_prefix(data)
        if end != len(data):
            raise MalformedBundle(f"{len(data) - end} trailing bytes after stamp")
        return stamp
