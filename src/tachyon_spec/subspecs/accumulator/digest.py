"""The stamp digest: the public value a stamp's proof attests to."""

from __future__ import annotations

from collections.abc import Iterable
from typing import ClassVar, Self

from tachyon_spec.subspecs.pallas import POINT_BYTES, Point
from tachyon_spec.types import StrictBaseModel

from .anchor import Anchor
from .multiset import ACTIONS_HASH, TACHYGRAMS_HASH


class StampDigest(StrictBaseModel):
    """
    The accumulator header `(actions_acc, tachygram_acc, anchor)`.

    It is never transmitted: verifiers rebuild it from the visible actions,
    tachygrams and anchor, then ask the proof system whether the proof was
    computed over it.
    """

    actions_acc: Point
    tachygram_acc: Point
    anchor: Anchor

    ENCODED_LENGTH: ClassVar[int] = 2 * POINT_BYTES + Anchor.ENCODED_LENGTH

    @classmethod
    def reconstruct(
        cls,
        action_digests: Iterable[bytes],
        tachygrams: Iterable[bytes],
        anchor: Anchor,
    ) -> Self:
        """Recompute the digest from public data."""
        return cls(
            actions_acc=ACTIONS_HASH.digest(action_digests),
            tachygram_acc=TACHYGRAMS_HASH.digest(tachygrams),
            anchor=anchor,
        )

    def combine(self, other: StampDigest) -> Self:
        """
        Merge two digests: add both accumulators and intersect the anchors.

        Raises:
            EmptyAnchorIntersection: If the anchors are disjoint.
        """
        return self.__class__(
            actions_acc=ACTIONS_HASH.combine(self.actions_acc, other.actions_acc),
            tachygram_acc=TACHYGRAMS_HASH.combine(self.tachygram_acc, other.tachygram_acc),
            anchor=self.anchor.intersect(other.anchor),
        )

    def __bytes__(self) -> bytes:
        return bytes(self.actions_acc) + bytes(self.tachygram_acc) + bytes(self.anchor)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode `actions_acc || tachygram_acc || anchor`."""
        if len(data) != cls.ENCODED_LENGTH:
            raise ValueError(f"Expected {cls.ENCODED_LENGTH} bytes, got {len(data)}")
        return cls(
            actions_acc=Point.from_bytes(data[:POINT_BYTES]),
            tachygram_acc=Point.from_bytes(data[POINT_BYTES : 2 * POINT_BYTES]),
            anchor=Anchor.from_bytes(data[2 * POINT_BYTES :]),
        )
