"""
Pedersen-style multiset hashes over an abstract group.

    Acc(S) = sum_{x in S} [H(x)] G_acc

Addition is commutative, so the value is independent of insertion order and
of the shape of any merge tree. It is *not* idempotent: inserting `x` twice
adds `[2 H(x)] G_acc`, which differs from inserting it once. Duplicate
tachygrams therefore change the digest, and that is what lets the verifier
detect them without an in-circuit disjointness check.

The group is reached only through `AccumulatorBackend`, so the protocol
logic is independent of the curve it runs on.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, Protocol, TypeVar

from typing_extensions import Final

from tachyon_spec.subspecs.constants import ACCUMULATOR_DOMAIN
from tachyon_spec.subspecs.pallas import Fq, Point, domain_hash, hash_to_curve

ACTION_TAG: Final = b"action"
"""Hash tag for action public digests `cv || rk`."""

TACHYGRAM_TAG: Final = b"tachygram"
"""Hash tag for tachygrams."""

ACCUMULATOR_GENERATOR: Final = hash_to_curve(ACCUMULATOR_DOMAIN, b"G")
"""The fixed generator G_acc."""

G = TypeVar("G")


class AccumulatorBackend(Protocol[G]):
    """The group operations a multiset hash needs."""

    def identity(self) -> G:
        """The neutral element."""
        ...

    def add(self, a: G, b: G) -> G:
        """The group law."""
        ...

    def mul_generator(self, k: int) -> G:
        """Scalar multiple of the fixed generator."""
        ...

    def hash_to_scalar(self, tag: bytes, data: bytes) -> int:
        """Collision-resistant map from an element to a scalar."""
        ...


class PallasBackend:
    """The production backend: Pallas points and BLAKE2b hashing."""

    def identity(self) -> Point:
        return Point.identity()

    def add(self, a: Point, b: Point) -> Point:
        return a + b

    def mul_generator(self, k: int) -> Point:
        return ACCUMULATOR_GENERATOR * k

    def hash_to_scalar(self, tag: bytes, data: bytes) -> int:
        return Fq.from_uniform_bytes(domain_hash(ACCUMULATOR_DOMAIN, tag, data)).value


PALLAS_BACKEND: Final = PallasBackend()


class MultisetHash(Generic[G]):
    """A tagged multiset hash over some backend."""

    def __init__(self, backend: AccumulatorBackend[G], tag: bytes) -> None:
        self.backend = backend
        self.tag = tag

    def element(self, data: bytes) -> G:
        """The contribution of a single element."""
        return self.backend.mul_generator(self.backend.hash_to_scalar(self.tag, data))

    def digest(self, elements: Iterable[bytes]) -> G:
        """Accumulate every element, counting multiplicity."""
        acc = self.backend.identity()
        for data in elements:
            acc = self.backend.add(acc, self.element(data))
        return acc

    def combine(self, left: G, right: G) -> G:
        """Merge two accumulators: the digest of the multiset sum."""
        return self.backend.add(left, right)


ACTIONS_HASH: Final = MultisetHash(PALLAS_BACKEND, ACTION_TAG)
"""The actions accumulator over Pallas."""

TACHYGRAMS_HASH: Final = MultisetHash(PALLAS_BACKEND, TACHYGRAM_TAG)
"""The tachygram accumulator over Pallas."""
