"""
Homomorphic value commitments.

    cv = [v]V + [rcv]R

`v` is a signed value (positive for spends, negative for outputs) and `rcv`
a fresh blinding scalar. The generators are shared with Orchard so that
verification infrastructure can be reused. Because the commitment is linear
in both arguments,

    sum(cv_i) = [sum(v_i)]V + [sum(rcv_i)]R

which is what lets a single binding signature attest to the net balance of
a whole bundle.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Self

from typing_extensions import Final

from tachyon_spec.subspecs.constants import MAX_MONEY, VALUE_COMMITMENT_DOMAIN
from tachyon_spec.subspecs.pallas import Fq, Point, hash_to_curve
from tachyon_spec.types import StrictBaseModel

VALUE_COMMITMENT_VALUE_BASE: Final = hash_to_curve(VALUE_COMMITMENT_DOMAIN, b"v")
"""The generator V that carries the committed value."""

VALUE_COMMITMENT_RANDOMNESS_BASE: Final = hash_to_curve(VALUE_COMMITMENT_DOMAIN, b"r")
"""The generator R that carries the blinding factor; the binding signature basepoint."""


def check_value_balance(value: int) -> int:
    """
    Validate a signed amount against the money range.

    Raises:
        ValueError: If |value| exceeds MAX_MONEY.
    """
    if not -MAX_MONEY <= value <= MAX_MONEY:
        raise ValueError(f"value {value} outside [-{MAX_MONEY}, {MAX_MONEY}]")
    return value


def value_to_scalar(value: int) -> Fq:
    """Embed a signed amount into the scalar field (negatives wrap to q - |v|)."""
    return Fq(value=value)


class ValueCommitTrapdoor(StrictBaseModel):
    """The blinding factor rcv of a single value commitment."""

    scalar: Fq

    @classmethod
    def random(cls) -> Self:
        """Sample a fresh trapdoor."""
        return cls(scalar=Fq.random())

    @classmethod
    def zero(cls) -> Self:
        """The all-zero trapdoor, used for the public commitment ValueCommit_0."""
        return cls(scalar=Fq.zero())

    def __add__(self, other: ValueCommitTrapdoor) -> Self:
        return self.__class__(scalar=self.scalar + other.scalar)

    @classmethod
    def sum(cls, trapdoors: Iterable[ValueCommitTrapdoor]) -> Self:
        """Sum a collection of trapdoors; this is the binding signing key bsk."""
        total = cls.zero()
        for trapdoor in trapdoors:
            total = total + trapdoor
        return total


class ValueCommitment(StrictBaseModel):
    """A commitment cv to a signed value."""

    point: Point

    @classmethod
    def commit(cls, value: int, rcv: ValueCommitTrapdoor) -> Self:
        """Compute [v]V + [rcv]R."""
        return cls(
            point=VALUE_COMMITMENT_VALUE_BASE * value_to_scalar(value)
            + VALUE_COMMITMENT_RANDOMNESS_BASE * rcv.scalar
        )

    @classmethod
    def balance(cls, value_balance: int) -> Self:
        """The trapdoor-free commitment ValueCommit_0(value_balance)."""
        return cls.commit(value_balance, ValueCommitTrapdoor.zero())

    @classmethod
    def sum(cls, commitments: Iterable[ValueCommitment]) -> Self:
        """Homomorphically add commitments."""
        total = Point.identity()
        for cv in commitments:
            total = total + cv.point
        return cls(point=total)

    def __add__(self, other: ValueCommitment) -> Self:
        return self.__class__(point=self.point + other.point)

    def __sub__(self, other: ValueCommitment) -> Self:
        return self.__class__(point=self.point - other.point)

    def __bytes__(self) -> bytes:
        return bytes(self.point)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode a compressed commitment; raises ValueError on invalid encodings."""
        return cls(point=Point.from_bytes(data))


def derive_bvk(commitments: Iterable[ValueCommitment], value_balance: int) -> Point:
    """
    Recompute the binding verification key from public data.

        bvk = sum(cv_i) - ValueCommit_0(value_balance)

    If the bundle balances, bvk = [bsk]R for bsk = sum(rcv_i).
    """
    return (ValueCommitment.sum(commitments) - ValueCommitment.balance(value_balance)).point
