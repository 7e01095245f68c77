"""Anchors: the epoch range in which a stamp is valid."""

from __future__ import annotations

from typing import ClassVar, Self

from pydantic import model_validator

from tachyon_spec.types import EmptyAnchorIntersection, StrictBaseModel, Uint32


class Anchor(StrictBaseModel):
    """An inclusive epoch range `[lo, hi]`."""

    lo: Uint32
    hi: Uint32

    ENCODED_LENGTH: ClassVar[int] = 8

    @model_validator(mode="after")
    def check_ordered(self) -> Self:
        """Reject empty ranges."""
        if self.lo > self.hi:
            raise ValueError(f"anchor lower bound {self.lo} exceeds upper bound {self.hi}")
        return self

    @classmethod
    def of(cls, lo: int, hi: int) -> Self:
        """Build an anchor from plain integers."""
        return cls(lo=Uint32(lo), hi=Uint32(hi))

    def contains(self, epoch: int) -> bool:
        """Whether `epoch` lies within the range."""
        return self.lo <= epoch <= self.hi

    def intersect(self, other: Anchor) -> Self:
        """
        Narrow to the overlap of two anchors.

        Raises:
            EmptyAnchorIntersection: If the ranges are disjoint.
        """
        lo, hi = max(self.lo, other.lo), min(self.hi, other.hi)
        if lo > hi:
            raise EmptyAnchorIntersection((self.lo, self.hi), (other.lo, other.hi))
        return self.__class__(lo=Uint32(lo), hi=Uint32(hi))

    def __bytes__(self) -> bytes:
        return self.lo.encode_bytes() + self.hi.encode_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode `lo || hi`, each a little-endian u32."""
        if len(data) != cls.ENCODED_LENGTH:
            raise ValueError(f"Expected {cls.ENCODED_LENGTH} bytes, got {len(data)}")
        return cls(lo=Uint32.decode_bytes(data[:4]), hi=Uint32.decode_bytes(data[4:]))
