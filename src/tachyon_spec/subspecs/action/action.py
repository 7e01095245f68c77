"""Signed actions: the public authorization unit of a bundle."""

from __future__ import annotations

from typing import ClassVar, Self

from tachyon_spec.subspecs.pallas import POINT_BYTES, Point
from tachyon_spec.subspecs.redpallas import SPEND_AUTH, Signature
from tachyon_spec.subspecs.value import ValueCommitment
from tachyon_spec.types import StrictBaseModel


class Action(StrictBaseModel):
    """
    A tachyaction `(cv, rk, sig)`.

    Spends and outputs look the same on the wire: both carry a value
    commitment, a randomized key and a SpendAuth signature under that key.
    The action is bound to, but does not contain, its tachygram.
    """

    cv: ValueCommitment
    """Value commitment."""

    rk: Point
    """Randomized verification key."""

    sig: Signature
    """SpendAuth signature over the bundle sighash."""

    ENCODED_LENGTH: ClassVar[int] = 2 * POINT_BYTES + Signature.LENGTH

    def public_digest(self) -> bytes:
        """The signed-over public data `cv || rk`."""
        return bytes(self.cv) + bytes(self.rk)

    def verify(self, sighash: bytes) -> bool:
        """Check the action signature against rk."""
        return SPEND_AUTH.verify(self.rk, sighash, self.sig)

    def encode_bytes(self) -> bytes:
        """Encode `cv || rk || sig` (128 bytes)."""
        return self.public_digest() + bytes(self.sig)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Decode an action.

        Raises:
            ValueError: On a wrong length or an invalid point encoding.
        """
        if len(data) != cls.ENCODED_LENGTH:
            raise ValueError(f"Expected {cls.ENCODED_LENGTH} bytes, got {len(data)}")
        return cls(
            cv=ValueCommitment.from_bytes(data[:POINT_BYTES]),
            rk=Point.from_bytes(data[POINT_BYTES : 2 * POINT_BYTES]),
            sig=Signature(data[2 * POINT_BYTES :]),
        )
