"""Public key material: the spend validating key and the proof authorizing key."""

from __future__ import annotations

from typing import Self

from pydantic import field_validator

from tachyon_spec.subspecs.pallas import FIELD_BYTES, POINT_BYTES, Fp, Fq, Point
from tachyon_spec.subspecs.redpallas import SPEND_AUTH
from tachyon_spec.types import StrictBaseModel


class SpendValidatingKey(StrictBaseModel):
    """
    The spend validating key `ak = [ask]G`.

    Its canonical sign bit is always 0: key derivation negates `ask` when
    needed, and this model refuses any point that violates the rule.
    """

    point: Point

    @field_validator("point")
    @classmethod
    def check_sign_normalized(cls, v: Point) -> Point:
        """Reject the identity and any point with sign bit 1."""
        if v.is_identity():
            raise ValueError("ak must not be the identity")
        if v.sign_bit() != 0:
            raise ValueError("ak must have canonical sign bit 0")
        return v

    def randomize(self, alpha: Fq) -> Point:
        """Compute the spend action's randomized key `rk = ak + [alpha]G`."""
        return SPEND_AUTH.randomize_verification_key(self.point, alpha)

    def __bytes__(self) -> bytes:
        return bytes(self.point)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode a compressed, sign-normalized ak."""
        return cls(point=Point.from_bytes(data))


class NullifierKey(StrictBaseModel):
    """The nullifier key `nk`, root material of every nullifier PRF."""

    inner: Fp

    def __bytes__(self) -> bytes:
        return bytes(self.inner)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls(inner=Fp.from_bytes(data))


class PaymentKey(StrictBaseModel):
    """The payment key `pk` identifying a recipient."""

    inner: Fp

    def __bytes__(self) -> bytes:
        return bytes(self.inner)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls(inner=Fp.from_bytes(data))


class ProofAuthorizingKey(StrictBaseModel):
    """
    The proof authorizing key `pak = (ak, nk)`.

    Holding pak lets a prover build proofs for every note of the wallet,
    but not sign: the signing capability stays with `ask`.
    """

    ak: SpendValidatingKey
    nk: NullifierKey

    def __bytes__(self) -> bytes:
        return bytes(self.ak) + bytes(self.nk)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode `ak || nk`."""
        if len(data) != POINT_BYTES + FIELD_BYTES:
            raise ValueError(f"Expected {POINT_BYTES + FIELD_BYTES} bytes, got {len(data)}")
        return cls(
            ak=SpendValidatingKey.from_bytes(data[:POINT_BYTES]),
            nk=NullifierKey.from_bytes(data[POINT_BYTES:]),
        )
