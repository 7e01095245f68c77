"""
RedPallas: Schnorr-style re-randomizable signatures over Pallas.

A signing key is a scalar `sk` and its verification key is `vk = [sk]B` for
a fixed basepoint `B`. Two parameterizations are used:

- SpendAuth, with `B` the spend authorization basepoint `G`. Every action
  signature is a SpendAuth signature under a randomized key.
- Binding, with `B` the value commitment randomness generator `R`. The
  binding signature proves knowledge of `bsk` such that `bvk = [bsk]R`.

### Signing

    T  <- 80 random bytes
    r  =  H*(T || vk || M)
    R  =  [r]B
    S  =  r + H*(R || vk || M) * sk
    sig = R || S

### Verification

    c = H*(R || vk || M)
    accept iff [S]B == R + [c]vk

where `H*(x) = BLAKE2b-512("Zcash_RedPallasH", x) mod q`.
"""

from __future__ import annotations

import os

from typing_extensions import Final

from tachyon_spec.subspecs.constants import (
    REDPALLAS_HASH_PERSONALIZATION,
    REDPALLAS_SPEND_AUTH_DOMAIN,
)
from tachyon_spec.subspecs.pallas import Fq, Point, blake2b_512, hash_to_curve
from tachyon_spec.subspecs.value import VALUE_COMMITMENT_RANDOMNESS_BASE
from tachyon_spec.types import Bytes32, Bytes64, StrictBaseModel

NONCE_RANDOMNESS_LENGTH: Final = 80
"""Length of the random prefix T hashed into the nonce."""

SPEND_AUTH_BASEPOINT: Final = hash_to_curve(REDPALLAS_SPEND_AUTH_DOMAIN, b"G")
"""The spend authorization basepoint G."""


def h_star(*chunks: bytes) -> Fq:
    """The RedPallas hash-to-scalar H*."""
    return Fq.from_uniform_bytes(blake2b_512(REDPALLAS_HASH_PERSONALIZATION, *chunks))


class Signature(Bytes64):
    """A 64-byte RedPallas signature `R || S`."""

    @property
    def r_bytes(self) -> Bytes32:
        """The compressed nonce commitment R."""
        return Bytes32(self[:32])

    @property
    def s_bytes(self) -> Bytes32:
        """The little-endian response scalar S."""
        return Bytes32(self[32:])


class RedPallas(StrictBaseModel):
    """A RedPallas parameterization, fixed by its basepoint."""

    basepoint: Point
    """The generator B against which keys and nonces are computed."""

    def verification_key(self, sk: Fq) -> Point:
        """Compute vk = [sk]B."""
        return self.basepoint * sk

    def randomize_signing_key(self, sk: Fq, alpha: Fq) -> Fq:
        """Randomize a signing key: rsk = sk + alpha."""
        return sk + alpha

    def randomize_verification_key(self, vk: Point, alpha: Fq) -> Point:
        """Randomize a verification key: rk = vk + [alpha]B."""
        return vk + self.basepoint * alpha

    def sign(self, sk: Fq, message: bytes) -> Signature:
        """
        Sign `message` under `sk`.

        The nonce is r = H*(T || vk || M) with 80 bytes of OS randomness T.
        It does not depend on `sk`, so security rests on T being
        unpredictable: a known T reveals r, and r with S reveals `sk`.
        """
        vk_bytes = bytes(self.verification_key(sk))
        t = os.urandom(NONCE_RANDOMNESS_LENGTH)
        r = h_star(t, vk_bytes, message)
        r_bytes = bytes(self.basepoint * r)
        c = h_star(r_bytes, vk_bytes, message)
        s = r + c * sk
        return Signature(r_bytes + bytes(s))

    def verify(self, vk: Point, message: bytes, signature: bytes) -> bool:
        """
        Check a signature against a verification key.

        Returns False for malformed signatures (non-canonical R or S >= q)
        rather than raising.
        """
        if len(signature) != Signature.LENGTH:
            return False
        try:
            r_point = Point.from_bytes(signature[:32])
            s = Fq.from_bytes(signature[32:])
        except ValueError:
            return False
        c = h_star(signature[:32], bytes(vk), message)
        return self.basepoint * s == r_point + vk * c


SPEND_AUTH: Final = RedPallas(basepoint=SPEND_AUTH_BASEPOINT)
"""The SpendAuth parameterization used by action signatures."""

BINDING: Final = RedPallas(basepoint=VALUE_COMMITMENT_RANDOMNESS_BASE)
"""The Binding parameterization used by the bundle's binding signature."""
