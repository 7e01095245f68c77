"""Specifications for the Pallas curve, its fields, and the hashes built on them."""

from .curve import POINT_BYTES, Point, hash_to_curve
from .field import FIELD_BYTES, Fp, Fq, P, PrimeField, Q
from .hashing import blake2b_512, domain_hash

__all__ = [
    "P",
    "Q",
    "FIELD_BYTES",
    "POINT_BYTES",
    "Fp",
    "Fq",
    "PrimeField",
    "Point",
    "hash_to_curve",
    "blake2b_512",
    "domain_hash",
]
