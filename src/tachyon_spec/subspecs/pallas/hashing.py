"""
BLAKE2b-512 helpers shared by every hash-based construction in the protocol.

Two flavours are provided:

- `blake2b_512(personalization, *chunks)` is a personalized BLAKE2b-512 over
  the plain concatenation of the chunks. It is used where an established
  construction fixes the input layout (key expansion, RedPallas challenges,
  the sighash).
- `domain_hash(domain, *chunks)` prefixes a domain string and length-prefixes
  every chunk, so that distinct chunk boundaries can never collide. It backs
  note commitments, the nullifier tree and the accumulator hashes.
"""

from __future__ import annotations

import hashlib

DIGEST_SIZE: int = 64
"""Size in bytes of every BLAKE2b output used by the protocol."""

DOMAIN_HASH_PERSONALIZATION: bytes = b"Tachyon-DomHash"
"""BLAKE2b personalization for `domain_hash`."""


def blake2b_512(personalization: bytes, *chunks: bytes) -> bytes:
    """
    Compute a personalized BLAKE2b-512 digest over the concatenated chunks.

    Args:
        personalization: At most 16 bytes (the BLAKE2b `person` parameter).
        chunks: Byte strings absorbed in order.

    Returns:
        The 64-byte digest.
    """
    h = hashlib.blake2b(digest_size=DIGEST_SIZE, person=personalization)
    for chunk in chunks:
        h.update(chunk)
    return h.digest()


def domain_hash(domain: str, *chunks: bytes) -> bytes:
    """
    Compute a domain-separated, length-prefixed BLAKE2b-512 digest.

    Layout: `len(domain) || domain || (len(chunk) || chunk)*`, with every
    length a 4-byte little-endian integer.
    """
    encoded_domain = domain.encode()
    h = hashlib.blake2b(digest_size=DIGEST_SIZE, person=DOMAIN_HASH_PERSONALIZATION)
    h.update(len(encoded_domain).to_bytes(4, "little"))
    h.update(encoded_domain)
    for chunk in chunks:
        h.update(len(chunk).to_bytes(4, "little"))
        h.update(chunk)
    return h.digest()
