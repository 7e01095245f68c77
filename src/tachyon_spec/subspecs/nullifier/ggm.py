"""
The GGM delegation tree, addressed purely by bit-prefix.

The tree has fixed depth `EPOCH_BITS`. Its root is a note master key; the
child of a node on bit `b` is

    child(node, b) = ToBase(H("z.cash:Tachyon-nf", "ggm", node, b))

and leaves are reached by walking the bits of an epoch MSB-first. No tree is
ever allocated: a node is the pure function of its ancestor and the bits in
between.

A node at depth `d` on prefix `p` covers exactly the epochs whose top `d`
bits equal `p`, the aligned interval `[p * 2^(D-d), (p + 1) * 2^(D-d) - 1]`.
"""

from __future__ import annotations

from tachyon_spec.subspecs.constants import NULLIFIER_DOMAIN
from tachyon_spec.subspecs.pallas import Fp, domain_hash

GGM_LABEL: bytes = b"ggm"
LEAF_LABEL: bytes = b"nf"


def ggm_child(node: bytes, bit: int) -> bytes:
    """Derive the child of `node` on `bit` (0 or 1)."""
    if bit not in (0, 1):
        raise ValueError(f"bit must be 0 or 1, got {bit}")
    digest = domain_hash(NULLIFIER_DOMAIN, GGM_LABEL, node, bytes([bit]))
    return bytes(Fp.from_uniform_bytes(digest))


def ggm_walk(node: bytes, path: int, length: int) -> bytes:
    """Walk `length` levels down from `node` along the bits of `path`, MSB-first."""
    if not 0 <= path < (1 << length):
        raise ValueError(f"path {path} does not fit in {length} bits")
    for shift in range(length - 1, -1, -1):
        node = ggm_child(node, (path >> shift) & 1)
    return node


def leaf_output(leaf: bytes) -> Fp:
    """Map a leaf key to the nullifier field element it yields."""
    return Fp.from_uniform_bytes(domain_hash(NULLIFIER_DOMAIN, LEAF_LABEL, leaf))


def prefix_interval(prefix_len: int, prefix: int, depth: int) -> tuple[int, int]:
    """The inclusive epoch interval covered by a prefix."""
    if not 0 <= prefix_len <= depth:
        raise ValueError(f"prefix length {prefix_len} outside [0, {depth}]")
    if not 0 <= prefix < (1 << prefix_len):
        raise ValueError(f"prefix {prefix} does not fit in {prefix_len} bits")
    span = depth - prefix_len
    return prefix << span, ((prefix + 1) << span) - 1


def dyadic_cover(lo: int, hi: int, depth: int) -> list[tuple[int, int]]:
    """
    Decompose `[lo, hi]` into the canonical minimal set of aligned blocks.

    Returns `(prefix_len, prefix)` pairs in increasing epoch order. Every
    block is the largest aligned power-of-two interval that starts at the
    current position and stays within `hi`, capped at half the tree: no
    prefix is ever empty, and the full range splits into its two halves.
    The cover uses at most `2 * depth` prefixes, and at most `depth` when
    `lo == 0` (for `depth >= 2`).

    Raises:
        ValueError: If the interval is empty or does not fit in `depth` bits.
    """
    if not 0 <= lo <= hi < (1 << depth):
        raise ValueError(f"[{lo}, {hi}] is not a non-empty range of {depth}-bit epochs")

    cover: list[tuple[int, int]] = []
    while lo <= hi:
        # Alignment of lo bounds the block size; the root itself is never a block.
        span = depth - 1 if lo == 0 else (lo & -lo).bit_length() - 1
        while lo + (1 << span) - 1 > hi:
            span -= 1
        cover.append((depth - span, lo >> span))
        lo += 1 << span
    return cover
