"""Tachygram and action accumulators, anchors, and the stamp digest."""

from .anchor import Anchor
from .digest import StampDigest
from .multiset import (
    ACCUMULATOR_GENERATOR,
    ACTION_TAG,
    ACTIONS_HASH,
    PALLAS_BACKEND,
    TACHYGRAM_TAG,
    TACHYGRAMS_HASH,
    AccumulatorBackend,
    MultisetHash,
    PallasBackend,
)

__all__ = [
    "ACCUMULATOR_GENERATOR",
    "ACTION_TAG",
    "ACTIONS_HASH",
    "PALLAS_BACKEND",
    "TACHYGRAM_TAG",
    "TACHYGRAMS_HASH",
    "AccumulatorBackend",
    "Anchor",
    "MultisetHash",
    "PallasBackend",
    "StampDigest",
]
