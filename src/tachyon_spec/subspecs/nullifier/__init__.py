"""
The nullifier engine: a constrained PRF built on a GGM delegation tree.

It exposes the owner-side scheme, the bounded delegate capability, and the
dyadic decomposition that sizes a delegation.
"""

from .ggm import dyadic_cover, ggm_child, ggm_walk, prefix_interval
from .scheme import (
    PROD_NULLIFIER_SCHEME,
    TARGET_NULLIFIER_SCHEME,
    TEST_NULLIFIER_SCHEME,
    NoteDelegateKey,
    NoteMasterKey,
    NullifierScheme,
    PrefixKey,
)

__all__ = [
    "NoteDelegateKey",
    "NoteMasterKey",
    "NullifierScheme",
    "PrefixKey",
    "PROD_NULLIFIER_SCHEME",
    "TEST_NULLIFIER_SCHEME",
    "TARGET_NULLIFIER_SCHEME",
    "dyadic_cover",
    "ggm_child",
    "ggm_walk",
    "prefix_interval",
]
