"""
Key hierarchy of a Tachyon wallet.

It exposes the root spending key, the keys derived from it, the per-action
randomizers, and the wipeable buffers that hold ephemeral secrets.
"""

from .erasure import SecretBytes, ephemeral
from .private import SpendAuthorizingKey, SpendingKey, prf_expand
from .public import NullifierKey, PaymentKey, ProofAuthorizingKey, SpendValidatingKey
from .randomizer import ActionEntropy, ActionRandomizer, ActionRole

__all__ = [
    "ActionEntropy",
    "ActionRandomizer",
    "ActionRole",
    "NullifierKey",
    "PaymentKey",
    "ProofAuthorizingKey",
    "SecretBytes",
    "SpendAuthorizingKey",
    "SpendValidatingKey",
    "SpendingKey",
    "ephemeral",
    "prf_expand",
]
