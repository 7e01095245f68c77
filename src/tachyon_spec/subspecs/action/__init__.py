"""
Actions and the two-phase assembly that produces them.

It exposes the public `Action`, the unsigned plan types, and the
transaction-wide sighash.
"""

from .action import Action
from .plan import AuthorizationData, BundlePlan, SpendRequest, UnsignedAction
from .sighash import compute_sighash, encode_value_balance

__all__ = [
    "Action",
    "AuthorizationData",
    "BundlePlan",
    "SpendRequest",
    "UnsignedAction",
    "compute_sighash",
    "encode_value_balance",
]
