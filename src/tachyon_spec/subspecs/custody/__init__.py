"""Custody signers and the async authorization round trip."""

from .custody import Custody, LocalCustody, authorize_plan

__all__ = [
    "Custody",
    "LocalCustody",
    "authorize_plan",
]
