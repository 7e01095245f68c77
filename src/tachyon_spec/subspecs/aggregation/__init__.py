"""Stamp aggregation across bundles."""

from .aggregator import Aggregator

__all__ = [
    "Aggregator",
]
