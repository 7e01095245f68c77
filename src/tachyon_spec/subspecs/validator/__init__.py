"""Block-level validation of stamps, aggregates and adjuncts."""

from .block import Block, BlockValidator, ValidationWindow

__all__ = [
    "Block",
    "BlockValidator",
    "ValidationWindow",
]
