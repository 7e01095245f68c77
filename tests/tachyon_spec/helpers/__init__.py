"""Test helpers for tachyon_spec unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .builders import (
    DEFAULT_ANCHOR,
    DEFAULT_FLAVOR,
    ToyBackend,
    Wallet,
    make_plan,
    make_scan_bundle,
    make_stamped_bundle,
    make_wallet,
)

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    "DEFAULT_ANCHOR",
    "DEFAULT_FLAVOR",
    "ToyBackend",
    "Wallet",
    "make_plan",
    "make_scan_bundle",
    "make_stamped_bundle",
    "make_wallet",
    "run_async",
]
