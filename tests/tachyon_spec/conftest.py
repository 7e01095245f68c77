"""
Shared pytest fixtures for all tachyon_spec tests.

Provides core fixtures used across multiple test modules.
Import these fixtures automatically via pytest discovery.
"""

from __future__ import annotations

import pytest

from tachyon_spec.subspecs.proof import TransparentProofSystem
from tests.tachyon_spec.helpers import Wallet, make_wallet


@pytest.fixture
def proof_system() -> TransparentProofSystem:
    """A transparent proof system with a fresh sealing key."""
    return TransparentProofSystem.generate()


@pytest.fixture
def wallet() -> Wallet:
    """The default test wallet."""
    return make_wallet(0)


@pytest.fixture
def other_wallet() -> Wallet:
    """A second wallet with unrelated keys."""
    return make_wallet(1)
