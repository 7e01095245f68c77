"""Tests for protocol configuration presets."""

import pytest
from pydantic import ValidationError

from tachyon_spec.subspecs.constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG


def test_target_follows_environment() -> None:
    """The test suite runs against the lightweight preset."""
    assert TARGET_CONFIG == TEST_CONFIG


def test_presets() -> None:
    """Epochs are u32 in production; MAX_EPOCH follows EPOCH_BITS."""
    assert PROD_CONFIG.EPOCH_BITS == 32
    assert PROD_CONFIG.MAX_EPOCH == 2**32 - 1
    assert TEST_CONFIG.MAX_EPOCH == 2**TEST_CONFIG.EPOCH_BITS - 1
    assert TEST_CONFIG.CUSTODY_TIMEOUT_SECONDS < PROD_CONFIG.CUSTODY_TIMEOUT_SECONDS


def test_presets_are_frozen() -> None:
    """Configuration cannot be changed at runtime."""
    with pytest.raises(ValidationError):
        PROD_CONFIG.EPOCH_BITS = 8  # type: ignore[misc]
