"""
Global configuration for the Tachyon protocol specification.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_TACHYON_ENVS: list[str] = ["prod", "test"]

TACHYON_ENV = os.environ.get("TACHYON_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod' for the specs."""

if TACHYON_ENV not in _SUPPORTED_TACHYON_ENVS:
    raise ValueError(
        f"Invalid TACHYON_ENV environment variable: '{TACHYON_ENV}'. "
        f"Supported values: {_SUPPORTED_TACHYON_ENVS}"
    )
