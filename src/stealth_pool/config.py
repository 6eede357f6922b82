"""
Global configuration for stealth-pool.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_ENVS: list[str] = ["prod", "test"]

STEALTH_POOL_ENV = os.environ.get("STEALTH_POOL_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if STEALTH_POOL_ENV not in _SUPPORTED_ENVS:
    raise ValueError(
        f"Invalid STEALTH_POOL_ENV environment variable: '{STEALTH_POOL_ENV}'. "
        f"Supported values: {_SUPPORTED_ENVS}"
    )
