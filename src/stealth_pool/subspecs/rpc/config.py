"""
Connection settings for a chain node.

Transient failures (dropped connections, timeouts, 5xx answers) are retried
with bounded exponential backoff. The delay before retry number `n` is
`min(max_delay, base_delay * multiplier**n)`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT = 30.0
"""HTTP request timeout in seconds."""


class RetryPolicy(BaseModel):
    """Bounded exponential backoff schedule."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(default=4, ge=1)
    """Total attempts, including the first one."""

    base_delay: float = Field(default=0.5, ge=0)
    """Delay in seconds before the first retry."""

    max_delay: float = Field(default=8.0, ge=0)
    """Upper bound on any single delay."""

    multiplier: float = Field(default=2.0, ge=1)

    def delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (0-based)."""
        return min(self.max_delay, self.base_delay * self.multiplier**attempt)


class RpcConfig(BaseModel):
    """Where and how to reach a JSON-RPC node."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
