"""
Commitment pool configuration and presets.

A pool is deployed once with a fixed denomination, tree depth and payout
route. The payout route is a tagged variant:

- GMP: tokens travel with a general message, identified by a gateway symbol.
- ITS: tokens travel through the interchain token service, identified by a
  32-byte token id.

Both routes share proof and nullifier handling. They differ only in the
dispatcher call and in the token identifier bound into `ext_data_hash`.
"""

from __future__ import annotations

from typing import Annotated, Final, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from stealth_pool.config import STEALTH_POOL_ENV
from stealth_pool.types import Bytes20, Bytes32

ROOT_HISTORY_SIZE: Final = 30
"""Number of recent roots a withdrawal may reference."""

MAX_TREE_LEVELS: Final = 32
"""Leaf indices are uint32, so the tree cannot be deeper than 32 levels."""


class GmpDispatch(BaseModel):
    """Payout through general message passing, keyed by token symbol."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Literal["gmp"] = "gmp"
    symbol: str = Field(min_length=1)
    """Gateway token symbol, e.g. "aUSDC"."""

    @property
    def packed_type(self) -> str:
        """Solidity type of the token identifier in `ext_data_hash`."""
        return "string"

    @property
    def token_identifier(self) -> str:
        """The value packed last into `ext_data_hash`."""
        return self.symbol


class ItsDispatch(BaseModel):
    """Payout through the interchain token service, keyed by token id."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Literal["its"] = "its"
    token_id: Bytes32
    """Interchain token id."""

    @property
    def packed_type(self) -> str:
        """Solidity type of the token identifier in `ext_data_hash`."""
        return "bytes32"

    @property
    def token_identifier(self) -> Bytes32:
        """The value packed last into `ext_data_hash`."""
        return self.token_id


DispatchMode = Annotated[Union[GmpDispatch, ItsDispatch], Field(discriminator="mode")]
"""The payout route a pool is configured for."""


class PoolConfig(BaseModel):
    """Immutable deployment parameters of a commitment pool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    denomination: int = Field(gt=0)
    """Fixed amount every deposit pays in and every withdrawal pays out."""

    levels: int = Field(ge=1, le=MAX_TREE_LEVELS)
    """Depth of the commitment tree. Capacity is `2**levels` deposits."""

    root_history_size: int = Field(default=ROOT_HISTORY_SIZE, ge=1)
    """Length of the root ring buffer."""

    pool_address: Bytes20
    """Account holding deposited funds."""

    bridge_address: Bytes20
    """Account of the bridge dispatcher, bound into `ext_data_hash`."""

    dispatch: DispatchMode
    """Payout route."""

    @property
    def capacity(self) -> int:
        """Maximum number of deposits."""
        return 1 << self.levels


PROD_POOL_PRESET: Final = {"levels": 20, "root_history_size": ROOT_HISTORY_SIZE}
"""Production tree shape: about one million deposits."""

TEST_POOL_PRESET: Final = {"levels": 8, "root_history_size": ROOT_HISTORY_SIZE}
"""Small tree shape for tests: 256 deposits."""

DEFAULT_POOL_PRESET: Final = TEST_POOL_PRESET if STEALTH_POOL_ENV == "test" else PROD_POOL_PRESET
"""Tree shape selected by `STEALTH_POOL_ENV`."""

DEFAULT_TREE_LEVELS: Final[int] = DEFAULT_POOL_PRESET["levels"]
"""Tree depth selected by `STEALTH_POOL_ENV`."""
