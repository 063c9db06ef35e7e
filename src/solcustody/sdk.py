"""Interface of the external liquidity SDK.

Pool math and instruction building for Raydium CLMM pools live outside this
package. Any object implementing LiquiditySdk can be plugged in; it only has
to return instructions (and, for some operations, a transaction it already
built and possibly co-signed).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Union, runtime_checkable

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.transaction import Transaction, VersionedTransaction

from solcustody.transaction.formats import TransactionFormat
from solcustody.transaction.source import InstructionSource, PrebuiltTransaction, RawInstructions
from solcustody.transaction.tips import TipConfig

CLMM_PROGRAM_ID = "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK"
CLMM_DEVNET_PROGRAM_ID = "devi51mZmdwUJGU9hjN27vEz64Gps7uUefqxg27EAtH"

VALID_CLMM_PROGRAM_IDS = frozenset({CLMM_PROGRAM_ID, CLMM_DEVNET_PROGRAM_ID})


def is_valid_clmm(program_id: Union[str, Pubkey]) -> bool:
    """Check if a program id is a Raydium CLMM program."""
    return str(program_id) in VALID_CLMM_PROGRAM_IDS


@dataclass(frozen=True)
class PoolInfo:
    """Subset of pool information the operations rely on."""

    id: str
    program_id: str
    mint_a: str
    mint_b: str
    mint_a_decimals: int = 9
    mint_b_decimals: int = 6
    raw: dict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Position:
    """A liquidity position owned by the vault."""

    pool_id: str
    nft_mint: str
    liquidity: int
    tick_lower: int = 0
    tick_upper: int = 0

    @property
    def is_empty(self) -> bool:
        return self.liquidity == 0


@dataclass(frozen=True)
class ComputeBudget:
    """Compute budget requested from the SDK."""

    units: int
    micro_lamports: int


@dataclass(frozen=True)
class BuildResult:
    """What the SDK returns for an operation.

    Attributes:
        instructions: All instructions, in execution order
        transaction: Transaction built by the SDK, if any
    """
    instructions: Sequence[Instruction] = ()
    transaction: Optional[Union[Transaction, VersionedTransaction]] = None

    def to_source(self) -> InstructionSource:
        """Prefer the SDK's own transaction so its co-signatures survive."""
        if self.transaction is not None:
            return PrebuiltTransaction(self.transaction)
        return RawInstructions(self.instructions)


@runtime_checkable
class LiquiditySdk(Protocol):
    """Operations the liquidity SDK must provide."""

    async def fetch_pool_info(self, pool_id: str) -> PoolInfo:
        ...

    async def fetch_pools_by_ids(self, pool_ids: Sequence[str]) -> list[PoolInfo]:
        ...

    async def get_owner_positions(self, program_id: str) -> list[Position]:
        ...

    async def open_position_from_base(
        self,
        pool: PoolInfo,
        *,
        start_price: Decimal,
        end_price: Decimal,
        base_amount: Decimal,
        tx_format: TransactionFormat,
        compute_budget: ComputeBudget,
        tip: Optional[TipConfig] = None,
    ) -> BuildResult:
        ...

    async def decrease_liquidity(
        self,
        pool: PoolInfo,
        position: Position,
        *,
        close_position: bool,
        amount_min_a: int,
        amount_min_b: int,
        tx_format: TransactionFormat,
        compute_budget: ComputeBudget,
        tip: Optional[TipConfig] = None,
    ) -> BuildResult:
        ...

    async def harvest_all_rewards(
        self,
        pools: dict[str, PoolInfo],
        positions: dict[str, list[Position]],
        *,
        tx_format: TransactionFormat,
        compute_budget: ComputeBudget,
    ) -> BuildResult:
        ...
