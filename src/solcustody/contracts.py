"""Operation configurations.

One model per operation, validated on construction. Amounts in token units
are Decimals; lamports and base units are ints.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from solcustody.transaction.formats import TransactionFormat


class OperationConfig(BaseModel):
    """Settings shared by every operation."""

    tx_version: str = Field(default="V0", description="V0 or LEGACY")
    cu_limit: int = Field(default=600_000, gt=0, description="Compute unit limit")
    use_jito: bool = Field(
        default=False,
        description="Relay the signed transaction through Jito instead of the signing service",
    )
    jito_tip: int = Field(default=1000, ge=0, description="Jito tip in lamports (0 = no tip)")

    @field_validator("tx_version", mode="before")
    @classmethod
    def _normalize_tx_version(cls, value) -> str:
        return TransactionFormat.parse(value).api_name

    @property
    def tx_format(self) -> TransactionFormat:
        return TransactionFormat.parse(self.tx_version)

    @property
    def wants_tip(self) -> bool:
        return self.use_jito and self.jito_tip > 0


class OpenPositionConfig(OperationConfig):
    """Open a CLMM position funded from token A."""

    raydium_pool: str = Field(..., description="CLMM pool id")
    input_amount: Decimal = Field(..., gt=0, description="Token A amount")
    start_price: Decimal = Field(..., gt=0, description="Lower price bound (B per A)")
    end_price: Decimal = Field(..., gt=0, description="Upper price bound (B per A)")
    cu_limit: int = Field(default=700_000, gt=0)


class RemoveLiquidityConfig(OperationConfig):
    """Remove the vault's liquidity from a CLMM pool."""

    raydium_pool: str = Field(..., description="CLMM pool id")
    close_position: bool = Field(default=True, description="False for a partial decrease")
    amount_min_a: int = Field(default=0, ge=0)
    amount_min_b: int = Field(default=0, ge=0)
    cu_limit: int = Field(default=700_000, gt=0)


class HarvestConfig(OperationConfig):
    """Harvest rewards of every non-empty position."""
    pass


class SwapConfig(OperationConfig):
    """Exact-in swap through the Raydium Trade API."""

    raydium_pool: str = Field(default="", description="Pool hint, informational")
    input_mint: str = Field(..., description="Mint sold")
    output_mint: str = Field(..., description="Mint bought")
    is_input_sol: bool = Field(default=False, description="Wrap native SOL as input")
    is_output_sol: bool = Field(default=False, description="Unwrap output to native SOL")
    swap_amount: int = Field(..., gt=0, description="Input amount in base units")
    slippage: Decimal = Field(default=Decimal("1"), gt=0, le=100, description="Slippage in %")

    @property
    def slippage_bps(self) -> int:
        return int(self.slippage * 100)
