"""Vault operations, each ending in a signing request.

Provides:
- open_position: open a CLMM position
- remove_liquidity: withdraw (and close) the vault's position in a pool
- harvest_rewards: harvest rewards of all non-empty positions
- swap: exact-in swap via the Raydium Trade API
"""

from solcustody.operations.base import OperationDeps, finalize_request
from solcustody.operations.harvest import harvest_rewards
from solcustody.operations.open_position import open_position
from solcustody.operations.remove_liquidity import remove_liquidity
from solcustody.operations.swap import swap

__all__ = [
    "OperationDeps",
    "finalize_request",
    "open_position",
    "remove_liquidity",
    "harvest_rewards",
    "swap",
]
