"""Upstream services consumed while building a request.

Provides:
- BlockhashProvider: latest blockhash over Solana RPC
- PriorityFeeResolver: compute-unit price from the Raydium auto-fee API
- RaydiumTradeApi: pre-built swap transactions
- JitoRelay: tip accounts and manual transaction relay
"""

from solcustody.providers.fees import PriorityFeeResolver
from solcustody.providers.jito import JitoRelay
from solcustody.providers.raydium import RaydiumTradeApi
from solcustody.providers.rpc import BlockhashProvider

__all__ = [
    "BlockhashProvider",
    "PriorityFeeResolver",
    "RaydiumTradeApi",
    "JitoRelay",
]
