"""Custodial signing requests for Raydium CLMM operations on Solana."""

__version__ = "0.1.0"
