"""Protocols carried in 1Sat Ordinals inscription bodies."""

from mcp_onesat_ordinals.protocols.base import Protocol
from mcp_onesat_ordinals.protocols.bsv20 import (
    BSV20Deploy,
    BSV20Mint,
    BSV20Transfer,
    BSV21DeployMint,
    BSV20Protocol,
)

__all__ = [
    "Protocol",
    "BSV20Deploy",
    "BSV20Mint",
    "BSV20Transfer",
    "BSV21DeployMint",
    "BSV20Protocol",
]
