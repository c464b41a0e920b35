"""Bitcoin SV node communication interfaces."""

from mcp_onesat_ordinals.node.interface import (
    NodeInterface,
    NodeInfo,
    TransactionInfo,
    validate_txid,
)
from mcp_onesat_ordinals.node.cli import BitcoinCLI
from mcp_onesat_ordinals.node.rpc import BitcoinRPC

__all__ = [
    "NodeInterface",
    "NodeInfo",
    "TransactionInfo",
    "validate_txid",
    "BitcoinCLI",
    "BitcoinRPC",
]
