"""Abstract interface for Bitcoin SV node communication."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from mcp_onesat_ordinals.errors import BadArgumentError


_TXID = re.compile(r"[0-9a-fA-F]{64}")


def validate_txid(txid: str) -> str:
    """Return the txid in lower case, or raise BadArgumentError."""
    if not isinstance(txid, str) or not _TXID.fullmatch(txid):
        raise BadArgumentError(f"txid must be 64 hex characters, got {txid!r}")
    return txid.lower()


@dataclass
class NodeInfo:
    """Bitcoin SV node information."""
    connected: bool
    network: str
    block_height: int
    version: int
    errors: str = ""


@dataclass
class TransactionInfo:
    """Transaction information."""
    txid: str
    blockhash: Optional[str]
    confirmations: int
    time: Optional[int]
    hex: str


class NodeInterface(ABC):
    """Abstract interface for Bitcoin SV node communication."""

    @abstractmethod
    async def get_info(self) -> NodeInfo:
        """Get node status and network info."""
        pass  # pragma: no cover

    @abstractmethod
    async def get_transaction(self, txid: str) -> TransactionInfo:
        """Get transaction details, including its raw hex."""
        pass  # pragma: no cover
