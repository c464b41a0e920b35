"""MCP server and library for 1Sat Ordinals inscription detection."""

__version__ = "0.1.0"

# Server entry points
from mcp_onesat_ordinals.server import create_server, main

# Configuration
from mcp_onesat_ordinals.config import Config, Network, ConnectionMethod

# Errors
from mcp_onesat_ordinals.errors import (
    OrdinalError,
    BadArgumentError,
    ScriptDecodeError,
    TransactionDecodeError,
)

# Script primitives
from mcp_onesat_ordinals.primitives import (
    Operation,
    decode_script,
    encode_push_data,
)

# Transactions
from mcp_onesat_ordinals.transaction import Transaction, TxInput, TxOutput

# Envelope scanning/encoding
from mcp_onesat_ordinals.envelope import (
    EnvelopeScanner,
    ScanState,
    scan_envelope,
    encode_envelope,
    encode_inscription_envelope,
)

# Inscriptions
from mcp_onesat_ordinals.inscription import (
    Outpoint,
    OrdinalInscription,
    OrdinalTransfer,
    scan_output,
    scan_txo,
    scan_transaction,
)

__all__ = [
    # Version
    "__version__",
    # Server
    "create_server",
    "main",
    # Config
    "Config",
    "Network",
    "ConnectionMethod",
    # Errors
    "OrdinalError",
    "BadArgumentError",
    "ScriptDecodeError",
    "TransactionDecodeError",
    # Primitives
    "Operation",
    "decode_script",
    "encode_push_data",
    # Transactions
    "Transaction",
    "TxInput",
    "TxOutput",
    # Envelope
    "EnvelopeScanner",
    "ScanState",
    "scan_envelope",
    "encode_envelope",
    "encode_inscription_envelope",
    # Inscriptions
    "Outpoint",
    "OrdinalInscription",
    "OrdinalTransfer",
    "scan_output",
    "scan_txo",
    "scan_transaction",
]
