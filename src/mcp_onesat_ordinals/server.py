"""MCP server for 1Sat Ordinals inscription detection.

This server exposes tools for finding inscriptions in Bitcoin SV
transactions, including script decoding, transaction examination,
BSV-20 token payloads, and lookups through a Bitcoin SV node.
"""

import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from mcp_onesat_ordinals.config import Config, ConnectionMethod, load_config
from mcp_onesat_ordinals.envelope import encode_inscription_envelope
from mcp_onesat_ordinals.errors import BadArgumentError
from mcp_onesat_ordinals.inscription import (
    OrdinalInscription,
    scan_output,
    scan_transaction,
)
from mcp_onesat_ordinals.node.cli import BitcoinCLI
from mcp_onesat_ordinals.node.interface import NodeInterface
from mcp_onesat_ordinals.node.rpc import BitcoinRPC
from mcp_onesat_ordinals.primitives import decode_script as decode_script_bytes
from mcp_onesat_ordinals.primitives import p2pkh_script
from mcp_onesat_ordinals.protocols.bsv20 import (
    CONTENT_TYPE as BSV20_CONTENT_TYPE,
    BSV20Deploy,
    BSV20Mint,
    BSV20Protocol,
    BSV20Transfer,
)
from mcp_onesat_ordinals.transaction import Transaction


logger = logging.getLogger(__name__)

NULL_TX_HASH = "00" * 32


def _from_hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise BadArgumentError(f"{what} is not valid hex")


def _describe(inscription: OrdinalInscription) -> dict[str, Any]:
    """Inscription as a dictionary, with the BSV-20 payload when present."""
    result = inscription.to_dict()
    if inscription.content_type == BSV20_CONTENT_TYPE:
        try:
            result["bsv20"] = _bsv20_dict(BSV20Protocol.from_inscription(inscription))
        except (ValueError, TypeError) as e:
            result["bsv20"] = {"error": str(e)}
    return result


def _bsv20_dict(operation) -> dict[str, Any]:
    return {"type": type(operation).__name__, "json": operation.to_json()}


def create_server(config: Optional[Config] = None) -> FastMCP:
    """Create and configure the MCP server with all tools.

    Args:
        config: Optional configuration. If not provided, uses defaults.

    Returns:
        Configured FastMCP server instance.
    """
    if config is None:
        config = Config()

    mcp = FastMCP("mcp-onesat-ordinals")

    # Store config on server for access by tools
    mcp._config = config
    mcp._node: Optional[NodeInterface] = None

    def get_node() -> NodeInterface:
        """Get or create the node interface."""
        if mcp._node is None:
            if config.connection_method == ConnectionMethod.CLI:
                mcp._node = BitcoinCLI(config)
            else:
                mcp._node = BitcoinRPC(config)
        return mcp._node

    def examine(tx_hex: str) -> dict[str, Any]:
        if len(tx_hex) > 2 * config.max_tx_size:
            raise BadArgumentError(
                f"transaction larger than {config.max_tx_size} bytes"
            )
        tx = Transaction.from_hex(tx_hex)
        inscriptions = scan_transaction(tx)
        return {
            "tx_hash": tx.hash,
            "output_count": len(tx.outputs),
            "count": len(inscriptions),
            "inscriptions": [_describe(i) for i in inscriptions],
        }

    # =========================================================================
    # Scripts and Transactions (offline-capable)
    # =========================================================================

    @mcp.tool()
    def decode_script(script_hex: str) -> dict:
        """Decode a locking script into operations.

        Args:
            script_hex: Script as hex string

        Returns:
            Dictionary with 'asm', per-operation details and 'trailing_hex'.
        """
        try:
            ops, trailing = decode_script_bytes(_from_hex(script_hex, "script"))
        except ValueError as e:
            return {"error": str(e)}

        return {
            "asm": " ".join(op.to_asm() for op in ops),
            "operations": [
                {
                    "asm": op.to_asm(),
                    "opcode": op.opcode,
                    "is_data_push": op.is_data_push(),
                    "small_num": op.small_num_pushed(),
                }
                for op in ops
            ],
            "trailing_hex": trailing.hex(),
        }

    @mcp.tool()
    def scan_script(
        script_hex: str,
        value: int = 1,
        tx_hash: str = NULL_TX_HASH,
        index: int = 0,
    ) -> dict:
        """Scan a single output script for an inscription envelope.

        Args:
            script_hex: Locking script as hex string
            value: Output value in satoshis (only 1 can carry an inscription)
            tx_hash: Transaction hash to use for the inscription id
            index: Output index to use for the inscription id

        Returns:
            Dictionary with 'found' and the 'inscription' when found.
        """
        try:
            script = _from_hex(script_hex, "script")
            ops, _ = decode_script_bytes(script)
        except BadArgumentError as e:
            return {"error": str(e)}
        except ValueError as e:
            # undecodable scripts never carry an inscription
            logger.debug("script not decodable: %s", e)
            return {"found": False, "inscription": None}

        inscription = scan_output(ops, tx_hash, index, value)
        return {
            "found": inscription is not None,
            "inscription": _describe(inscription) if inscription else None,
        }

    @mcp.tool()
    def examine_transaction(tx_hex: str) -> dict:
        """Find all inscriptions in a raw transaction.

        Args:
            tx_hex: Serialized transaction as hex string

        Returns:
            Dictionary with 'tx_hash', 'count' and the 'inscriptions' in
            output order.
        """
        try:
            return examine(tx_hex)
        except ValueError as e:
            return {"error": str(e)}

    # =========================================================================
    # Inscription and Token Building
    # =========================================================================

    @mcp.tool()
    def build_inscription(
        content: str,
        content_type: str = "text/plain;charset=utf-8",
        encoding: str = "utf-8",
        pubkey_hash_hex: Optional[str] = None,
    ) -> dict:
        """Build an inscription envelope, optionally followed by a P2PKH lock.

        Args:
            content: Inscription content
            content_type: MIME type of the content
            encoding: Content encoding ('utf-8' or 'hex')
            pubkey_hash_hex: 20-byte public key hash (hex) of the owner

        Returns:
            Dictionary with 'envelope_hex' and the full 'script_hex'.
        """
        try:
            if encoding == "hex":
                body = _from_hex(content, "content")
            else:
                body = content.encode(encoding)
            envelope = encode_inscription_envelope(content_type, body)
            script = envelope
            if pubkey_hash_hex:
                script = envelope + p2pkh_script(_from_hex(pubkey_hash_hex, "public key hash"))
        except (ValueError, LookupError) as e:
            return {"error": str(e)}

        return {
            "content_type": content_type,
            "content_size": len(body),
            "envelope_hex": envelope.hex(),
            "script_hex": script.hex(),
        }

    @mcp.tool()
    def parse_bsv20(json_str: str) -> dict:
        """Parse a BSV-20 token payload.

        Args:
            json_str: Inscription body JSON

        Returns:
            Dictionary with the operation type and normalized JSON.
        """
        try:
            return _bsv20_dict(BSV20Protocol.parse(json_str))
        except ValueError as e:
            return {"error": str(e)}

    @mcp.tool()
    def create_bsv20_deploy(
        tick: str,
        max_supply: int,
        mint_limit: Optional[int] = None,
        decimals: int = 0,
    ) -> dict:
        """Create a BSV-20 token deployment inscription.

        Args:
            tick: Token ticker (1 to 4 characters)
            max_supply: Maximum token supply
            mint_limit: Maximum amount per mint (optional)
            decimals: Token decimals (default: 0)

        Returns:
            Dictionary with the JSON body and envelope.
        """
        try:
            deploy = BSV20Deploy(
                tick=tick,
                max_supply=max_supply,
                mint_limit=mint_limit,
                decimals=decimals,
            )
        except ValueError as e:
            return {"error": str(e)}

        return {
            "operation": "deploy",
            "json": deploy.to_json(),
            "envelope_hex": deploy.to_envelope().hex(),
        }

    @mcp.tool()
    def create_bsv20_mint(tick: str, amount: int) -> dict:
        """Create a BSV-20 token mint inscription.

        Args:
            tick: Token ticker (1 to 4 characters)
            amount: Amount to mint

        Returns:
            Dictionary with the JSON body and envelope.
        """
        try:
            mint = BSV20Mint(tick=tick, amount=amount)
        except ValueError as e:
            return {"error": str(e)}

        return {
            "operation": "mint",
            "json": mint.to_json(),
            "envelope_hex": mint.to_envelope().hex(),
        }

    @mcp.tool()
    def create_bsv20_transfer(
        amount: int,
        tick: Optional[str] = None,
        token_id: Optional[str] = None,
    ) -> dict:
        """Create a BSV-20 token transfer inscription.

        Args:
            amount: Amount to transfer
            tick: Token ticker for v1 tokens
            token_id: Token id ('<txid>_<vout>') for v2 tokens

        Returns:
            Dictionary with the JSON body and envelope.
        """
        try:
            transfer = BSV20Transfer(amount=amount, tick=tick, token_id=token_id)
        except ValueError as e:
            return {"error": str(e)}

        return {
            "operation": "transfer",
            "json": transfer.to_json(),
            "envelope_hex": transfer.to_envelope().hex(),
        }

    # =========================================================================
    # Bitcoin SV Node Interface
    # =========================================================================

    @mcp.tool()
    async def get_node_info() -> dict:
        """Check connection and network status.

        Returns:
            Dictionary with node information including connection status,
            network, block height, and version.
        """
        node = get_node()
        info = await node.get_info()
        return {
            "connected": info.connected,
            "network": info.network,
            "block_height": info.block_height,
            "version": info.version,
            "errors": info.errors if info.errors else None,
        }

    @mcp.tool()
    async def scan_node_transaction(txid: str) -> dict:
        """Fetch a transaction from the node and find its inscriptions.

        Args:
            txid: Transaction ID (hash)

        Returns:
            Dictionary with confirmation details and the inscriptions found.
        """
        node = get_node()
        try:
            tx = await node.get_transaction(txid)
            result = examine(tx.hex)
        except (ValueError, RuntimeError) as e:
            return {"error": str(e)}

        result["blockhash"] = tx.blockhash
        result["confirmations"] = tx.confirmations
        return result

    return mcp


def main():
    """Entry point for the MCP server."""
    from pathlib import Path

    # Try to load config from standard locations
    config_paths = [
        Path("mcp-onesat-ordinals.toml"),
        Path.home() / ".config" / "mcp-onesat-ordinals" / "config.toml",
    ]

    config = None
    for path in config_paths:
        if path.exists():
            config = load_config(path)
            break

    if config is None:
        config = Config()

    logging.basicConfig(level=config.log_level)

    server = create_server(config)
    server.run()


if __name__ == "__main__":
    main()
