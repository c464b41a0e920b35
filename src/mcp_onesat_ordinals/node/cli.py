"""Bitcoin SV node CLI (subprocess) interface."""

import asyncio
import json
import logging
from typing import Any

from mcp_onesat_ordinals.config import Config, Network
from mcp_onesat_ordinals.node.interface import (
    NodeInterface,
    NodeInfo,
    TransactionInfo,
    validate_txid,
)


logger = logging.getLogger(__name__)

# Network CLI flags
NETWORK_FLAGS = {
    Network.MAINNET: [],
    Network.TESTNET: ["-testnet"],
    Network.STN: ["-stn"],
    Network.REGTEST: ["-regtest"],
}


class BitcoinCLI(NodeInterface):
    """Bitcoin SV node interface via bitcoin-cli subprocess."""

    def __init__(self, config: Config):
        self.config = config
        self.cli_path = config.cli_path
        self.network = config.network
        self.datadir = config.cli_datadir

    def _build_command(self, method: str, *args: Any) -> list[str]:
        """Build bitcoin-cli command."""
        cmd = [self.cli_path]

        # Add network flag
        cmd.extend(NETWORK_FLAGS.get(self.network, []))

        # Add datadir if configured
        if self.datadir:
            cmd.append(f"-datadir={self.datadir}")

        # Add method and arguments
        cmd.append(method)
        cmd.extend(str(arg) for arg in args)

        return cmd

    async def _call(self, method: str, *args: Any) -> Any:
        """Execute bitcoin-cli command and parse JSON response."""
        cmd = self._build_command(method, *args)
        logger.debug("bitcoin-cli %s", method)

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        stdout, stderr = await proc.communicate()

        if proc.returncode != 0:
            error_msg = stderr.decode().strip()
            raise RuntimeError(f"bitcoin-cli error: {error_msg}")

        output = stdout.decode().strip()
        if not output:
            return None

        try:
            return json.loads(output)
        except json.JSONDecodeError:
            # Some commands return plain text
            return output

    async def get_info(self) -> NodeInfo:
        """Get node status and network info."""
        try:
            chain_info = await self._call("getblockchaininfo")
            network_info = await self._call("getnetworkinfo")

            return NodeInfo(
                connected=True,
                network=chain_info["chain"],
                block_height=chain_info["blocks"],
                version=network_info["version"],
                errors=chain_info.get("warnings", ""),
            )
        except Exception as e:
            return NodeInfo(
                connected=False,
                network="unknown",
                block_height=0,
                version=0,
                errors=str(e),
            )

    async def get_transaction(self, txid: str) -> TransactionInfo:
        """Get transaction details."""
        txid = validate_txid(txid)
        try:
            result = await self._call("getrawtransaction", txid, "true")
        except RuntimeError:
            # Fall back to gettransaction for wallet transactions
            logger.debug("getrawtransaction failed for %s, trying wallet", txid)
            result = await self._call("gettransaction", txid)
        return TransactionInfo(
            txid=result["txid"],
            blockhash=result.get("blockhash"),
            confirmations=result.get("confirmations", 0),
            time=result.get("time"),
            hex=result["hex"],
        )
