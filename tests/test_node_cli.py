"""Tests for bitcoin-cli interface."""

import pytest
from unittest.mock import AsyncMock, patch

from mcp_onesat_ordinals.errors import BadArgumentError
from mcp_onesat_ordinals.node.cli import BitcoinCLI
from mcp_onesat_ordinals.node.interface import NodeInterface, validate_txid
from mcp_onesat_ordinals.config import Config, Network


TXID = "1fefad9e727d1e520c27372a12791c7d31ca9be933f46e92eb61da8e14ba2f6d"


class TestBitcoinCLI:
    """Test bitcoin-cli subprocess interface."""

    @pytest.fixture
    def cli(self):
        """Create CLI instance with test config."""
        config = Config(network=Network.REGTEST)
        return BitcoinCLI(config)

    def test_build_command_basic(self, cli):
        """Build basic command with network flag."""
        cmd = cli._build_command("getblockcount")

        assert "bitcoin-cli" in cmd
        assert "-regtest" in cmd
        assert "getblockcount" in cmd

    def test_build_command_stn(self):
        """STN uses its own flag."""
        cli = BitcoinCLI(Config(network=Network.STN))

        assert "-stn" in cli._build_command("getinfo")

    def test_build_command_mainnet_has_no_flag(self):
        """Mainnet needs no network flag."""
        cli = BitcoinCLI(Config(network=Network.MAINNET))

        assert cli._build_command("getinfo") == ["bitcoin-cli", "getinfo"]

    def test_build_command_with_datadir(self):
        """Build command with custom datadir."""
        cli = BitcoinCLI(Config(network=Network.TESTNET, cli_datadir="/custom/datadir"))
        cmd = cli._build_command("getinfo")

        assert "-datadir=/custom/datadir" in cmd

    @pytest.mark.asyncio
    async def test_call_returns_plain_text(self, cli):
        """_call returns plain text when output is not JSON."""
        with patch('asyncio.create_subprocess_exec') as mock_exec:
            mock_proc = AsyncMock()
            mock_proc.returncode = 0
            mock_proc.communicate = AsyncMock(return_value=(b"plain text response", b""))
            mock_exec.return_value = mock_proc

            result = await cli._call("help")
            assert result == "plain text response"

    @pytest.mark.asyncio
    async def test_call_empty_response(self, cli):
        """_call returns None for empty output."""
        with patch('asyncio.create_subprocess_exec') as mock_exec:
            mock_proc = AsyncMock()
            mock_proc.returncode = 0
            mock_proc.communicate = AsyncMock(return_value=(b"", b""))
            mock_exec.return_value = mock_proc

            assert await cli._call("somecommand") is None

    @pytest.mark.asyncio
    async def test_call_error_response(self, cli):
        """_call raises when the command fails."""
        with patch('asyncio.create_subprocess_exec') as mock_exec:
            mock_proc = AsyncMock()
            mock_proc.returncode = 1
            mock_proc.communicate = AsyncMock(return_value=(b"", b"error: something failed"))
            mock_exec.return_value = mock_proc

            with pytest.raises(RuntimeError, match="something failed"):
                await cli._call("badcommand")

    @pytest.mark.asyncio
    async def test_get_info_parses_response(self, cli):
        """Parse getblockchaininfo response."""
        mock_response = {
            "chain": "regtest",
            "blocks": 100,
            "headers": 100,
            "bestblockhash": "abc",
            "warnings": "",
        }
        mock_network = {"version": 101001600, "subversion": "/Bitcoin SV:1.1.0/"}

        with patch.object(cli, '_call', new_callable=AsyncMock) as mock_call:
            mock_call.side_effect = [mock_response, mock_network]

            info = await cli.get_info()

            assert info.connected is True
            assert info.network == "regtest"
            assert info.block_height == 100
            assert info.version == 101001600

    @pytest.mark.asyncio
    async def test_get_info_connection_error(self, cli):
        """get_info reports a failed connection instead of raising."""
        with patch.object(cli, '_call', new_callable=AsyncMock) as mock_call:
            mock_call.side_effect = RuntimeError("Connection refused")
            info = await cli.get_info()

            assert info.connected is False
            assert "Connection refused" in info.errors

    @pytest.mark.asyncio
    async def test_get_transaction(self, cli):
        """Fetch verbose raw transaction."""
        with patch.object(cli, '_call', new_callable=AsyncMock) as mock_call:
            mock_call.return_value = {
                "txid": TXID,
                "blockhash": "def456",
                "confirmations": 10,
                "time": 1234567890,
                "hex": "0100",
            }
            result = await cli.get_transaction(TXID)

            assert result.txid == TXID
            assert result.hex == "0100"
            mock_call.assert_called_once_with("getrawtransaction", TXID, "true")

    @pytest.mark.asyncio
    async def test_get_transaction_fallback(self, cli):
        """Fall back to gettransaction for wallet transactions."""
        with patch.object(cli, '_call', new_callable=AsyncMock) as mock_call:
            mock_call.side_effect = [
                RuntimeError("No such mempool or blockchain transaction"),
                {"txid": TXID, "confirmations": 0, "hex": "0100"},
            ]
            result = await cli.get_transaction(TXID)

            assert result.blockhash is None
            assert mock_call.call_count == 2

    @pytest.mark.asyncio
    async def test_get_transaction_validates_txid(self, cli):
        """Reject malformed txids before calling the node."""
        with patch.object(cli, '_call', new_callable=AsyncMock) as mock_call:
            with pytest.raises(BadArgumentError, match="64 hex"):
                await cli.get_transaction("abc123")
            mock_call.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_transaction_rejects_trailing_newline(self, cli):
        """A txid followed by a newline is not passed to the node."""
        with patch.object(cli, '_call', new_callable=AsyncMock) as mock_call:
            with pytest.raises(BadArgumentError):
                await cli.get_transaction(TXID + "\n")
            mock_call.assert_not_called()


class TestValidateTxid:
    """Test txid validation."""

    def test_lowercases(self):
        """Valid txids are returned in lower case."""
        assert validate_txid(TXID.upper()) == TXID

    @pytest.mark.parametrize("txid", [TXID + "\n", " " + TXID, TXID[:-1], TXID + "00", None])
    def test_rejects_malformed(self, txid):
        """Anything but exactly 64 hex characters is rejected."""
        with pytest.raises(BadArgumentError, match="64 hex"):
            validate_txid(txid)


class TestNodeInterfaceAbstract:
    """Test the abstract node interface."""

    def test_interface_is_abstract(self):
        """NodeInterface cannot be instantiated directly."""
        with pytest.raises(TypeError, match="abstract"):
            NodeInterface()
