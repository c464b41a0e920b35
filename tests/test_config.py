"""Tests for configuration loading."""

import pytest
from pathlib import Path
from mcp_onesat_ordinals.config import (
    Config,
    ConnectionMethod,
    Network,
    load_config,
    DEFAULT_CONFIG,
)


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_network_is_mainnet(self):
        """Scanning is read-only, so mainnet is the default."""
        config = Config()
        assert config.network == Network.MAINNET

    def test_default_connection_is_cli(self):
        """Default connection method is bitcoin-cli."""
        config = Config()
        assert config.connection_method == ConnectionMethod.CLI

    def test_default_max_tx_size(self):
        """Max transaction size defaults to 10MB."""
        assert DEFAULT_CONFIG.max_tx_size == 10_000_000

    def test_default_log_level(self):
        """Logging defaults to warnings only."""
        assert Config().log_level == "WARNING"

    def test_log_level_normalized(self):
        """Log level is case-insensitive."""
        assert Config(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Reject unknown log levels."""
        with pytest.raises(ValueError, match="Unknown log level"):
            Config(log_level="chatty")


class TestConfigLoading:
    """Test configuration file loading."""

    def test_load_from_toml_string(self, tmp_path):
        """Load configuration from TOML file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('''
[connection]
method = "rpc"
network = "stn"

[rpc]
host = "192.168.1.100"
port = 9332
user = "bitcoinrpc"
password = "secret123"

[scan]
max_tx_size = 50000

[logging]
level = "info"
''')

        config = load_config(config_file)

        assert config.connection_method == ConnectionMethod.RPC
        assert config.network == Network.STN
        assert config.rpc_host == "192.168.1.100"
        assert config.rpc_port == 9332
        assert config.rpc_user == "bitcoinrpc"
        assert config.max_tx_size == 50000
        assert config.log_level == "INFO"

    def test_load_missing_file_uses_defaults(self, tmp_path):
        """Missing config file should use defaults."""
        config = load_config(tmp_path / "nonexistent.toml")

        assert config.network == Network.MAINNET
        assert config.log_level == "WARNING"

    def test_partial_config_merges_with_defaults(self, tmp_path):
        """Partial config should merge with defaults."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('''
[connection]
network = "regtest"

[cli]
datadir = "/data/bsv"
''')

        config = load_config(config_file)

        assert config.network == Network.REGTEST
        assert config.cli_datadir == "/data/bsv"
        assert config.connection_method == ConnectionMethod.CLI  # default
        assert config.max_tx_size == 10_000_000  # default

    def test_unknown_network(self, tmp_path):
        """Unknown network names are rejected."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[connection]\nnetwork = "signet"\n')

        with pytest.raises(ValueError):
            load_config(config_file)


class TestNetworkPorts:
    """Test default RPC ports per network."""

    @pytest.mark.parametrize("network,expected_port", [
        (Network.MAINNET, 8332),
        (Network.TESTNET, 18332),
        (Network.STN, 9332),
        (Network.REGTEST, 18332),
    ])
    def test_default_port_for_network(self, network, expected_port):
        """Each network has correct default RPC port."""
        config = Config(network=network)
        assert config.default_rpc_port == expected_port

    def test_configured_port_wins(self):
        """Explicit RPC port overrides the network default."""
        assert Config(rpc_port=1234).get_rpc_port() == 1234
