"""Configuration loading and management."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

try:
    import tomli
except ImportError:  # pragma: no cover
    import tomllib as tomli  # Python 3.11+


class ConnectionMethod(Enum):
    """Bitcoin SV node connection method."""
    CLI = "cli"
    RPC = "rpc"


class Network(Enum):
    """Bitcoin SV network."""
    MAINNET = "mainnet"
    TESTNET = "testnet"
    STN = "stn"
    REGTEST = "regtest"


# Default RPC ports per network
DEFAULT_PORTS = {
    Network.MAINNET: 8332,
    Network.TESTNET: 18332,
    Network.STN: 9332,
    Network.REGTEST: 18332,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Server configuration."""

    # Connection settings
    connection_method: ConnectionMethod = ConnectionMethod.CLI
    network: Network = Network.MAINNET

    # CLI settings
    cli_path: str = "bitcoin-cli"
    cli_datadir: str = ""

    # RPC settings
    rpc_host: str = "127.0.0.1"
    rpc_port: Optional[int] = None
    rpc_user: str = ""
    rpc_password: str = ""

    # Scan settings
    max_tx_size: int = 10_000_000  # bytes of raw transaction

    # Logging
    log_level: str = "WARNING"

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def default_rpc_port(self) -> int:
        """Get default RPC port for current network."""
        return DEFAULT_PORTS[self.network]

    def get_rpc_port(self) -> int:
        """Get configured or default RPC port."""
        return self.rpc_port if self.rpc_port else self.default_rpc_port


DEFAULT_CONFIG = Config()


def load_config(path: Path) -> Config:
    """Load configuration from TOML file.

    Args:
        path: Path to config file

    Returns:
        Loaded configuration, merged with defaults
    """
    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        data = tomli.load(f)

    conn = data.get("connection", {})
    cli = data.get("cli", {})
    rpc = data.get("rpc", {})
    scan = data.get("scan", {})
    logging_section = data.get("logging", {})

    return Config(
        connection_method=ConnectionMethod(conn.get("method", "cli")),
        network=Network(conn.get("network", "mainnet")),
        cli_path=cli.get("path", "bitcoin-cli"),
        cli_datadir=cli.get("datadir", ""),
        rpc_host=rpc.get("host", "127.0.0.1"),
        rpc_port=rpc.get("port"),
        rpc_user=rpc.get("user", ""),
        rpc_password=rpc.get("password", ""),
        max_tx_size=scan.get("max_tx_size", 10_000_000),
        log_level=logging_section.get("level", "WARNING"),
    )
