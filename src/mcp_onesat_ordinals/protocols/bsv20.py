"""BSV-20 token protocol implementation.

BSV-20 tokens are JSON inscription bodies with content type
``application/bsv-20``:
- Deploy: Create a new ticker-based token (v1)
- Mint: Mint tokens of a v1 ticker
- Deploy+Mint: Create a v2 token (BSV-21) and mint its whole supply at once
- Transfer: Transfer tokens, addressed by ticker (v1) or token id (v2)

Reference: https://docs.1satordinals.com/bsv20
"""

import json
import re
from dataclasses import dataclass
from typing import Optional, Union

from mcp_onesat_ordinals.envelope import encode_inscription_envelope
from mcp_onesat_ordinals.inscription import OrdinalInscription
from mcp_onesat_ordinals.protocols.base import Protocol


CONTENT_TYPE = "application/bsv-20"
MAX_DECIMALS = 18

_TOKEN_ID = re.compile(r"[0-9a-f]{64}_\d+")


def _check_tick(tick: str) -> None:
    if not isinstance(tick, str):
        raise ValueError(f"Tick must be a string, got {type(tick).__name__}")
    if not 1 <= len(tick) <= 4:
        raise ValueError(f"Tick must be 1 to 4 characters, got {len(tick)}")


def _check_decimals(decimals: int) -> None:
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"Decimals must be between 0 and {MAX_DECIMALS}, got {decimals}")


def _check_amount(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def _text(data: dict, key: str, required: bool = False) -> Optional[str]:
    """Read a string field from a parsed payload."""
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"BSV-20 field {key!r} is required")
        return None
    if not isinstance(value, str):
        raise ValueError(f"BSV-20 field {key!r} must be a string")
    return value


def _number(data: dict, key: str, minimum: int, required: bool = False) -> Optional[int]:
    """Read a number field; BSV-20 writes numbers as decimal digit strings."""
    value = _text(data, key, required)
    if value is None:
        return None
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"BSV-20 field {key!r} must be a decimal string, got {value!r}")
    number = int(value)
    if number < minimum:
        raise ValueError(f"BSV-20 field {key!r} must be at least {minimum}, got {number}")
    return number


def _dumps(data: dict) -> str:
    return json.dumps(data, separators=(',', ':'))


@dataclass
class BSV20Deploy(Protocol):
    """BSV-20 v1 deploy operation."""

    tick: str
    max_supply: int
    mint_limit: Optional[int] = None
    decimals: int = 0

    def __post_init__(self):
        _check_tick(self.tick)
        _check_amount("Max supply", self.max_supply)
        if self.mint_limit is not None:
            _check_amount("Mint limit", self.mint_limit)
        _check_decimals(self.decimals)

    def to_json(self) -> str:
        """Convert to BSV-20 JSON format."""
        data = {
            "p": "bsv-20",
            "op": "deploy",
            "tick": self.tick,
            "max": str(self.max_supply),
        }
        if self.mint_limit is not None:
            data["lim"] = str(self.mint_limit)
        if self.decimals:
            data["dec"] = str(self.decimals)
        return _dumps(data)

    def to_bytes(self) -> bytes:
        """Convert to raw bytes."""
        return self.to_json().encode('utf-8')

    def to_envelope(self) -> bytes:
        """Convert to inscription envelope."""
        return encode_inscription_envelope(CONTENT_TYPE, self.to_bytes())


@dataclass
class BSV20Mint(Protocol):
    """BSV-20 v1 mint operation."""

    tick: str
    amount: int

    def __post_init__(self):
        _check_tick(self.tick)
        _check_amount("Amount", self.amount)

    def to_json(self) -> str:
        """Convert to BSV-20 JSON format."""
        return _dumps({
            "p": "bsv-20",
            "op": "mint",
            "tick": self.tick,
            "amt": str(self.amount),
        })

    def to_bytes(self) -> bytes:
        return self.to_json().encode('utf-8')

    def to_envelope(self) -> bytes:
        return encode_inscription_envelope(CONTENT_TYPE, self.to_bytes())


@dataclass
class BSV21DeployMint(Protocol):
    """BSV-21 deploy+mint operation; the token id is the inscription outpoint."""

    amount: int
    symbol: Optional[str] = None
    decimals: int = 0

    def __post_init__(self):
        _check_amount("Amount", self.amount)
        if self.symbol is not None and not isinstance(self.symbol, str):
            raise ValueError("Symbol must be a string")
        _check_decimals(self.decimals)

    def to_json(self) -> str:
        data = {"p": "bsv-20", "op": "deploy+mint"}
        if self.symbol is not None:
            data["sym"] = self.symbol
        data["amt"] = str(self.amount)
        if self.decimals:
            data["dec"] = str(self.decimals)
        return _dumps(data)

    def to_bytes(self) -> bytes:
        return self.to_json().encode('utf-8')

    def to_envelope(self) -> bytes:
        return encode_inscription_envelope(CONTENT_TYPE, self.to_bytes())


@dataclass
class BSV20Transfer(Protocol):
    """BSV-20 transfer operation, by v1 tick or by v2 token id."""

    amount: int
    tick: Optional[str] = None
    token_id: Optional[str] = None

    def __post_init__(self):
        if (self.tick is None) == (self.token_id is None):
            raise ValueError("Transfer needs exactly one of tick or token_id")
        _check_amount("Amount", self.amount)
        if self.tick is not None:
            _check_tick(self.tick)
        elif not isinstance(self.token_id, str) or not _TOKEN_ID.fullmatch(self.token_id):
            raise ValueError(f"Token id must be <txid>_<vout>, got {self.token_id!r}")

    def to_json(self) -> str:
        """Convert to BSV-20 JSON format."""
        data = {"p": "bsv-20", "op": "transfer"}
        if self.token_id is not None:
            data["id"] = self.token_id
        data["amt"] = str(self.amount)
        if self.tick is not None:
            data["tick"] = self.tick
        return _dumps(data)

    def to_bytes(self) -> bytes:
        return self.to_json().encode('utf-8')

    def to_envelope(self) -> bytes:
        return encode_inscription_envelope(CONTENT_TYPE, self.to_bytes())


BSV20Operation = Union[BSV20Deploy, BSV20Mint, BSV21DeployMint, BSV20Transfer]


class BSV20Protocol:
    """BSV-20 protocol parser and helpers."""

    @staticmethod
    def parse(json_str: str) -> BSV20Operation:
        """Parse BSV-20 JSON into operation object.

        Args:
            json_str: BSV-20 JSON string

        Returns:
            Appropriate BSV-20 operation object

        Raises:
            ValueError: If not valid BSV-20 JSON
        """
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ValueError("BSV-20 payload must be a JSON object")

        if data.get("p") != "bsv-20":
            raise ValueError(f"Not a BSV-20 inscription: p={data.get('p')}")

        op = data.get("op")

        if op == "deploy":
            return BSV20Deploy(
                tick=_text(data, "tick", required=True),
                max_supply=_number(data, "max", 1, required=True),
                mint_limit=_number(data, "lim", 1),
                decimals=_number(data, "dec", 0) or 0,
            )
        elif op == "mint":
            return BSV20Mint(
                tick=_text(data, "tick", required=True),
                amount=_number(data, "amt", 1, required=True),
            )
        elif op == "deploy+mint":
            return BSV21DeployMint(
                amount=_number(data, "amt", 1, required=True),
                symbol=_text(data, "sym"),
                decimals=_number(data, "dec", 0) or 0,
            )
        elif op == "transfer":
            return BSV20Transfer(
                amount=_number(data, "amt", 1, required=True),
                tick=_text(data, "tick"),
                token_id=_text(data, "id"),
            )
        else:
            raise ValueError(f"Unknown BSV-20 operation: {op!r}")

    @staticmethod
    def from_inscription(inscription: OrdinalInscription) -> BSV20Operation:
        """Parse the body of an ``application/bsv-20`` inscription.

        Raises:
            ValueError: If the inscription does not carry a BSV-20 payload
        """
        if inscription.content_type != CONTENT_TYPE:
            raise ValueError(f"Not a BSV-20 inscription: content type {inscription.content_type!r}")
        try:
            body = inscription.body.decode("utf-8")
        except UnicodeDecodeError:
            raise ValueError("BSV-20 body is not valid UTF-8")
        return BSV20Protocol.parse(body)
