"""1Sat Ordinals inscriptions and transfers, and transaction scanning.

An inscription either creates a token or updates one. Both are carried in
transaction outputs worth exactly one satoshi. Whether an inscription is
valid can only be judged here within the context of a single output;
linking it to earlier inscriptions or transfers requires chain context
that a single transaction does not carry.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from mcp_onesat_ordinals.envelope import BODY_KEY, CONTENT_TYPE_KEY, scan_envelope
from mcp_onesat_ordinals.errors import ScriptDecodeError
from mcp_onesat_ordinals.primitives import Operation
from mcp_onesat_ordinals.transaction import Transaction, TxOutput


logger = logging.getLogger(__name__)

# Value in satoshis of every output carrying an inscription or transfer
ONE_SAT = 1


@dataclass(frozen=True)
class Outpoint:
    """Identifies a transaction output."""

    tx_hash: str
    index: int

    def __str__(self) -> str:
        return f"{self.tx_hash}_{self.index}"


@dataclass(frozen=True)
class OrdinalInscription:
    """Token data stored on-chain in a single output.

    Only the data of this one inscription is held here, not the history
    of the token it belongs to.

    ``prev_id``, ``new_owner_reference`` and ``must_be_creation`` need a
    chain-context resolver (previous outputs, spent input values, address
    patterns) and are always None/False when produced by scanning.
    """

    id: Outpoint
    prev_id: Optional[Outpoint] = None
    new_owner_reference: Optional[str] = None
    # True only when every spent input is worth more than one satoshi
    must_be_creation: bool = False
    creation_fields: Mapping[int, bytes] = field(default_factory=dict, hash=False)
    metadata_fields: Mapping[int, bytes] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # read-only copies of the caller's maps
        object.__setattr__(self, "creation_fields", MappingProxyType(dict(self.creation_fields)))
        object.__setattr__(self, "metadata_fields", MappingProxyType(dict(self.metadata_fields)))

    @property
    def content_type(self) -> Optional[str]:
        """Content type from creation field 1, if present and valid UTF-8."""
        raw = self.creation_fields.get(CONTENT_TYPE_KEY)
        if raw is None:
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return None

    @property
    def body(self) -> bytes:
        return self.metadata_fields.get(BODY_KEY, b"")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "id": str(self.id),
            "tx_hash": self.id.tx_hash,
            "index": self.id.index,
            "prev_id": str(self.prev_id) if self.prev_id else None,
            "new_owner_reference": self.new_owner_reference,
            "must_be_creation": self.must_be_creation,
            "content_type": self.content_type,
            "creation_fields": {str(k): v.hex() for k, v in self.creation_fields.items()},
            "metadata_fields": {str(k): v.hex() for k, v in self.metadata_fields.items()},
            "body_hex": self.body.hex(),
        }
        try:
            result["body_utf8"] = self.body.decode("utf-8")
        except UnicodeDecodeError:
            result["body_utf8"] = None
        return result


@dataclass(frozen=True)
class OrdinalTransfer:
    """A transfer of control of a token to a new owner.

    Not necessarily the latest transfer of the token. No scanner produces
    transfers yet.
    """

    id: Outpoint
    prev_id: Outpoint
    new_owner_reference: str


def scan_output(
    operations: Iterable[Operation],
    tx_hash: str,
    output_index: int,
    output_value: int,
) -> Optional[OrdinalInscription]:
    """Scan one output's decoded script for an inscription.

    An inscription is valid here if it follows the envelope conventions and
    the output is worth exactly one satoshi. Other outputs are rejected
    without looking at the script.

    Args:
        operations: Decoded locking script operations
        tx_hash: Hash of the transaction being scanned
        output_index: Position of the output in the transaction
        output_value: Output value in satoshis

    Returns:
        The inscription, or None if the output does not carry one
    """
    if output_value != ONE_SAT:
        return None

    found = scan_envelope(operations)
    if found is None:
        return None

    return OrdinalInscription(
        id=Outpoint(tx_hash=tx_hash, index=output_index),
        creation_fields=found.creation_fields,
        metadata_fields=found.metadata_fields,
    )


def scan_txo(txo: TxOutput, tx_hash: str, index: int) -> Optional[OrdinalInscription]:
    """Decode an output's script and scan it; undecodable scripts never match."""
    if txo.value != ONE_SAT:
        return None
    try:
        operations, _ = txo.decode_script()
    except ScriptDecodeError as e:
        logger.debug("error decoding script of output %d, ignoring: %s", index, e)
        return None
    return scan_output(operations, tx_hash, index, txo.value)


def scan_transaction(tx: Transaction) -> list[OrdinalInscription]:
    """Scan a transaction for inscriptions.

    A transaction can carry several inscriptions, one per output at most.
    Invalid candidates are skipped rather than reported, so an empty list
    simply means none were found.

    Inputs are not examined: one input can fund two creation inscriptions,
    and two inputs with two inscription outputs could be either creations
    or updates.

    Args:
        tx: Decoded transaction

    Returns:
        Inscriptions in ascending output order
    """
    tx_hash = tx.hash
    result = []
    for index, txo in enumerate(tx.outputs):
        logger.debug("scanning output %d of tx %s", index, tx_hash)
        inscription = scan_txo(txo, tx_hash, index)
        if inscription is not None:
            logger.debug("found inscription %s", inscription.id)
            result.append(inscription)
    return result
