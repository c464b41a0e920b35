"""Bitcoin SV transaction decoding and encoding.

Only the legacy serialization is supported; Bitcoin SV has no segregated
witness.
"""

import hashlib
import struct
from dataclasses import dataclass, field

from mcp_onesat_ordinals.errors import BadArgumentError, TransactionDecodeError
from mcp_onesat_ordinals.primitives import Operation, decode_script


def double_sha256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


class _Reader:
    """Cursor over raw transaction bytes."""

    def __init__(self, data: bytes):
        self.data = data
        self.cursor = 0

    def read(self, n: int) -> bytes:
        if self.cursor + n > len(self.data):
            raise TransactionDecodeError(
                f"read past end: need {n} bytes at offset {self.cursor}, have {len(self.data)}"
            )
        result = self.data[self.cursor:self.cursor + n]
        self.cursor += n
        return result

    def read_uint32(self) -> int:
        return struct.unpack('<I', self.read(4))[0]

    def read_int32(self) -> int:
        return struct.unpack('<i', self.read(4))[0]

    def read_uint64(self) -> int:
        return struct.unpack('<Q', self.read(8))[0]

    def read_compact_size(self) -> int:
        first = self.read(1)[0]
        if first < 0xFD:
            return first
        elif first == 0xFD:
            return struct.unpack('<H', self.read(2))[0]
        elif first == 0xFE:
            return self.read_uint32()
        else:
            return self.read_uint64()

    def remaining(self) -> int:
        return len(self.data) - self.cursor


def _compact_size(n: int) -> bytes:
    if n < 0xFD:
        return bytes([n])
    elif n <= 0xFFFF:
        return b"\xfd" + struct.pack('<H', n)
    elif n <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack('<I', n)
    return b"\xff" + struct.pack('<Q', n)


@dataclass(frozen=True)
class TxInput:
    """Transaction input."""
    prev_tx_hash: str
    prev_index: int
    script: bytes
    sequence: int = 0xFFFFFFFF


@dataclass(frozen=True)
class TxOutput:
    """Transaction output."""
    value: int  # satoshis
    script: bytes

    def decode_script(self) -> tuple[list[Operation], bytes]:
        """Decode the locking script into operations and trailing bytes."""
        return decode_script(self.script)


@dataclass(frozen=True)
class Transaction:
    """A decoded transaction."""

    version: int
    inputs: tuple[TxInput, ...]
    outputs: tuple[TxOutput, ...]
    lock_time: int
    _hash: str = field(default="", compare=False, repr=False)

    @property
    def hash(self) -> str:
        """Transaction id as displayed by explorers (reversed hex)."""
        if self._hash:
            return self._hash
        return double_sha256(self.to_bytes())[::-1].hex()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Transaction":
        """Decode a serialized transaction.

        Raises:
            TransactionDecodeError: If the bytes are not a complete transaction
        """
        reader = _Reader(raw)
        version = reader.read_int32()

        inputs = []
        for _ in range(reader.read_compact_size()):
            prev_hash = reader.read(32)[::-1].hex()
            prev_index = reader.read_uint32()
            script = reader.read(reader.read_compact_size())
            sequence = reader.read_uint32()
            inputs.append(TxInput(prev_hash, prev_index, script, sequence))

        outputs = []
        for _ in range(reader.read_compact_size()):
            value = reader.read_uint64()
            script = reader.read(reader.read_compact_size())
            outputs.append(TxOutput(value, script))

        lock_time = reader.read_uint32()

        if reader.remaining():
            raise TransactionDecodeError(
                f"{reader.remaining()} unexpected trailing bytes after lock time"
            )

        return cls(
            version=version,
            inputs=tuple(inputs),
            outputs=tuple(outputs),
            lock_time=lock_time,
            _hash=double_sha256(raw)[::-1].hex(),
        )

    @classmethod
    def from_hex(cls, tx_hex: str) -> "Transaction":
        """Decode a hex-encoded transaction."""
        try:
            raw = bytes.fromhex(tx_hex.strip())
        except ValueError:
            raise BadArgumentError("transaction is not valid hex")
        return cls.from_bytes(raw)

    def to_bytes(self) -> bytes:
        """Serialize the transaction."""
        parts = [struct.pack('<i', self.version), _compact_size(len(self.inputs))]
        for txin in self.inputs:
            parts.append(bytes.fromhex(txin.prev_tx_hash)[::-1])
            parts.append(struct.pack('<I', txin.prev_index))
            parts.append(_compact_size(len(txin.script)))
            parts.append(txin.script)
            parts.append(struct.pack('<I', txin.sequence))
        parts.append(_compact_size(len(self.outputs)))
        for txout in self.outputs:
            parts.append(struct.pack('<Q', txout.value))
            parts.append(_compact_size(len(txout.script)))
            parts.append(txout.script)
        parts.append(struct.pack('<I', self.lock_time))
        return b"".join(parts)

    def to_hex(self) -> str:
        return self.to_bytes().hex()
