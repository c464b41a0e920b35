"""1Sat Ordinals inscription envelope scanning and encoding.

The envelope format, embedded anywhere in a locking script:

    OP_FALSE OP_IF "ord" <key> <value> ... OP_0 <body> OP_ENDIF

- Magic (3 byte push): "ord"
- Fields: a minimal small-integer key followed by a data push value.
  Odd keys are creation fields (key 1 is the content type), even keys are
  metadata fields.
- Body: key 0, always the last field, immediately closed by OP_ENDIF.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional

from mcp_onesat_ordinals.errors import BadArgumentError
from mcp_onesat_ordinals.primitives import (
    OP_ENDIF,
    OP_FALSE,
    OP_IF,
    Operation,
    encode_push_data,
    encode_small_num,
)


logger = logging.getLogger(__name__)

ORD_MAGIC = b"ord"
BODY_KEY = 0
CONTENT_TYPE_KEY = 1


class ScanState(Enum):
    """Envelope scanner states."""

    INITIAL = "initial"          # looking for OP_FALSE
    FALSE_SEEN = "false_seen"    # next must be OP_IF
    IF_SEEN = "if_seen"          # next must be the "ord" push
    IN_ENVELOPE = "in_envelope"  # next must be a field key
    GOT_KEY = "got_key"          # next must be the field value
    GOT_BODY = "got_body"        # next must be OP_ENDIF
    CLOSED = "closed"


@dataclass
class EnvelopeFields:
    """Fields of one closed envelope, ordered by key."""

    creation_fields: dict[int, bytes] = field(default_factory=dict)
    metadata_fields: dict[int, bytes] = field(default_factory=dict)


class EnvelopeScanner:
    """Finite-state machine that finds the first envelope in an operation stream.

    Any unexpected operation resets the scanner to INITIAL. The operation
    that caused the reset is consumed and is not itself re-tested as the
    start of a new envelope.
    """

    def __init__(self) -> None:
        self.state = ScanState.INITIAL
        self.key = 0
        self.creation_fields: dict[int, bytes] = {}
        self.metadata_fields: dict[int, bytes] = {}
        self._transitions = {
            ScanState.INITIAL: self._on_initial,
            ScanState.FALSE_SEEN: self._on_false_seen,
            ScanState.IF_SEEN: self._on_if_seen,
            ScanState.IN_ENVELOPE: self._on_in_envelope,
            ScanState.GOT_KEY: self._on_got_key,
            ScanState.GOT_BODY: self._on_got_body,
            ScanState.CLOSED: self._on_closed,
        }

    @property
    def closed(self) -> bool:
        return self.state is ScanState.CLOSED

    def feed(self, op: Operation) -> bool:
        """Advance the machine by one operation.

        Returns:
            True once an envelope has been closed
        """
        self.state = self._transitions[self.state](op)
        return self.closed

    def fields(self) -> EnvelopeFields:
        """Return a copy of the fields collected by the closed envelope."""
        if not self.closed:
            raise RuntimeError("No envelope has been closed")
        return EnvelopeFields(
            creation_fields=dict(sorted(self.creation_fields.items())),
            metadata_fields=dict(sorted(self.metadata_fields.items())),
        )

    def _reset(self, reason: str) -> ScanState:
        logger.debug("envelope candidate rejected in state %s: %s", self.state.value, reason)
        return ScanState.INITIAL

    def _on_initial(self, op: Operation) -> ScanState:
        if op.matches(OP_FALSE):
            logger.debug("found OP_FALSE")
            return ScanState.FALSE_SEEN
        return ScanState.INITIAL

    def _on_false_seen(self, op: Operation) -> ScanState:
        if op.matches(OP_IF):
            logger.debug("found OP_IF")
            return ScanState.IF_SEEN
        return self._reset("expected OP_IF")

    def _on_if_seen(self, op: Operation) -> ScanState:
        data = op.data_pushed()
        if data is None:
            return self._reset("expected magic push")
        if data != ORD_MAGIC:
            return self._reset(f"magic mismatch {data[:8].hex()}")
        # a fresh attempt starts with empty fields
        self.creation_fields = {}
        self.metadata_fields = {}
        self.key = 0
        logger.debug("in 1sat ordinals envelope")
        return ScanState.IN_ENVELOPE

    def _on_in_envelope(self, op: Operation) -> ScanState:
        key = op.small_num_pushed() if op.is_data_push() else None
        if key is None:
            return self._reset("expected small integer key")
        self.key = key
        logger.debug("got key %d", key)
        return ScanState.GOT_KEY

    def _on_got_key(self, op: Operation) -> ScanState:
        if not op.is_data_push():
            return self._reset("expected value push")
        value = op.data_pushed()
        logger.debug("got value for key %d, length %d", self.key, len(value))
        if self.key % 2 == 0:
            self.metadata_fields[self.key] = value
        else:
            self.creation_fields[self.key] = value
        if self.key == BODY_KEY:
            return ScanState.GOT_BODY
        return ScanState.IN_ENVELOPE

    def _on_got_body(self, op: Operation) -> ScanState:
        if not op.matches(OP_ENDIF):
            return self._reset("expected OP_ENDIF")
        logger.debug("envelope closed")
        return ScanState.CLOSED

    def _on_closed(self, op: Operation) -> ScanState:
        return ScanState.CLOSED


def scan_envelope(operations: Iterable[Operation]) -> Optional[EnvelopeFields]:
    """Return the fields of the first well-formed envelope, or None.

    Operations after the closing OP_ENDIF are not consumed.
    """
    scanner = EnvelopeScanner()
    for op in operations:
        if scanner.feed(op):
            return scanner.fields()
    return None


def encode_envelope(fields: Mapping[int, bytes]) -> bytes:
    """Encode fields into an envelope script fragment.

    Non-body fields are written in ascending key order, then the body.

    Args:
        fields: Mapping of key (-1..16) to value; key 0 (the body) is required

    Returns:
        Envelope script bytes

    Raises:
        BadArgumentError: If the body is missing or a key is out of range
    """
    if BODY_KEY not in fields:
        raise BadArgumentError("envelope requires a body field (key 0)")

    parts = [bytes([OP_FALSE, OP_IF]), encode_push_data(ORD_MAGIC)]
    for key in sorted(k for k in fields if k != BODY_KEY):
        parts.append(encode_small_num(key))
        parts.append(encode_push_data(fields[key]))
    parts.append(encode_small_num(BODY_KEY))
    parts.append(encode_push_data(fields[BODY_KEY]))
    parts.append(bytes([OP_ENDIF]))
    return b"".join(parts)


def encode_inscription_envelope(
    content_type: str,
    body: bytes,
    creation_fields: Optional[Mapping[int, bytes]] = None,
    metadata_fields: Optional[Mapping[int, bytes]] = None,
) -> bytes:
    """Encode an inscription with a content type and body.

    Args:
        content_type: MIME type, stored as creation field 1
        body: Inscription content, stored as metadata field 0
        creation_fields: Extra odd-keyed fields
        metadata_fields: Extra even-keyed, non-zero fields

    Returns:
        Envelope script bytes
    """
    fields: dict[int, bytes] = {}
    for key, value in (creation_fields or {}).items():
        if key % 2 == 0:
            raise BadArgumentError(f"creation field keys must be odd, got {key}")
        fields[key] = value
    for key, value in (metadata_fields or {}).items():
        if key % 2 != 0 or key == BODY_KEY:
            raise BadArgumentError(f"metadata field keys must be even and non-zero, got {key}")
        fields[key] = value
    fields[CONTENT_TYPE_KEY] = content_type.encode("utf-8")
    fields[BODY_KEY] = body
    return encode_envelope(fields)
