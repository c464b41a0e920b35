"""Bitcoin SV script operations: decoding, encoding and disassembly.

Scripts are decoded into a flat list of Operation values. Data pushes keep
their payload; every other opcode is a bare operation.
"""

from dataclasses import dataclass
from typing import Optional

from mcp_onesat_ordinals.errors import BadArgumentError, ScriptDecodeError


# Bitcoin script opcodes
OP_0 = 0x00
OP_FALSE = OP_0
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1NEGATE = 0x4F
OP_1 = 0x51
OP_TRUE = OP_1
OP_16 = 0x60
OP_IF = 0x63
OP_NOTIF = 0x64
OP_ELSE = 0x67
OP_ENDIF = 0x68
OP_RETURN = 0x6A
OP_DUP = 0x76
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC

MAX_DIRECT_PUSH = 0x4B

OPCODE_NAMES = {
    0x00: "OP_0",
    0x4C: "OP_PUSHDATA1",
    0x4D: "OP_PUSHDATA2",
    0x4E: "OP_PUSHDATA4",
    0x4F: "OP_1NEGATE",
    0x50: "OP_RESERVED",
    **{OP_1 + n: f"OP_{n + 1}" for n in range(16)},
    0x61: "OP_NOP",
    0x62: "OP_VER",
    0x63: "OP_IF",
    0x64: "OP_NOTIF",
    0x65: "OP_VERIF",
    0x66: "OP_VERNOTIF",
    0x67: "OP_ELSE",
    0x68: "OP_ENDIF",
    0x69: "OP_VERIFY",
    0x6A: "OP_RETURN",
    0x6B: "OP_TOALTSTACK",
    0x6C: "OP_FROMALTSTACK",
    0x6D: "OP_2DROP",
    0x6E: "OP_2DUP",
    0x6F: "OP_3DUP",
    0x70: "OP_2OVER",
    0x71: "OP_2ROT",
    0x72: "OP_2SWAP",
    0x73: "OP_IFDUP",
    0x74: "OP_DEPTH",
    0x75: "OP_DROP",
    0x76: "OP_DUP",
    0x77: "OP_NIP",
    0x78: "OP_OVER",
    0x79: "OP_PICK",
    0x7A: "OP_ROLL",
    0x7B: "OP_ROT",
    0x7C: "OP_SWAP",
    0x7D: "OP_TUCK",
    0x7E: "OP_CAT",
    0x7F: "OP_SPLIT",
    0x80: "OP_NUM2BIN",
    0x81: "OP_BIN2NUM",
    0x82: "OP_SIZE",
    0x83: "OP_INVERT",
    0x84: "OP_AND",
    0x85: "OP_OR",
    0x86: "OP_XOR",
    0x87: "OP_EQUAL",
    0x88: "OP_EQUALVERIFY",
    0x89: "OP_RESERVED1",
    0x8A: "OP_RESERVED2",
    0x8B: "OP_1ADD",
    0x8C: "OP_1SUB",
    0x8D: "OP_2MUL",
    0x8E: "OP_2DIV",
    0x8F: "OP_NEGATE",
    0x90: "OP_ABS",
    0x91: "OP_NOT",
    0x92: "OP_0NOTEQUAL",
    0x93: "OP_ADD",
    0x94: "OP_SUB",
    0x95: "OP_MUL",
    0x96: "OP_DIV",
    0x97: "OP_MOD",
    0x98: "OP_LSHIFT",
    0x99: "OP_RSHIFT",
    0x9A: "OP_BOOLAND",
    0x9B: "OP_BOOLOR",
    0x9C: "OP_NUMEQUAL",
    0x9D: "OP_NUMEQUALVERIFY",
    0x9E: "OP_NUMNOTEQUAL",
    0x9F: "OP_LESSTHAN",
    0xA0: "OP_GREATERTHAN",
    0xA1: "OP_LESSTHANOREQUAL",
    0xA2: "OP_GREATERTHANOREQUAL",
    0xA3: "OP_MIN",
    0xA4: "OP_MAX",
    0xA5: "OP_WITHIN",
    0xA6: "OP_RIPEMD160",
    0xA7: "OP_SHA1",
    0xA8: "OP_SHA256",
    0xA9: "OP_HASH160",
    0xAA: "OP_HASH256",
    0xAB: "OP_CODESEPARATOR",
    0xAC: "OP_CHECKSIG",
    0xAD: "OP_CHECKSIGVERIFY",
    0xAE: "OP_CHECKMULTISIG",
    0xAF: "OP_CHECKMULTISIGVERIFY",
}


@dataclass(frozen=True)
class Operation:
    """A single decoded script operation.

    ``data`` is set for explicit pushes (direct and PUSHDATA1/2/4) and is
    None for every other opcode, including OP_0 and OP_1..OP_16.
    """

    opcode: int
    data: Optional[bytes] = None

    @classmethod
    def push(cls, data: bytes) -> "Operation":
        """Build the push operation a decoder would produce for ``data``."""
        script = encode_push_data(data)
        ops, _ = decode_script(script)
        return ops[0]

    def matches(self, opcode: int) -> bool:
        """Return True if this is the bare control opcode ``opcode``."""
        return self.data is None and self.opcode == opcode

    def is_data_push(self) -> bool:
        """Return True if executing this operation pushes data."""
        return (
            self.opcode <= OP_PUSHDATA4
            or self.opcode == OP_1NEGATE
            or OP_1 <= self.opcode <= OP_16
        )

    def data_pushed(self) -> Optional[bytes]:
        """Return the bytes pushed by this operation, or None."""
        if self.data is not None:
            return self.data
        if self.opcode == OP_0:
            return b""
        if self.opcode == OP_1NEGATE:
            return b"\x81"
        if OP_1 <= self.opcode <= OP_16:
            return bytes([self.opcode - OP_1 + 1])
        return None

    def small_num_pushed(self) -> Optional[int]:
        """Return the value of a minimal small-integer push (-1..16), or None.

        Only OP_0, OP_1NEGATE and OP_1..OP_16 qualify; an explicit one-byte
        push of the same value is not minimal.
        """
        if self.data is not None:
            return None
        if self.opcode == OP_0:
            return 0
        if self.opcode == OP_1NEGATE:
            return -1
        if OP_1 <= self.opcode <= OP_16:
            return self.opcode - OP_1 + 1
        return None

    def to_asm(self) -> str:
        """Render the operation in assembly notation."""
        if self.data is not None:
            return self.data.hex() if self.data else "0"
        return OPCODE_NAMES.get(self.opcode, f"OP_UNKNOWN{self.opcode:#04x}")


def decode_script(script: bytes) -> tuple[list[Operation], bytes]:
    """Decode a script into operations.

    An OP_RETURN outside any OP_IF/OP_NOTIF block ends execution; the bytes
    after it are returned undecoded as trailing data.

    Args:
        script: Raw script bytes

    Returns:
        Tuple of (operations, trailing bytes)

    Raises:
        ScriptDecodeError: If a push runs past the end of the script
    """
    ops: list[Operation] = []
    pos = 0
    depth = 0

    while pos < len(script):
        opcode = script[pos]
        pos += 1

        if 0x01 <= opcode <= MAX_DIRECT_PUSH:
            length = opcode
        elif opcode == OP_PUSHDATA1:
            if pos + 1 > len(script):
                raise ScriptDecodeError(f"Truncated PUSHDATA1 at offset {pos - 1}")
            length = script[pos]
            pos += 1
        elif opcode == OP_PUSHDATA2:
            if pos + 2 > len(script):
                raise ScriptDecodeError(f"Truncated PUSHDATA2 at offset {pos - 1}")
            length = int.from_bytes(script[pos:pos+2], 'little')
            pos += 2
        elif opcode == OP_PUSHDATA4:
            if pos + 4 > len(script):
                raise ScriptDecodeError(f"Truncated PUSHDATA4 at offset {pos - 1}")
            length = int.from_bytes(script[pos:pos+4], 'little')
            pos += 4
        else:
            ops.append(Operation(opcode))
            if opcode in (OP_IF, OP_NOTIF):
                depth += 1
            elif opcode == OP_ENDIF and depth > 0:
                depth -= 1
            elif opcode == OP_RETURN and depth == 0:
                return ops, script[pos:]
            continue

        if pos + length > len(script):
            raise ScriptDecodeError(
                f"Script truncated: expected {length} bytes, got {len(script) - pos}"
            )
        ops.append(Operation(opcode, script[pos:pos+length]))
        pos += length

    return ops, b""


def encode_push_data(data: bytes) -> bytes:
    """Encode a data push using the smallest push opcode.

    - empty: OP_0
    - < 76 bytes: direct push (1 byte length)
    - 76-255 bytes: OP_PUSHDATA1 (1 byte length)
    - 256-65535 bytes: OP_PUSHDATA2 (2 byte length, little-endian)
    - larger: OP_PUSHDATA4 (4 byte length, little-endian)
    """
    length = len(data)

    if length == 0:
        return bytes([OP_0])
    elif length <= MAX_DIRECT_PUSH:
        return bytes([length]) + data
    elif length <= 255:
        return bytes([OP_PUSHDATA1, length]) + data
    elif length <= 65535:
        return bytes([OP_PUSHDATA2]) + length.to_bytes(2, 'little') + data
    else:
        return bytes([OP_PUSHDATA4]) + length.to_bytes(4, 'little') + data


def encode_small_num(value: int) -> bytes:
    """Encode -1..16 as its single-opcode minimal push."""
    if value == 0:
        return bytes([OP_0])
    if value == -1:
        return bytes([OP_1NEGATE])
    if 1 <= value <= 16:
        return bytes([OP_1 + value - 1])
    raise BadArgumentError(f"small integer out of range -1..16: {value}")


def disassemble(script: bytes) -> str:
    """Turn script bytes into an assembly string."""
    ops, trailing = decode_script(script)
    parts = [op.to_asm() for op in ops]
    if trailing:
        parts.append(trailing.hex())
    return " ".join(parts)


def p2pkh_script(pubkey_hash: bytes) -> bytes:
    """Build a standard pay-to-public-key-hash locking script."""
    if len(pubkey_hash) != 20:
        raise BadArgumentError(f"public key hash must be 20 bytes, got {len(pubkey_hash)}")
    return bytes([OP_DUP, OP_HASH160]) + encode_push_data(pubkey_hash) + bytes([OP_EQUALVERIFY, OP_CHECKSIG])
