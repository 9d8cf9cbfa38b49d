"""
Conversion between raw (R || S) and ASN.1 DER encoded ECDSA signatures.

JWS ES256 carries signatures as two fixed-width unsigned big-endian integers,
while signing libraries emit DER: SEQUENCE { INTEGER r, INTEGER s }. DER
integers are signed, so a value whose first byte has the high bit set gets a
0x00 prefix, and any other leading zero byte is forbidden.
"""
import logging
from typing import Tuple

from ecsign.errors import InvalidLength, MalformedDer

logger = logging.getLogger(__name__)

ES256_PART_LENGTH = 32

SEQUENCE_TAG = 0x30
INTEGER_TAG = 0x02

# Inner INTEGER lengths are always short form
MAX_PART_LENGTH = 126


def prepare_integer(data: bytes) -> bytes:
    """Turn an unsigned big-endian integer into minimal DER INTEGER content."""
    if data[0] >= 0x80:
        return b"\x00" + data
    while len(data) > 1 and data[0] == 0x00 and data[1] <= 0x7F:
        data = data[1:]
    return data


def retrieve_integer(data: bytes, part_length: int) -> bytes:
    """Undo the sign padding and left-pad to exactly part_length bytes."""
    data = data.lstrip(b"\x00")
    if len(data) > part_length:
        raise MalformedDer(f"INTEGER wider than {part_length} bytes")
    return data.rjust(part_length, b"\x00")


def _check_part_length(part_length: int):
    if not 1 <= part_length <= MAX_PART_LENGTH:
        raise InvalidLength(f"part length {part_length} out of range 1..{MAX_PART_LENGTH}")


def _encode_length(length: int) -> bytes:
    if length <= 0x7F:
        return bytes([length])
    # Long form: 0x80 | byte count, then the big-endian length
    body = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def raw_to_der(raw: bytes, part_length: int = ES256_PART_LENGTH) -> bytes:
    """
    Encode a fixed-width R || S signature as DER.
    Raises InvalidLength unless len(raw) == 2 * part_length.
    """
    _check_part_length(part_length)
    if len(raw) != 2 * part_length:
        raise InvalidLength(f"raw signature must be {2 * part_length} bytes, got {len(raw)}")

    r = prepare_integer(raw[:part_length])
    s = prepare_integer(raw[part_length:])

    content = bytes([INTEGER_TAG, len(r)]) + r + bytes([INTEGER_TAG, len(s)]) + s
    return bytes([SEQUENCE_TAG]) + _encode_length(len(content)) + content


def _read_sequence_header(der: bytes) -> Tuple[int, int]:
    """Returns (declared content length, offset of the first content byte)."""
    if len(der) < 2 or der[0] != SEQUENCE_TAG:
        raise MalformedDer("expected SEQUENCE tag 0x30")

    first = der[1]
    if first < 0x80:
        return first, 2

    # Long form: low bits give the number of length bytes
    count = first & 0x7F
    if count == 0 or count > 4:
        raise MalformedDer(f"unsupported SEQUENCE length byte 0x{first:02x}")
    if len(der) < 2 + count:
        raise MalformedDer("truncated SEQUENCE length")
    return int.from_bytes(der[2:2 + count], "big"), 2 + count


def _read_integer(der: bytes, offset: int, strict: bool) -> Tuple[bytes, int]:
    """Returns (INTEGER content, offset just past it)."""
    if offset >= len(der) or der[offset] != INTEGER_TAG:
        raise MalformedDer("expected INTEGER tag 0x02")
    if offset + 1 >= len(der):
        raise MalformedDer("truncated INTEGER length")

    length = der[offset + 1]
    if length >= 0x80:
        raise MalformedDer("long form INTEGER length not supported")

    start = offset + 2
    end = start + length
    if end > len(der):
        raise MalformedDer("INTEGER runs past end of signature")
    content = der[start:end]

    if strict:
        if not content:
            raise MalformedDer("empty INTEGER")
        if content[0] >= 0x80:
            raise MalformedDer("negative INTEGER")
        if len(content) > 1 and content[0] == 0x00 and content[1] <= 0x7F:
            raise MalformedDer("non-minimal INTEGER encoding")
    return content, end


def der_to_raw(der: bytes, part_length: int = ES256_PART_LENGTH, strict: bool = False) -> bytes:
    """
    Decode a DER ECDSA signature into fixed-width R || S.

    The declared SEQUENCE length is only cross-checked against the buffer
    when strict is set; strict mode also rejects trailing bytes and
    non-canonical INTEGERs. Raises MalformedDer on any grammar violation.
    """
    _check_part_length(part_length)

    declared, offset = _read_sequence_header(der)
    if strict and declared != len(der) - offset:
        raise MalformedDer(
            f"SEQUENCE declares {declared} bytes but {len(der) - offset} remain"
        )

    r, offset = _read_integer(der, offset, strict)
    s, offset = _read_integer(der, offset, strict)

    if strict and offset != len(der):
        raise MalformedDer("trailing bytes after signature")

    raw = retrieve_integer(r, part_length) + retrieve_integer(s, part_length)
    logger.debug("Decoded %d byte DER signature into %d byte raw signature", len(der), len(raw))
    return raw
