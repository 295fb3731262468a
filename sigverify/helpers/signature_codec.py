"""
65-byte signature codec.

Layout is r(32) || s(32) || v(1), big-endian scalars. v is accepted as the
recovery id itself (0/1) or in the legacy 27/28 form; both decode to the
same RecoveryId and the original form is kept for re-encoding.
"""

from eth_utils import big_endian_to_int

from ..datatypes import RecoveryId, Signature
from ..exceptions import InvalidLength, InvalidRecoveryId, SignatureEncodingError

SIGNATURE_LENGTH = 65
SCALAR_LENGTH = 32
LEGACY_V_OFFSET = 27


def decode_signature(data: bytes) -> Signature:
    """
    Parse a serialized signature.

    Raises:
        InvalidLength: data is not exactly 65 bytes
        InvalidRecoveryId: v is not one of 0, 1, 27, 28
        ScalarOutOfRange: r or s is zero or not below the curve order
        NonCanonicalS: s is above half the curve order
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Signature must be bytes, got {type(data).__name__}")
    data = bytes(data)
    if len(data) != SIGNATURE_LENGTH:
        raise InvalidLength(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(data)}")

    r = big_endian_to_int(data[:SCALAR_LENGTH])
    s = big_endian_to_int(data[SCALAR_LENGTH:2 * SCALAR_LENGTH])
    v = data[-1]

    if v in (LEGACY_V_OFFSET, LEGACY_V_OFFSET + 1):
        recovery_id, legacy_v = RecoveryId(v - LEGACY_V_OFFSET), True
    elif v in (0, 1):
        recovery_id, legacy_v = RecoveryId(v), False
    else:
        raise InvalidRecoveryId(f"Recovery byte must be 0, 1, 27 or 28, got {v}")

    return Signature(r=r, s=s, recovery_id=recovery_id, legacy_v=legacy_v)


def encode_signature(signature: Signature) -> bytes:
    return (
        signature.r.to_bytes(SCALAR_LENGTH, "big")
        + signature.s.to_bytes(SCALAR_LENGTH, "big")
        + bytes([signature.v])
    )


def is_canonical(data: bytes) -> bool:
    """True if ``data`` decodes cleanly, i.e. is a well-formed low-s signature."""
    try:
        decode_signature(data)
    except SignatureEncodingError:
        return False
    return True
