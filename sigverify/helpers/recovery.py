"""
Public-key recovery over secp256k1.

eth_keys performs the recovery (native backend, or coincurve when it is
installed). The recovered point is checked against the curve equation
before an identity is derived from it, since backends differ in how they
report the point at infinity.
"""

import logging

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_utils import ValidationError, big_endian_to_int

from ..datatypes import Digest, Identity, PUBLIC_KEY_LENGTH, Signature
from ..exceptions import RecoveryFailed

logger = logging.getLogger(__name__)

# y^2 = x^3 + 7 over F_p
SECPK1_P = 2**256 - 2**32 - 977
SECPK1_B = 7


def _is_on_curve(x: int, y: int) -> bool:
    if not (0 <= x < SECPK1_P and 0 <= y < SECPK1_P):
        return False
    return (y * y - x * x * x - SECPK1_B) % SECPK1_P == 0


def recover_public_key(digest: Digest, signature: Signature) -> bytes:
    """
    Recover the 64-byte uncompressed public key (x || y) that produced ``signature``.

    Raises:
        RecoveryFailed: No public key corresponds to (digest, r, s, recovery id)
    """
    try:
        eth_signature = keys.Signature(vrs=signature.vrs)
        public_key = eth_signature.recover_public_key_from_msg_hash(digest.value)
    except (BadSignature, ValidationError, ValueError) as exc:
        raise RecoveryFailed(f"Public key recovery failed: {exc}") from exc

    raw = public_key.to_bytes()
    if len(raw) != PUBLIC_KEY_LENGTH:
        raise RecoveryFailed(f"Recovered key has unexpected length {len(raw)}")

    x = big_endian_to_int(raw[:32])
    y = big_endian_to_int(raw[32:])
    if x == 0 and y == 0:
        raise RecoveryFailed("Recovered point is at infinity")
    if not _is_on_curve(x, y):
        raise RecoveryFailed("Recovered point is not on secp256k1")
    return raw


def recover_identity(digest: Digest, signature: Signature) -> Identity:
    identity = Identity.from_public_key(recover_public_key(digest, signature))
    logger.debug("Recovered %s from digest %s", identity.checksum_address, digest.hex())
    return identity
