"""
Signature verification pipeline.

    message -> digest -> decoded signature -> recovered identity -> compare

Each step can only fail in its own way, and the first failure ends the
pipeline. The outcome is returned as a VerificationResult so callers can
tell a malformed signature (client error) from a forged or foreign one
(authorization failure).
"""

from __future__ import annotations

import hmac
import logging
from typing import Union

from .datatypes import (
    Digest,
    Identity,
    VerificationResult,
    VerificationStatus,
)
from .exceptions import IdentityMismatch, RecoveryFailed, SignatureEncodingError
from .helpers.message_hash import MessageLike, hash_message
from .helpers.recovery import recover_identity
from .helpers.signature_codec import decode_signature

logger = logging.getLogger(__name__)

IdentityLike = Union[str, bytes, Identity]


def _to_digest(message_or_digest: Union[MessageLike, Digest]) -> Digest:
    if isinstance(message_or_digest, Digest):
        return message_or_digest
    return hash_message(message_or_digest)


def verify(
    message_or_digest: Union[MessageLike, Digest],
    signature: bytes,
    expected: IdentityLike,
) -> VerificationResult:
    """
    Check that ``signature`` over ``message_or_digest`` was made by ``expected``.

    Args:
        message_or_digest: Raw message (bytes/str/SignableMessage), hashed with
                           the personal-message rule, or a Digest used as-is
        signature: 65-byte r || s || v signature
        expected: Claimed signer address

    Returns:
        VerificationResult; only status VALID means the caller may proceed

    Raises:
        InvalidIdentity: ``expected`` is not a usable address
    """
    expected_identity = Identity.parse(expected)
    digest = _to_digest(message_or_digest)

    try:
        decoded = decode_signature(signature)
    except SignatureEncodingError as exc:
        logger.debug("Rejected signature encoding: %s", exc)
        return VerificationResult(VerificationStatus.INVALID_SIGNATURE_ENCODING, error=exc)

    try:
        recovered = recover_identity(digest, decoded)
    except RecoveryFailed as exc:
        logger.debug("Rejected signature, recovery failed: %s", exc)
        return VerificationResult(VerificationStatus.RECOVERY_FAILED, error=exc)

    if not hmac.compare_digest(recovered.value, expected_identity.value):
        logger.debug(
            "Signer mismatch: expected %s, recovered %s",
            expected_identity.checksum_address,
            recovered.checksum_address,
        )
        error = IdentityMismatch(
            f"Signature was made by {recovered.checksum_address}, "
            f"not {expected_identity.checksum_address}"
        )
        return VerificationResult(VerificationStatus.IDENTITY_MISMATCH, recovered=recovered, error=error)

    return VerificationResult(VerificationStatus.VALID, recovered=recovered)


def verify_digest(
    digest: Union[bytes, Digest],
    signature: bytes,
    expected: IdentityLike,
) -> VerificationResult:
    """Like verify() but for a precomputed 32-byte digest."""
    if not isinstance(digest, Digest):
        digest = Digest(digest)
    return verify(digest, signature, expected)


def recover_signer(message_or_digest: Union[MessageLike, Digest], signature: bytes) -> Identity:
    """Return the identity that signed ``message_or_digest``; raises on bad input."""
    return recover_identity(_to_digest(message_or_digest), decode_signature(signature))
