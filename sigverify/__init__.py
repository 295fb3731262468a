"""
sigverify - ECDSA (secp256k1) personal-message signature verification.

    result = verify(b"Hello, Ethereum!", signature, "0x...")
    if not result.ok:
        result.raise_for_status()
"""

from .datatypes import (
    Digest,
    Identity,
    RecoveryId,
    Signature,
    VerificationResult,
    VerificationStatus,
)
from .exceptions import (
    IdentityMismatch,
    InvalidDigest,
    InvalidIdentity,
    InvalidLength,
    InvalidRecoveryId,
    MalformedRequest,
    NonCanonicalS,
    RecoveryFailed,
    ScalarOutOfRange,
    SignatureEncodingError,
    SignatureVerificationError,
)
from .helpers import (
    decode_signature,
    encode_signature,
    hash_message,
    is_canonical,
    recover_identity,
    recover_public_key,
)
from .verifier import recover_signer, verify, verify_digest

__version__ = "0.1.0"

__all__ = [
    "Digest",
    "Identity",
    "RecoveryId",
    "Signature",
    "VerificationResult",
    "VerificationStatus",
    "SignatureVerificationError",
    "SignatureEncodingError",
    "InvalidLength",
    "InvalidRecoveryId",
    "NonCanonicalS",
    "ScalarOutOfRange",
    "RecoveryFailed",
    "IdentityMismatch",
    "InvalidDigest",
    "InvalidIdentity",
    "MalformedRequest",
    "hash_message",
    "decode_signature",
    "encode_signature",
    "is_canonical",
    "recover_public_key",
    "recover_identity",
    "verify",
    "verify_digest",
    "recover_signer",
]
