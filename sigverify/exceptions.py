"""Error taxonomy for signature verification.

Encoding errors describe a signature that cannot be parsed, recovery errors
describe a well-formed signature that does not lead to a public key, and an
identity mismatch means the signature is valid but was made by someone else.
None of them are retryable.
"""


class SignatureVerificationError(Exception):
    """Base class for every verification failure."""


class SignatureEncodingError(SignatureVerificationError):
    """The serialized signature is malformed."""


class InvalidLength(SignatureEncodingError):
    pass


class InvalidRecoveryId(SignatureEncodingError):
    pass


class NonCanonicalS(SignatureEncodingError):
    pass


class ScalarOutOfRange(SignatureEncodingError):
    pass


class RecoveryFailed(SignatureVerificationError):
    pass


class IdentityMismatch(SignatureVerificationError):
    pass


class InvalidDigest(SignatureVerificationError, ValueError):
    pass


class InvalidIdentity(SignatureVerificationError, ValueError):
    pass


class MalformedRequest(SignatureVerificationError):
    """Authentication headers are missing or cannot be decoded."""
