"""Immutable value types passed between the verification steps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union

from eth_utils import (
    decode_hex,
    is_checksum_address,
    is_checksum_formatted_address,
    is_hex,
    is_hex_address,
    keccak,
    to_canonical_address,
    to_checksum_address,
)

from .exceptions import (
    InvalidDigest,
    InvalidIdentity,
    InvalidRecoveryId,
    NonCanonicalS,
    ScalarOutOfRange,
    SignatureVerificationError,
)

# secp256k1 group order and its low-s bound (EIP-2)
SECPK1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECPK1_HALF_N = SECPK1_N // 2

DIGEST_LENGTH = 32
IDENTITY_LENGTH = 20
PUBLIC_KEY_LENGTH = 64


@dataclass(frozen=True)
class Digest:
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise InvalidDigest(f"Digest must be bytes, got {type(self.value).__name__}")
        if len(self.value) != DIGEST_LENGTH:
            raise InvalidDigest(f"Digest must be {DIGEST_LENGTH} bytes, got {len(self.value)}")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, hex_string: str) -> "Digest":
        if not is_hex(hex_string):
            raise InvalidDigest(f"Digest is not hex: {hex_string[:10]}...")
        return cls(decode_hex(hex_string))

    def hex(self) -> str:
        return "0x" + self.value.hex()


class RecoveryId(IntEnum):
    """Parity of the R point's y coordinate."""

    EVEN = 0
    ODD = 1


@dataclass(frozen=True)
class Signature:
    """A parsed, canonical (low-s) secp256k1 signature.

    ``legacy_v`` remembers whether the recovery byte was serialized as
    27/28 rather than 0/1, so re-encoding gives back the original bytes.
    """

    r: int
    s: int
    recovery_id: RecoveryId
    legacy_v: bool = False

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "recovery_id", RecoveryId(self.recovery_id))
        except ValueError as exc:
            raise InvalidRecoveryId(f"Recovery id must be 0 or 1, got {self.recovery_id!r}") from exc
        if not 0 < self.r < SECPK1_N:
            raise ScalarOutOfRange("r is outside [1, n)")
        if not 0 < self.s < SECPK1_N:
            raise ScalarOutOfRange("s is outside [1, n)")
        if self.s > SECPK1_HALF_N:
            raise NonCanonicalS("s is in the upper half of the curve order")

    @property
    def v(self) -> int:
        return int(self.recovery_id) + (27 if self.legacy_v else 0)

    @property
    def vrs(self):
        return int(self.recovery_id), self.r, self.s


@dataclass(frozen=True)
class Identity:
    """20-byte account identity derived from a public key."""

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)) or len(self.value) != IDENTITY_LENGTH:
            raise InvalidIdentity(f"Identity must be {IDENTITY_LENGTH} bytes")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_public_key(cls, public_key: bytes) -> "Identity":
        if len(public_key) != PUBLIC_KEY_LENGTH:
            raise InvalidIdentity(f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}")
        return cls(keccak(public_key)[-IDENTITY_LENGTH:])

    @classmethod
    def parse(cls, value: Union[str, bytes, "Identity"]) -> "Identity":
        """Accept an Identity, 20 raw bytes, or a 0x-hex address (EIP-55 checked when mixed case)."""
        if isinstance(value, Identity):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        if isinstance(value, str):
            if not is_hex_address(value):
                raise InvalidIdentity(f"Not a valid address: {value[:12]}...")
            if is_checksum_formatted_address(value) and not is_checksum_address(value):
                raise InvalidIdentity(f"Bad EIP-55 checksum: {value}")
            return cls(to_canonical_address(value))
        raise InvalidIdentity(f"Unsupported identity type: {type(value).__name__}")

    @property
    def checksum_address(self) -> str:
        return to_checksum_address(self.value)

    def __str__(self) -> str:
        return self.checksum_address


class VerificationStatus(Enum):
    VALID = "valid"
    INVALID_SIGNATURE_ENCODING = "invalid_signature_encoding"
    RECOVERY_FAILED = "recovery_failed"
    IDENTITY_MISMATCH = "identity_mismatch"


@dataclass(frozen=True)
class VerificationResult:
    status: VerificationStatus
    recovered: Optional[Identity] = None
    error: Optional[SignatureVerificationError] = None

    @property
    def ok(self) -> bool:
        return self.status is VerificationStatus.VALID

    def raise_for_status(self) -> None:
        """Raise the stored error unless the signature was valid."""
        if self.ok:
            return
        if self.error is not None:
            raise self.error
        raise SignatureVerificationError(self.status.value)
