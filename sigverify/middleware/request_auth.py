"""
Extract verification inputs from an HTTP request.

Two request shapes are supported:

1. Separate headers: the signature and claimed signer in their own
   headers, the message being the raw request body (or, when allowed, a
   precomputed digest header).
2. A single payload header carrying ``abi.encode(address, bytes32, bytes)``
   of (signer, message hash, signature), as produced by client tooling that
   signs the hash off-line.

All header values are 0x-prefixed hex.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, is_hex

from ..config.settings import VerifierSettings
from ..datatypes import Digest, Identity, VerificationResult
from ..exceptions import InvalidDigest, InvalidIdentity, MalformedRequest
from ..verifier import verify

logger = logging.getLogger(__name__)

AUTH_PAYLOAD_TYPES = ["address", "bytes32", "bytes"]


@dataclass(frozen=True)
class AuthPayload:
    signer: Identity
    digest: Digest
    signature: bytes


def decode_auth_payload(data: bytes) -> AuthPayload:
    """
    Decode an ABI-encoded (address, bytes32, bytes) authentication payload.

    Raises:
        MalformedRequest: If the data is not a valid encoding of the triple
    """
    try:
        signer, digest, signature = decode(AUTH_PAYLOAD_TYPES, data)
    except (DecodingError, OverflowError, ValueError) as exc:
        # oversized length/offset words surface as OverflowError from the stream read
        raise MalformedRequest(f"Cannot decode auth payload: {exc}") from exc
    return AuthPayload(signer=Identity.parse(signer), digest=Digest(digest), signature=bytes(signature))


def _hex_value(value: str, name: str) -> bytes:
    value = value.strip()
    if not value.startswith(("0x", "0X")) or not is_hex(value):
        raise MalformedRequest(f"Header {name} must be 0x-prefixed hex")
    try:
        return decode_hex(value)
    except ValueError as exc:
        raise MalformedRequest(f"Header {name} is not valid hex: {exc}") from exc


class RequestAuthenticator:
    """Verify that a request was signed by the signer it claims."""

    def __init__(self, settings: Optional[VerifierSettings] = None):
        self.settings = settings or VerifierSettings()

    def authenticate(self, headers: Mapping[str, str], body: bytes = b"") -> VerificationResult:
        """
        Args:
            headers: Request headers (matched case-insensitively)
            body: Raw request body, the signed message unless a digest is supplied

        Returns:
            VerificationResult of the signature check

        Raises:
            MalformedRequest: Required headers are missing or undecodable
        """
        lowered = {k.lower(): v for k, v in headers.items()}
        s = self.settings

        payload_value = lowered.get(s.payload_header.lower())
        if payload_value is not None:
            if not s.accept_digest:
                raise MalformedRequest("Precomputed digests are not accepted")
            payload = decode_auth_payload(_hex_value(payload_value, s.payload_header))
            return verify(payload.digest, payload.signature, payload.signer)

        signature_value = lowered.get(s.signature_header.lower())
        signer_value = lowered.get(s.signer_header.lower())
        if signature_value is None:
            raise MalformedRequest(f"Missing {s.signature_header} header")
        if signer_value is None:
            raise MalformedRequest(f"Missing {s.signer_header} header")

        signature = _hex_value(signature_value, s.signature_header)
        try:
            signer = Identity.parse(signer_value.strip())
        except InvalidIdentity as exc:
            raise MalformedRequest(f"Header {s.signer_header} is not an address") from exc

        digest_value = lowered.get(s.digest_header.lower())
        if digest_value is None:
            return verify(body, signature, signer)

        if not s.accept_digest:
            raise MalformedRequest("Precomputed digests are not accepted")
        try:
            digest = Digest(_hex_value(digest_value, s.digest_header))
        except InvalidDigest as exc:
            raise MalformedRequest(f"Header {s.digest_header} must be 32 bytes") from exc
        return verify(digest, signature, signer)
