"""
Verification steps: message hashing, signature decoding and key recovery.
"""

from .message_hash import hash_message
from .recovery import recover_identity, recover_public_key
from .signature_codec import decode_signature, encode_signature, is_canonical

__all__ = [
    "hash_message",
    "decode_signature",
    "encode_signature",
    "is_canonical",
    "recover_public_key",
    "recover_identity",
]
