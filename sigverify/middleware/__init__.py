"""
Request authentication built on the verifier.

``request_auth`` is framework neutral; ``auth_middleware`` adapts it to
Starlette/FastAPI applications.
"""

from .auth_middleware import SIGNER_STATE_ATTR, SignatureAuthMiddleware, require_signer
from .request_auth import AuthPayload, RequestAuthenticator, decode_auth_payload

__all__ = [
    "AuthPayload",
    "RequestAuthenticator",
    "decode_auth_payload",
    "SignatureAuthMiddleware",
    "SIGNER_STATE_ATTR",
    "require_signer",
]
