"""
Starlette/FastAPI middleware that rejects requests without a valid signature.

    app = FastAPI()
    app.add_middleware(SignatureAuthMiddleware, settings=VerifierSettings.from_env())

Every non-VALID result is rejected before the route runs:

    400  missing/undecodable headers, malformed signature encoding
    401  recovery failure, signer mismatch
    413  body larger than ``max_body_bytes``

On success the checksummed signer address is available to routes as
``request.state.signer`` (or through the ``require_signer`` dependency).
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from ..config.settings import VerifierSettings
from ..datatypes import VerificationStatus
from ..exceptions import MalformedRequest
from .request_auth import RequestAuthenticator

logger = logging.getLogger(__name__)

SIGNER_STATE_ATTR = "signer"

_HTTP_STATUS = {
    VerificationStatus.INVALID_SIGNATURE_ENCODING: 400,
    VerificationStatus.RECOVERY_FAILED: 401,
    VerificationStatus.IDENTITY_MISMATCH: 401,
}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": {"code": code, "message": message}},
    )


class SignatureAuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, settings: Optional[VerifierSettings] = None):
        super().__init__(app)
        self.settings = settings or VerifierSettings()
        self.authenticator = RequestAuthenticator(self.settings)

    async def _read_body(self, request: Request) -> Optional[bytes]:
        """Return the body, or None when it exceeds the configured limit."""
        limit = self.settings.max_body_bytes
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                if int(declared) > limit:
                    return None
            except ValueError as exc:
                raise MalformedRequest("Content-Length is not an integer") from exc
        body = await request.body()
        if len(body) > limit:
            return None
        return body

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        try:
            body = await self._read_body(request)
            if body is None:
                logger.warning("Rejected request %s: body over %d bytes", path, self.settings.max_body_bytes)
                return error_response(413, "body_too_large", f"Body exceeds {self.settings.max_body_bytes} bytes")
            result = self.authenticator.authenticate(request.headers, body)
        except MalformedRequest as exc:
            logger.warning("Rejected request %s: malformed auth headers: %s", path, exc)
            return error_response(400, "malformed_request", str(exc))

        if not result.ok:
            logger.warning("Rejected request %s: %s (%s)", path, result.status.value, result.error)
            return error_response(_HTTP_STATUS[result.status], result.status.value, str(result.error))

        setattr(request.state, SIGNER_STATE_ATTR, result.recovered.checksum_address)
        return await call_next(request)


def require_signer(request: Request) -> str:
    """FastAPI dependency returning the authenticated signer address."""
    signer = getattr(request.state, SIGNER_STATE_ATTR, None)
    if signer is None:
        raise HTTPException(status_code=401, detail="Request is not signature-authenticated")
    return signer
