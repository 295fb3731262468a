"""Settings for the request-authentication layer.

Values come from the process environment, optionally populated from a
``.env`` file and then an explicit env file. Variables that are already
set are never overridden.

    SIGVERIFY_SIGNATURE_HEADER  header holding the 0x-hex signature
    SIGVERIFY_SIGNER_HEADER     header holding the claimed signer address
    SIGVERIFY_DIGEST_HEADER     header holding a precomputed 0x-hex digest
    SIGVERIFY_PAYLOAD_HEADER    header holding an ABI-encoded (address, bytes32, bytes)
    SIGVERIFY_ACCEPT_DIGEST     allow callers to send a digest instead of signing the body
    SIGVERIFY_MAX_BODY_BYTES    largest request body the middleware will read
    SIGVERIFY_LOG_LEVEL         level for the ``sigverify`` logger
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env(env_file: Optional[str] = None) -> None:
    base_env = Path(".env")
    if base_env.exists():
        load_dotenv(base_env)
    if env_file:
        if not Path(env_file).exists():
            raise FileNotFoundError(f"Env file not found: {env_file}")
        load_dotenv(env_file)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class VerifierSettings:
    signature_header: str = "X-Signature"
    signer_header: str = "X-Signer"
    digest_header: str = "X-Message-Digest"
    payload_header: str = "X-Auth-Payload"
    accept_digest: bool = True
    max_body_bytes: int = 1024 * 1024
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "VerifierSettings":
        load_env(env_file)
        defaults = cls()
        log_level = os.getenv("SIGVERIFY_LOG_LEVEL", defaults.log_level).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"SIGVERIFY_LOG_LEVEL is not a logging level: {log_level}")
        raw_max_body = os.getenv("SIGVERIFY_MAX_BODY_BYTES")
        try:
            max_body_bytes = int(raw_max_body) if raw_max_body else defaults.max_body_bytes
        except ValueError as exc:
            raise ValueError(f"SIGVERIFY_MAX_BODY_BYTES must be an integer, got {raw_max_body!r}") from exc
        if max_body_bytes <= 0:
            raise ValueError("SIGVERIFY_MAX_BODY_BYTES must be positive")
        return cls(
            signature_header=os.getenv("SIGVERIFY_SIGNATURE_HEADER", defaults.signature_header),
            signer_header=os.getenv("SIGVERIFY_SIGNER_HEADER", defaults.signer_header),
            digest_header=os.getenv("SIGVERIFY_DIGEST_HEADER", defaults.digest_header),
            payload_header=os.getenv("SIGVERIFY_PAYLOAD_HEADER", defaults.payload_header),
            accept_digest=_env_bool("SIGVERIFY_ACCEPT_DIGEST", defaults.accept_digest),
            max_body_bytes=max_body_bytes,
            log_level=log_level,
        )


def configure_logging(settings: VerifierSettings) -> logging.Logger:
    logger = logging.getLogger("sigverify")
    logger.setLevel(settings.log_level)
    return logger
