"""GitHub webhook signature verification.

GitHub sends X-Hub-Signature-256: sha256=<hex HMAC-SHA256 of the raw body>.
A missing signature or secret always fails (fail-closed).
"""

from typing import Optional
import hashlib
import hmac

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def sign(body: bytes, secret: str) -> str:
    """Header value GitHub would send for body"""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    if not signature or not secret:
        return False

    expected = sign(body, secret).encode("utf-8")
    claimed = signature.encode("utf-8", errors="surrogateescape")

    # compare_digest can return early on a length mismatch, so only equal-length
    # digests of both values are compared
    key = secret.encode("utf-8")
    return hmac.compare_digest(
        hmac.new(key, expected, hashlib.sha256).digest(),
        hmac.new(key, claimed, hashlib.sha256).digest(),
    )
