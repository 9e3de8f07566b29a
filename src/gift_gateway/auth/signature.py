"""HMAC-SHA256 body signatures.

Shared by the webhook endpoint (header ``X-iStar-Signature``) and the
optional request-signing check on order routes (header ``X-Signature``).
The signature is the lowercase hex digest of the exact raw body.
"""

import hashlib
import hmac

WEBHOOK_SIGNATURE_HEADER = "X-iStar-Signature"
REQUEST_SIGNATURE_HEADER = "X-Signature"


def sign(secret: str, body: bytes) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Constant-time check of ``signature`` against the body's HMAC."""
    if not signature:
        return False
    expected = sign(secret, body)
    return hmac.compare_digest(signature.strip().encode(), expected.encode())
