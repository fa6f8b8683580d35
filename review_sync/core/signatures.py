import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Return the ``X-Hub-Signature-256`` value GitHub would send for *body*."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str | None, body: bytes, signature_header: str | None) -> bool:
    """Check a webhook signature against the raw request body.

    Lengths are compared first; ``hmac.compare_digest`` then compares the
    equal-length values in constant time.
    """
    if not secret or not signature_header:
        return False
    expected = compute_signature(secret, body).encode("utf-8")
    received = signature_header.encode("utf-8")
    if len(expected) != len(received):
        return False
    return hmac.compare_digest(expected, received)
