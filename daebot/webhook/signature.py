"""HMAC verification of GitHub webhook deliveries."""

import hashlib
import hmac

from daebot.webhook.errors import SignatureError

_ALGORITHMS = {
    "sha256": hashlib.sha256,
    "sha1": hashlib.sha1,
}


def sign(secret: str, body: bytes, algorithm: str = "sha256") -> str:
    """Signature header value GitHub would send for body ("sha256=<hex>")."""
    digest = hmac.new(secret.encode("utf-8"), body, _ALGORITHMS[algorithm]).hexdigest()
    return f"{algorithm}={digest}"


def verify_signature(secret: str, body: bytes, signature: str | None) -> None:
    """Raise SignatureError unless signature matches body.

    Accepts X-Hub-Signature-256 ("sha256=...") and the legacy
    X-Hub-Signature ("sha1=...") formats.
    """
    if not signature:
        raise SignatureError("missing signature header")
    algorithm, _, _ = signature.partition("=")
    if algorithm not in _ALGORITHMS:
        raise SignatureError(f"unsupported signature algorithm: {algorithm}")
    expected = sign(secret, body, algorithm)
    if not hmac.compare_digest(expected, signature):
        raise SignatureError("signature does not match payload")
