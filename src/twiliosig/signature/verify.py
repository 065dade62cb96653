"""HMAC-SHA1 request signature computation and verification."""

from __future__ import annotations

import base64
import hashlib
import hmac

from twiliosig.signature.canonical import TEXT_ERRORS, FormData, canonical_string

SIGNATURE_HEADER = "X-Twilio-Signature"

Secret = bytes | str


def _key(secret: Secret) -> bytes:
    return secret.encode("utf-8", TEXT_ERRORS) if isinstance(secret, str) else secret


def compute_digest(secret: Secret, canonical: bytes) -> bytes:
    """Compute the raw 20-byte HMAC-SHA1 digest of a canonical string."""
    return hmac.new(_key(secret), canonical, hashlib.sha1).digest()


def compute_signature(secret: Secret, url: str, form: FormData | None = None) -> str:
    """
    Compute the base64 signature a signing party would send for a request.

    Args:
        secret: Shared auth token
        url: Full request URL
        form: POST form fields, or None for a request signed on its URL alone

    Returns:
        Base64-encoded HMAC-SHA1 digest
    """
    digest = compute_digest(secret, canonical_string(url, form))
    return base64.b64encode(digest).decode("ascii")


def decode_signature(signature: str | None) -> bytes:
    """Strictly decode a base64 signature header, returning b"" if malformed."""
    if not signature:
        return b""
    try:
        return base64.b64decode(signature, validate=True)
    except ValueError:
        # binascii.Error and non-ASCII input both land here
        return b""


def verify_signature(secret: Secret, canonical: bytes, signature: str | None) -> bool:
    """
    Verify a transmitted signature against a canonical string.

    The transmitted value is decoded and compared as raw bytes in constant
    time. Missing or malformed signatures never raise; they simply fail.

    Args:
        secret: Shared auth token
        canonical: Canonical request string
        signature: Base64 value of the signature header, if present

    Returns:
        True if the signature is authentic
    """
    computed = compute_digest(secret, canonical)
    received = decode_signature(signature)
    return hmac.compare_digest(computed, received)


def is_valid(
    secret: Secret,
    method: str,
    url: str,
    form: FormData | None,
    signature: str | None,
) -> bool:
    """
    Validate that a request was signed with the shared secret.

    The form only takes part for POST requests; for any other method the
    request is verified on its URL alone.
    """
    if method.upper() != "POST":
        form = None
    return verify_signature(secret, canonical_string(url, form), signature)
