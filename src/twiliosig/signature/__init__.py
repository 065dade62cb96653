"""Webhook request signature validation."""

from twiliosig.signature.canonical import canonical_string, form_pairs, parse_form
from twiliosig.signature.gate import Endpoint, forbidden, is_valid_request, request_url, validate
from twiliosig.signature.middleware import SignatureMiddleware
from twiliosig.signature.verify import (
    SIGNATURE_HEADER,
    compute_digest,
    compute_signature,
    decode_signature,
    is_valid,
    verify_signature,
)

__all__ = [
    "SIGNATURE_HEADER",
    "Endpoint",
    "SignatureMiddleware",
    "canonical_string",
    "compute_digest",
    "compute_signature",
    "decode_signature",
    "forbidden",
    "form_pairs",
    "is_valid",
    "is_valid_request",
    "parse_form",
    "request_url",
    "validate",
    "verify_signature",
]
