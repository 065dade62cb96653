"""Canonical request string construction for webhook signatures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import parse_qs

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Undecodable bytes round-trip through str as lone surrogates
TEXT_ERRORS = "surrogateescape"

FormData = Mapping[str, Sequence[str]]


def form_pairs(form: FormData) -> list[tuple[str, str]]:
    """
    Flatten a parsed form into (name, value) pairs sorted by name.

    Only the first value of each field is kept; a field with no values
    contributes an empty string.

    Args:
        form: Mapping of field name to its list of values

    Returns:
        Pairs in code-point order of the field name
    """
    pairs = []
    for name, values in form.items():
        value = values[0] if values else ""
        pairs.append((name, value))
    return sorted(pairs, key=lambda pair: pair[0])


def canonical_string(url: str, form: FormData | None = None) -> bytes:
    """
    Build the byte string that the signing party computes its HMAC over.

    The URL is used exactly as received. When a form is given, every
    field name and its first value are appended in sorted order, with no
    delimiters anywhere.

    Args:
        url: Full request URL, including scheme, host and raw query string
        form: Parsed POST form, or None for requests without a signed body

    Returns:
        UTF-8 encoded canonical string, with surrogate-escaped bytes restored
    """
    parts = [url]
    if form:
        for name, value in form_pairs(form):
            parts.append(name)
            parts.append(value)
    return "".join(parts).encode("utf-8", TEXT_ERRORS)


def parse_form(body: bytes, content_type: str | None) -> dict[str, list[str]]:
    """
    Parse a URL-encoded request body into a field to values mapping.

    Bodies with any other content type yield an empty mapping. Bytes that
    are not valid UTF-8, raw or percent-encoded, are kept as surrogate
    escapes so they sign as the bytes that were sent. Parsing never fails.
    """
    if not body or not content_type:
        return {}

    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != FORM_CONTENT_TYPE:
        return {}

    text = body.decode("utf-8", TEXT_ERRORS)
    return parse_qs(text, keep_blank_values=True, encoding="utf-8", errors=TEXT_ERRORS)
