"""Starlette adapter and endpoint gate for signed webhook requests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from twiliosig.signature.canonical import TEXT_ERRORS, parse_form
from twiliosig.signature.verify import SIGNATURE_HEADER, Secret, is_valid

Endpoint = Callable[[Request], Awaitable[Response]]

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


async def forbidden(request: Request) -> Response:
    """Default rejection endpoint."""
    return PlainTextResponse("403 Forbidden", status_code=403)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", TEXT_ERRORS)


def _request_host(request: Request, scheme: str) -> str:
    # Starlette decodes header values as latin-1
    host = request.headers.get("host")
    if host:
        return _decode(host.encode("latin-1"))

    server = request.scope.get("server")
    if not server:
        return ""
    name, port = server
    if port is None or port == _DEFAULT_PORTS.get(scheme):
        return name
    return f"{name}:{port}"


def request_url(request: Request, public_base_url: str | None = None) -> str:
    """
    Reconstruct the URL the signing party saw for this request.

    Built from the raw ASGI scope only: the raw request path, so
    percent-escapes (including ``%3F`` and ``%23``) survive untouched, and
    the raw query string. Bytes that are not valid UTF-8 are carried as
    surrogate escapes and restored when the canonical string is encoded.
    When ``public_base_url`` is set it replaces the scheme and host, for
    apps behind a rewriting proxy.
    """
    scope = request.scope
    scheme = scope.get("scheme", "http")

    raw_path = scope.get("raw_path")
    if raw_path:
        path = _decode(raw_path.split(b"?", 1)[0])
    else:
        path = scope.get("root_path", "") + scope.get("path", "")

    if public_base_url:
        base = public_base_url.rstrip("/")
    else:
        base = f"{scheme}://{_request_host(request, scheme)}"

    full = f"{base}{path}"
    query = scope.get("query_string", b"")
    if query:
        full = f"{full}?{_decode(query)}"
    return full


async def is_valid_request(
    secret: Secret,
    request: Request,
    *,
    header_name: str = SIGNATURE_HEADER,
    public_base_url: str | None = None,
) -> bool:
    """
    Validate that a Starlette request is genuinely signed with ``secret``.

    Args:
        secret: Shared auth token
        request: Incoming request
        header_name: Header carrying the signature (looked up case-insensitively)
        public_base_url: Optional externally visible scheme://host

    Returns:
        True if the request is authentic
    """
    form = None
    if request.method == "POST":
        body = await request.body()
        form = parse_form(body, request.headers.get("content-type"))

    return is_valid(
        secret,
        request.method,
        request_url(request, public_base_url),
        form,
        request.headers.get(header_name),
    )


def validate(
    secret: Secret,
    protected: Endpoint,
    rejected: Endpoint | None = None,
    *,
    header_name: str = SIGNATURE_HEADER,
    public_base_url: str | None = None,
) -> Endpoint:
    """
    Wrap an endpoint so that it only handles authentic signed requests.

    Requests that fail validation are handed to ``rejected`` instead. When
    no rejection endpoint is given, they get a plain ``403 Forbidden``.
    A custom ``rejected`` is the place to log failures, or to call
    ``protected`` anyway while trialling validation.

    Example:
        routes = [
            Route("/voice", validate(auth_token, voice_webhook), methods=["POST"]),
        ]
    """
    on_failure = rejected if rejected is not None else forbidden

    async def endpoint(request: Request) -> Response:
        if await is_valid_request(
            secret,
            request,
            header_name=header_name,
            public_base_url=public_base_url,
        ):
            return await protected(request)
        return await on_failure(request)

    return endpoint
