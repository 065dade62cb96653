"""App-wide signature validation middleware."""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from twiliosig.common.errors import ErrorCode, error_response
from twiliosig.common.logging import get_logger
from twiliosig.common.settings import Settings
from twiliosig.signature.gate import is_valid_request

REQUEST_ID_HEADER = "X-Request-ID"


class SignatureMiddleware(BaseHTTPMiddleware):
    """
    Reject requests that do not carry a valid webhook signature.

    Every checked request gets a request id (taken from ``X-Request-ID`` or
    generated), which is echoed on the response and bound into the log
    context together with whether a signature header was present.
    """

    def __init__(self, app: ASGIApp, settings: Settings) -> None:
        super().__init__(app)
        self._settings = settings
        self._exempt_paths = set(settings.exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # request.url can fail on undecodable query bytes; the scope path cannot
        path = request.scope.get("path", "")
        if path in self._exempt_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        header_name = self._settings.signature_header
        log = get_logger(__name__).bind(
            request_id=request_id,
            method=request.method,
            path=path,
            signature_present=header_name in request.headers,
        )

        secret = self._settings.auth_token_bytes
        if secret is None:
            log.error("Auth token not configured")
            response: Response = error_response(
                ErrorCode.SERVER_MISCONFIGURED, status_code=500, request_id=request_id
            )
        elif await is_valid_request(
            secret,
            request,
            header_name=header_name,
            public_base_url=self._settings.public_base_url,
        ):
            response = await call_next(request)
        else:
            reason = "invalid_signature" if header_name in request.headers else "missing_signature"
            if self._settings.verification_enabled:
                log.warning("Rejected unsigned webhook request", reason=reason)
                response = error_response(ErrorCode.FORBIDDEN, status_code=403, request_id=request_id)
            else:
                log.warning("Signature validation failed, passing through", reason=reason)
                response = await call_next(request)

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
