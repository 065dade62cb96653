"""Error codes and the JSON error envelope for rejected webhooks."""

from __future__ import annotations

from starlette.responses import JSONResponse


class ErrorCode:
    FORBIDDEN = "forbidden"
    SERVER_MISCONFIGURED = "server_misconfigured"


ERROR_MESSAGES = {
    ErrorCode.FORBIDDEN: "Invalid request signature",
    ErrorCode.SERVER_MISCONFIGURED: "Auth token not configured",
}


class ConfigurationError(Exception):
    """Raised when a required setting is missing or invalid."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.setting = setting


def error_response(code: str, status_code: int, request_id: str | None = None) -> JSONResponse:
    """Render a validation failure, tagged with the request id when known."""
    error = {
        "code": code,
        "message": ERROR_MESSAGES[code],
    }
    if request_id:
        error["request_id"] = request_id
    return JSONResponse({"error": error}, status_code=status_code)
