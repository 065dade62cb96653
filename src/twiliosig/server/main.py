"""Demo webhook server - Signed voice and messaging webhooks."""

from xml.sax.saxutils import escape

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
import uvicorn

from twiliosig.common.errors import ConfigurationError
from twiliosig.common.logging import get_logger, setup_logging
from twiliosig.common.settings import Settings, get_settings
from twiliosig.signature.canonical import parse_form
from twiliosig.signature.gate import validate
from twiliosig.signature.middleware import SignatureMiddleware

logger = get_logger(__name__)

TWIML_MEDIA_TYPE = "application/xml"


def _twiml(verb: str, text: str) -> Response:
    body = f'<?xml version="1.0" encoding="UTF-8"?><Response><{verb}>{escape(text)}</{verb}></Response>'
    return Response(body.encode("utf-8", "replace"), media_type=TWIML_MEDIA_TYPE)


async def _first_field(request: Request, name: str) -> str:
    form = parse_form(await request.body(), request.headers.get("content-type"))
    values = form.get(name) or [""]
    return values[0]


class WebhookServer:
    """Handlers for the demo webhook routes."""

    async def handle_voice(self, request: Request) -> Response:
        """Answer an inbound call."""
        caller = await _first_field(request, "From")
        logger.info("Voice webhook", call_sid=await _first_field(request, "CallSid"))
        return _twiml("Say", f"Hello {caller or 'caller'}")

    async def handle_sms(self, request: Request) -> Response:
        """Reply to an inbound message."""
        body = await _first_field(request, "Body")
        logger.info("Messaging webhook", message_sid=await _first_field(request, "MessageSid"))
        return _twiml("Message", f"Received: {body}")

    async def handle_health(self, request: Request) -> JSONResponse:
        """Health check."""
        return JSONResponse({"status": "healthy"})


def create_app(settings: Settings | None = None) -> Starlette:
    """Create the Starlette application."""
    settings = settings or get_settings()
    if settings.auth_token is None:
        raise ConfigurationError("TWILIOSIG_AUTH_TOKEN must be set", setting="auth_token")

    server = WebhookServer()

    # /sms is gated per-route; SignatureMiddleware covers everything else
    sms_endpoint = validate(
        settings.auth_token,
        server.handle_sms,
        header_name=settings.signature_header,
        public_base_url=settings.public_base_url,
    )

    routes = [
        Route("/voice", server.handle_voice, methods=["POST"]),
        Route("/sms", sms_endpoint, methods=["POST"]),
        Route("/health", server.handle_health, methods=["GET"]),
    ]

    app = Starlette(routes=routes)

    middleware_settings = settings.model_copy(
        update={"exempt_paths": (*settings.exempt_paths, "/sms")}
    )
    app.add_middleware(SignatureMiddleware, settings=middleware_settings)

    return app


def main():
    """Entry point for the demo webhook server."""
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
