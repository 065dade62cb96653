"""Tests for the demo webhook server routes."""

import pytest
from starlette.testclient import TestClient

from twiliosig.common.errors import ConfigurationError
from twiliosig.common.settings import Settings
from twiliosig.server.main import create_app
from twiliosig.signature.verify import compute_signature


def _signed(token: str, url: str, fields: dict[str, str]) -> str:
    return compute_signature(token, url, {k: [v] for k, v in fields.items()})


def test_voice_webhook_signed(settings, reference_token, reference_fields) -> None:
    app = create_app(settings)
    signature = _signed(reference_token, "http://testserver/voice", reference_fields)
    with TestClient(app) as client:
        response = client.post(
            "/voice", data=reference_fields, headers={"X-Twilio-Signature": signature}
        )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<Say>Hello +14158675309</Say>" in response.text
    assert "x-request-id" in response.headers


def test_voice_webhook_unsigned(settings, reference_fields) -> None:
    app = create_app(settings)
    with TestClient(app) as client:
        response = client.post("/voice", data=reference_fields)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"


def test_sms_webhook_gated_per_route(settings, reference_token) -> None:
    app = create_app(settings)
    fields = {"MessageSid": "SM123", "From": "+14158675309", "Body": "<hi & bye>"}
    signature = _signed(reference_token, "http://testserver/sms", fields)
    with TestClient(app) as client:
        ok = client.post("/sms", data=fields, headers={"X-Twilio-Signature": signature})
        rejected = client.post("/sms", data=fields)
    assert ok.status_code == 200
    assert "<Message>Received: &lt;hi &amp; bye&gt;</Message>" in ok.text
    assert rejected.status_code == 403
    assert rejected.text == "403 Forbidden"


def test_health_is_exempt(settings) -> None:
    app = create_app(settings)
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_create_app_requires_token() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        create_app(Settings(auth_token=None))
    assert exc_info.value.setting == "auth_token"
