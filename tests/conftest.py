"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from twiliosig.common.settings import Settings


@pytest.fixture
def reference_token() -> str:
    """Auth token of the documented example request."""
    return "12345"


@pytest.fixture
def reference_url() -> str:
    """URL of the documented example request."""
    return "https://mycompany.com/myapp.php?foo=1&bar=2"


@pytest.fixture
def reference_signature() -> str:
    """Signature header of the documented example request."""
    return "RSOYDt4T1cUTdK1PDd93/VVr8B8="


@pytest.fixture
def reference_form() -> dict[str, list[str]]:
    """Form fields of the documented example voice request."""
    return {
        "Digits": ["1234"],
        "To": ["+18005551212"],
        "From": ["+14158675309"],
        "Caller": ["+14158675309"],
        "CallSid": ["CA1234567890ABCDE"],
    }


@pytest.fixture
def reference_fields(reference_form: dict[str, list[str]]) -> dict[str, Any]:
    """Same fields as a flat dict, for posting through a test client."""
    return {name: values[0] for name, values in reference_form.items()}


@pytest.fixture
def settings(reference_token: str) -> Settings:
    """Create test settings."""
    return Settings(
        auth_token=reference_token,
        signature_header="X-Twilio-Signature",
        public_base_url=None,
        exempt_paths=("/health",),
        verification_enabled=True,
    )
