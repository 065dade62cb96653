"""
twiliosig: Signature validation for Twilio-style webhooks.

Verifies that inbound webhook requests were signed by the platform holding
the shared auth token, and gates Starlette endpoints on that verdict.
"""

__version__ = "1.0.0"
