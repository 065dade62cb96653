"""Demo webhook server protected by signature validation."""
