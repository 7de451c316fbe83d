"""Pytest configuration."""

import os

# api.main loads settings at import time and the signing secret has no default
os.environ.setdefault("JWT_SECRET_KEY", "test-only-signing-secret")
