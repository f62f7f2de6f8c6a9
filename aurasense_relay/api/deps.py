"""FastAPI dependencies: process-wide settings handed to the relay per request."""

from fastapi import Request

from aurasense_relay.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings built once at startup (main.py stores them on app.state). Tests override this dependency."""
    return request.app.state.settings
