"""Tests for settings checks and startup validation."""

from unittest.mock import patch

import pytest

from aurasense_relay.config import Settings
from aurasense_relay.core.errors import ConfigurationMissing
from aurasense_relay.main import app, lifespan


def test_missing_store_settings_lists_both():
    s = Settings(firestore_project_id="", firestore_api_key=" ")
    assert s.missing_store_settings() == ["FIRESTORE_PROJECT_ID", "FIRESTORE_API_KEY"]
    with pytest.raises(ConfigurationMissing) as exc_info:
        s.require_store_settings()
    assert exc_info.value.status_code == 500
    assert exc_info.value.missing == ["FIRESTORE_PROJECT_ID", "FIRESTORE_API_KEY"]


def test_require_store_settings_passes_when_set():
    Settings(firestore_project_id="p", firestore_api_key="k").require_store_settings()


def test_firestore_documents_url():
    s = Settings(firestore_project_id="proj", firestore_base_url="https://firestore.googleapis.com/v1/")
    assert s.firestore_documents_url == "https://firestore.googleapis.com/v1/projects/proj/databases/(default)/documents"


def test_document_path_requires_user_placeholder():
    with pytest.raises(RuntimeError):
        Settings(display_document_path="user_display/latest").validate_document_path()


@pytest.mark.asyncio
async def test_lifespan_refuses_production_without_credentials():
    prod = Settings(app_env="production", firestore_project_id="", firestore_api_key="")
    with patch("aurasense_relay.main.settings", prod):
        with pytest.raises(RuntimeError):
            async with lifespan(app):
                pass


@pytest.mark.asyncio
async def test_lifespan_starts_and_closes_http_client():
    from aurasense_relay.services import http_client

    await http_client.close_http_client()
    dev = Settings(firestore_project_id="p", firestore_api_key="k")
    with patch("aurasense_relay.main.settings", dev):
        async with lifespan(app):
            assert http_client.get_http_client() is not None
    with pytest.raises(RuntimeError):
        http_client.get_http_client()
