"""
Extraction Routes Tests
=======================

Tests for POST /ai/extract-products, POST /ai/extract-products-bulk
and GET /health, with the LLM provider replaced through dependency
overrides.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from src.api.dependencies import get_app_settings, get_provider, get_provider_config
from src.api.main import create_app
from src.config.settings import Settings

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def isolated_settings(**overrides) -> Settings:
    values = {
        "ai_provider": None,
        "openai_api_key": None,
        "groq_api_key": None,
        "ollama_enabled": False,
        "token_budget_override": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def app():
    """Create FastAPI app instance."""
    return create_app()


@pytest.fixture
def fake_provider(fake_provider_factory, llm_response):
    return fake_provider_factory(
        [
            llm_response(
                {"name": "Bottle A", "category": "Bottle", "specifications": {"material": "HDPE"}},
                {"name": "Bottle A", "category": "Bottle"},
            )
        ]
    )


@pytest.fixture
def client(app, provider_config, fake_provider):
    """Create test client with a scripted provider."""
    app.dependency_overrides[get_app_settings] = lambda: isolated_settings()
    app.dependency_overrides[get_provider_config] = lambda: provider_config
    app.dependency_overrides[get_provider] = lambda: fake_provider
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


class TestExtractProducts:
    """Tests for POST /ai/extract-products."""

    def test_extracts_products_from_spreadsheet(self, client, xlsx_bytes, fake_provider) -> None:
        response = client.post(
            "/ai/extract-products",
            files={"file": ("products.xlsx", xlsx_bytes, XLSX_MIME)},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Successfully extracted 1 products from products.xlsx"
        assert body["summary"]["totalProducts"] == 1
        assert body["summary"]["categories"] == ["Bottle"]
        assert body["extractedTextLength"] > 0
        product = body["products"][0]
        assert product["name"] == "Bottle A"
        assert product["broaderCategory"] == "Base Packaging"
        assert product["categoryFilters"]["kind"] == "bottle"
        assert "Bottle A | HDPE | 250ml" in fake_provider.calls[0]["user_prompt"]
        assert "X-Request-ID" in response.headers

    def test_filename_used_when_mime_is_generic(self, client, pptx_bytes) -> None:
        response = client.post(
            "/ai/extract-products",
            files={"file": ("deck.pptx", pptx_bytes, "application/octet-stream")},
        )

        assert response.status_code == status.HTTP_200_OK

    def test_unsupported_type_rejected(self, client) -> None:
        response = client.post(
            "/ai/extract-products",
            files={"file": ("notes.txt", b"Bottle A", "text/plain")},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "UnsupportedFormatError"

    def test_file_too_large(self, app, client) -> None:
        app.dependency_overrides[get_app_settings] = lambda: isolated_settings(max_file_size_mb=1)

        response = client.post(
            "/ai/extract-products",
            files={"file": ("big.pdf", b"x" * (1024 * 1024 + 1), "application/pdf")},
        )

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert response.json()["details"]["max_size"] == 1024 * 1024

    def test_no_provider_configured(self, app, client, xlsx_bytes) -> None:
        del app.dependency_overrides[get_provider_config]
        del app.dependency_overrides[get_provider]

        response = client.post(
            "/ai/extract-products",
            files={"file": ("products.xlsx", xlsx_bytes, XLSX_MIME)},
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "ConfigurationError"


class TestExtractProductsBulk:
    """Tests for POST /ai/extract-products-bulk."""

    def test_per_file_errors_collected(self, client, xlsx_bytes) -> None:
        response = client.post(
            "/ai/extract-products-bulk",
            files=[
                ("files", ("products.xlsx", xlsx_bytes, XLSX_MIME)),
                ("files", ("notes.txt", b"hello", "text/plain")),
            ],
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["filesProcessed"] == 1
        assert [e["filename"] for e in body["errors"]] == ["notes.txt"]
        assert body["summary"]["totalProducts"] == 1

    def test_too_many_files(self, app, client, xlsx_bytes) -> None:
        app.dependency_overrides[get_app_settings] = lambda: isolated_settings(max_files_per_request=1)

        response = client.post(
            "/ai/extract-products-bulk",
            files=[
                ("files", ("a.xlsx", xlsx_bytes, XLSX_MIME)),
                ("files", ("b.xlsx", xlsx_bytes, XLSX_MIME)),
            ],
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestHealth:
    """Tests for GET /health."""

    def test_degraded_without_provider(self, client, monkeypatch) -> None:
        monkeypatch.setattr("src.api.main.get_settings", isolated_settings)

        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "degraded"

    def test_healthy_with_provider(self, client, monkeypatch) -> None:
        monkeypatch.setattr(
            "src.api.main.get_settings", lambda: isolated_settings(groq_api_key="gsk-test")
        )

        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["provider"] == "groq"
        assert body["model"] == "llama-3.1-70b-versatile"
