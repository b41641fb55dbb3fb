"""End-to-end tests for the HTTP API with a scripted gateway."""

import base64
import io
import json
import zipfile

import pytest
from fastapi.testclient import TestClient

from api.app import INTERNAL_ERROR_MESSAGE, create_app
from config import Settings
from errors import TransportError
from prompts import STATIC_RULES

from conftest import FakeGateway


def _members(data: bytes):
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name).decode("utf-8") for name in zf.namelist()}


@pytest.fixture
def gateway(settings):
    return FakeGateway(settings)


@pytest.fixture
def client(settings, gateway):
    return TestClient(create_app(settings=settings, gateway=gateway))


class TestGenerate:

    def test_success_returns_results_and_archive(self, client, payload):
        response = client.post("/api/generate", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["results"] == {"rules": "success", "prd": "success"}
        members = _members(base64.b64decode(body["zipData"]))
        for name in STATIC_RULES:
            assert f".cursor/rules/{name}" in members
        assert ".cursor/rules/project-specific-rules.mdc" in members
        assert members["docs/prd.md"].startswith("# prd")
        assert len(members) == len(STATIC_RULES) + 2

    def test_minimum_length_fields(self, client, payload):
        for field in ("projectDescription", "problemStatement", "features", "targetUsers"):
            payload[field] = "abcdefghij"

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 200
        assert response.json()["results"] == {"rules": "success", "prd": "success"}

    def test_partial_failure_still_200(self, settings, payload):
        gateway = FakeGateway(settings, failures={"prd": TransportError("openai", "timeout")})
        client = TestClient(create_app(settings=settings, gateway=gateway))

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["results"] == {"rules": "success", "prd": "error"}
        assert "docs/prd.md" not in _members(base64.b64decode(body["zipData"]))

    def test_total_failure_is_500(self, settings, payload):
        gateway = FakeGateway(settings, failures={
            "rules": TransportError("openai", "down"),
            "prd": TransportError("openai", "down"),
        })
        client = TestClient(create_app(settings=settings, gateway=gateway))

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to generate the selected dynamic content. Please check server logs."
        }

    def test_nothing_selected_returns_static_rules(self, client, payload):
        payload["generationOptions"] = {"rules": False, "specs": {}, "checklist": False}

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["results"] == {}
        assert len(_members(base64.b64decode(body["zipData"]))) == len(STATIC_RULES)

    def test_only_unknown_specs_is_500(self, client, gateway, payload):
        payload["generationOptions"] = {"rules": False, "specs": {"marketing": True}, "checklist": False}

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to generate the selected dynamic content")
        assert gateway.calls == []

    def test_missing_credential_is_500_naming_it(self, templates_dir, payload):
        settings = Settings(_env_file=None, templates_dir=str(templates_dir))
        gateway = FakeGateway(settings)
        client = TestClient(create_app(settings=settings, gateway=gateway))

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 500
        body = response.json()
        assert "OPENAI_API_KEY" in body["error"]
        assert "zipData" not in body
        assert gateway.calls == []

    def test_selected_provider_is_used(self, templates_dir, payload):
        settings = Settings(_env_file=None, templates_dir=str(templates_dir), anthropic_api_key="sk-ant")
        client = TestClient(create_app(settings=settings, gateway=FakeGateway(settings)))
        payload["selectedAIProvider"] = "anthropic"

        assert client.post("/api/generate", json=payload).status_code == 200
        payload["selectedAIProvider"] = "openai"
        assert client.post("/api/generate", json=payload).status_code == 500

    def test_malformed_json_is_400(self, client, gateway):
        response = client.post(
            "/api/generate", content=b"{broken", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON payload"}
        assert gateway.calls == []

    def test_schema_violation_is_400_listing_issues(self, client, payload):
        payload["projectDescription"] = "tiny"
        payload["problemStatement"] = ""

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error.startswith("Invalid input: ")
        assert "projectDescription" in error
        assert "problemStatement" in error

    def test_repeat_request_hits_shared_cache(self, client, gateway, payload):
        first = client.post("/api/generate", json=payload).json()
        second = client.post("/api/generate", json=payload).json()

        assert len(gateway.calls) == 2
        assert second["results"] == first["results"]
        assert _members(base64.b64decode(second["zipData"])) == _members(base64.b64decode(first["zipData"]))

    def test_unexpected_error_is_generic_500(self, settings, payload):
        class BrokenResolver:
            def load_static_rules(self):
                raise RuntimeError("resolver exploded")

        app = create_app(settings=settings, gateway=FakeGateway(settings), resolver=BrokenResolver())
        client = TestClient(app, raise_server_exceptions=False)
        payload["generationOptions"] = {"rules": False, "specs": {}, "checklist": False}

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 500
        assert response.json() == {"error": INTERNAL_ERROR_MESSAGE}


class TestGenerateZip:

    def test_archive_download(self, client, payload):
        response = client.post("/api/generate/zip", json=payload)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="cursor-starter-kit-')
        assert disposition.endswith('.zip"')
        assert json.loads(response.headers["x-generation-results"]) == {"rules": "success", "prd": "success"}
        assert "docs/prd.md" in _members(response.content)

    def test_errors_are_json(self, client):
        response = client.post("/api/generate/zip", content=b"nope")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON payload"}


class TestProviders:

    def test_reports_availability_only(self, client, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "g-secret")

        response = client.get("/api/providers")

        assert response.status_code == 200
        assert response.json() == {"providers": {"openai": True, "anthropic": False, "gemini": True}}
        assert "sk-test-openai" not in response.text
        assert "g-secret" not in response.text
