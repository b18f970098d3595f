"""Tests for the dmnlint HTTP API."""

import pytest
import requests

from dmn_builders import decision_table, dmn
from dmnlint import __version__
from dmnlint.api import ApiError, DmnLintApiServer, start_api_server
from dmnlint.config import DmnLintConfig


@pytest.fixture
def api_server():
    """Running API server on a free port."""
    config = DmnLintConfig(**{"validation": {"maxDocumentBytes": 4096}})
    server = start_api_server(config, port=0)
    yield server
    server.stop()


@pytest.fixture
def validate_url(api_server):
    return f"{api_server.url}/v1/dmns/validate"


@pytest.mark.integration
class TestValidateEndpoint:

    def test_json_body(self, validate_url, clean_dmn):
        response = requests.post(validate_url, json={"content": clean_dmn}, timeout=5)

        assert response.status_code == 200
        assert response.headers["Content-Type"].startswith("application/json")
        report = response.json()
        assert report["valid"] is True
        assert report["summary"]["errors"] == 0

    def test_raw_xml_body(self, validate_url):
        body = dmn(decision_table([["a", "b"], ["a", "b"]]))

        response = requests.post(validate_url, data=body.encode("utf-8"),
                                 headers={"Content-Type": "application/xml"}, timeout=5)

        assert response.status_code == 200
        report = response.json()
        assert report["valid"] is False
        assert [i["code"] for i in report["layers"]["business"]["issues"]] == ["BIZ-008"]

    def test_invalid_document_is_still_200(self, validate_url):
        response = requests.post(validate_url, json={"content": "<not-xml"}, timeout=5)

        assert response.status_code == 200
        assert "not well-formed" in response.json()["parseError"]

    def test_missing_content_field(self, validate_url):
        response = requests.post(validate_url, json={"xml": "<definitions/>"}, timeout=5)

        assert response.status_code == 400
        error = response.json()
        assert error["error"] == "bad_request"
        assert error["requestPath"] == "/v1/dmns/validate"
        assert "traceId" in error
        assert "timestamp" in error

    def test_malformed_json(self, validate_url):
        response = requests.post(validate_url, data=b"{oops",
                                 headers={"Content-Type": "application/json"}, timeout=5)

        assert response.status_code == 400

    def test_empty_body(self, validate_url):
        response = requests.post(validate_url, data=b"", timeout=5)

        assert response.status_code == 400

    def test_payload_too_large(self, validate_url):
        response = requests.post(validate_url, data=b"x" * 5000,
                                 headers={"Content-Type": "application/xml"}, timeout=5)

        assert response.status_code == 413
        assert response.json()["error"] == "payload_too_large"

    def test_identical_requests_identical_reports(self, validate_url, clean_dmn):
        first = requests.post(validate_url, json={"content": clean_dmn}, timeout=5).json()
        second = requests.post(validate_url, json={"content": clean_dmn}, timeout=5).json()

        assert first == second


@pytest.mark.integration
class TestRouting:

    def test_health(self, api_server):
        response = requests.get(f"{api_server.url}/health", timeout=5)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__

    def test_unknown_path(self, api_server):
        response = requests.get(f"{api_server.url}/v1/unknown", timeout=5)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_wrong_method(self, validate_url):
        assert requests.get(validate_url, timeout=5).status_code == 405
        assert requests.delete(validate_url, timeout=5).status_code == 405

    def test_cors_preflight(self, validate_url):
        response = requests.options(validate_url, timeout=5)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in response.headers["Access-Control-Allow-Methods"]


class TestServerLifecycle:

    def test_disabled_api_refuses_to_start(self):
        config = DmnLintConfig(**{"api": {"enabled": False}})

        with pytest.raises(ApiError) as exc_info:
            DmnLintApiServer(config).start(port=0)

        assert exc_info.value.status_code == 503

    def test_url_before_start(self):
        assert DmnLintApiServer(DmnLintConfig()).url is None

    def test_api_error_message(self):
        error = ApiError(400, "bad_request", "nothing sent")

        assert str(error) == "bad_request: nothing sent"
        assert error.status_code == 400
